# crud/topics.py
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from models import Topic, Post, Category, User

TOPIC_FIELDS = (
    "tid", "cid", "uid", "title", "main_pid", "locked", "deleted",
    "timestamp", "lastposttime", "is_question", "is_solved", "solved_pid",
)


def _check_fields(fields: Iterable[str]):
    unknown = [f for f in fields if f not in TOPIC_FIELDS]
    if unknown:
        raise ValueError(f"unknown topic field(s): {', '.join(unknown)}")


def _to_dict(topic: Topic) -> Dict[str, Any]:
    return {field: getattr(topic, field) for field in TOPIC_FIELDS}


def get_topic(db: Session, tid: int) -> Optional[Topic]:
    return db.query(Topic).filter(Topic.tid == tid).first()


def topic_exists(db: Session, tid: int) -> bool:
    return db.query(Topic.tid).filter(Topic.tid == tid).first() is not None


def get_topic_data(db: Session, tid: int) -> Optional[Dict[str, Any]]:
    topic = get_topic(db, tid)
    return _to_dict(topic) if topic else None


def get_topic_data_by_pid(db: Session, pid: int) -> Optional[Dict[str, Any]]:
    topic = db.query(Topic).join(Post, Post.tid == Topic.tid).filter(Post.pid == pid).first()
    return _to_dict(topic) if topic else None


def get_topic_field(db: Session, tid: int, field: str):
    _check_fields([field])
    row = db.query(getattr(Topic, field)).filter(Topic.tid == tid).first()
    return row[0] if row else None


def get_topic_fields(db: Session, tid: int, fields: List[str]) -> Dict[str, Any]:
    _check_fields(fields)
    row = db.query(*[getattr(Topic, f) for f in fields]).filter(Topic.tid == tid).first()
    if not row:
        return {f: None for f in fields}
    return dict(zip(fields, row))


def set_topic_fields(db: Session, tid: int, values: Dict[str, Any]):
    _check_fields(values.keys())
    db.query(Topic).filter(Topic.tid == tid).update(values, synchronize_session="fetch")
    db.commit()


def delete_topic_fields(db: Session, tid: int, fields: List[str]):
    _check_fields(fields)
    db.query(Topic).filter(Topic.tid == tid).update({f: None for f in fields}, synchronize_session="fetch")
    db.commit()


def get_topics_by_tids(db: Session, tids: List[int], uid: int) -> List[Dict[str, Any]]:
    """Topic summaries for list views, in the order of ``tids``; missing tids are dropped."""
    if not tids:
        return []
    rows = (
        db.query(Topic, Category.name, User.username)
        .outerjoin(Category, Category.cid == Topic.cid)
        .outerjoin(User, User.id == Topic.uid)
        .filter(Topic.tid.in_(tids))
        .all()
    )
    counts = dict(
        db.query(Post.tid, func.count(Post.pid))
        .filter(Post.tid.in_(tids))
        .group_by(Post.tid)
        .all()
    )
    by_tid = {}
    for topic, category_name, username in rows:
        data = _to_dict(topic)
        # missing category renders as an empty object
        data["category"] = {"cid": topic.cid, "name": category_name} if category_name is not None else {}
        data["user"] = {"uid": topic.uid, "username": username or "[[global:guest]]"}
        data["postcount"] = counts.get(topic.tid, 0)
        data["icons"] = []
        by_tid[topic.tid] = data
    return [by_tid[int(tid)] for tid in tids if int(tid) in by_tid]


def calculate_topic_indices(topics: List[Dict[str, Any]], start: int):
    for i, topic in enumerate(topics):
        if topic:
            topic["index"] = start + i
