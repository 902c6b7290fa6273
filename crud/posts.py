# crud/posts.py
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from models import Post, User

POST_FIELDS = ("pid", "tid", "uid", "content", "votes", "deleted", "timestamp")


def _to_dict(post: Post) -> Dict[str, Any]:
    return {field: getattr(post, field) for field in POST_FIELDS}


def get_post_data(db: Session, pid: int) -> Optional[Dict[str, Any]]:
    post = db.query(Post).filter(Post.pid == pid).first()
    return _to_dict(post) if post else None


def get_post_field(db: Session, pid: int, field: str):
    if field not in POST_FIELDS:
        raise ValueError(f"unknown post field: {field}")
    row = db.query(getattr(Post, field)).filter(Post.pid == pid).first()
    return row[0] if row else None


def get_posts_by_pids(db: Session, pids: List[Optional[int]], uid: int) -> List[Optional[Dict[str, Any]]]:
    """One batched read; keeps the order of ``pids`` and yields None for anything missing."""
    wanted = [int(pid) for pid in pids if pid]
    found = {}
    if wanted:
        found = {post.pid: _to_dict(post) for post in db.query(Post).filter(Post.pid.in_(wanted)).all()}
    return [found.get(int(pid)) if pid else None for pid in pids]


def get_topic_post_pids(db: Session, tid: int, start: int, stop: int) -> List[int]:
    query = db.query(Post.pid).filter(Post.tid == tid).order_by(Post.timestamp.asc(), Post.pid.asc())
    query = query.offset(max(0, start))
    if stop >= 0:
        query = query.limit(stop - start + 1)
    return [pid for (pid,) in query.all()]


def get_top_voted_pid(db: Session, tid: int) -> Optional[int]:
    row = (
        db.query(Post.pid)
        .filter(Post.tid == tid, Post.deleted == 0)
        .order_by(Post.votes.desc(), Post.pid.asc())
        .first()
    )
    return row[0] if row else None


def add_post_data(db: Session, posts: List[Optional[Dict[str, Any]]], uid: int) -> List[Optional[Dict[str, Any]]]:
    uids = {p["uid"] for p in posts if p and p.get("uid")}
    users = {}
    if uids:
        users = {u.id: u for u in db.query(User).filter(User.id.in_(uids)).all()}
    for post in posts:
        if not post:
            continue
        author = users.get(post.get("uid"))
        post["user"] = {
            "uid": author.id if author else 0,
            "username": author.username if author else "[[global:guest]]",
        }
        post["self_post"] = bool(uid) and post.get("uid") == uid
    return posts
