# crud/privileges.py
from typing import Any, Dict, List
from sqlalchemy import or_
from sqlalchemy.orm import Session
from models import Category, CategoryPrivilege, Topic
from crud import users


def _is_admin_or_global_mod(db: Session, uid: int) -> bool:
    user = users.get_user(db, uid)
    return bool(user and (user.is_admin or user.is_global_mod))


def filter_cids(db: Session, privilege: str, cids: List[int], uid: int) -> List[int]:
    """Subset of ``cids`` (order kept, duplicates dropped) the user holds ``privilege`` in."""
    cids = list(dict.fromkeys(int(cid) for cid in cids if str(cid).lstrip("-").isdigit()))
    if not cids:
        return []
    if _is_admin_or_global_mod(db, uid):
        allowed = {cid for (cid,) in db.query(Category.cid).filter(Category.cid.in_(cids))}
        return [cid for cid in cids if cid in allowed]

    grantees = [CategoryPrivilege.uid.is_(None)]
    if uid and uid > 0:
        grantees.append(CategoryPrivilege.uid == uid)
    rows = (
        db.query(CategoryPrivilege.cid)
        .filter(
            CategoryPrivilege.cid.in_(cids),
            or_(*grantees),
            CategoryPrivilege.privilege.in_([privilege, "moderate"]),
        )
        .distinct()
        .all()
    )
    allowed = {cid for (cid,) in rows}
    return [cid for cid in cids if cid in allowed]


def filter_tids(db: Session, privilege: str, tids: List[int], uid: int) -> List[int]:
    tids = [int(tid) for tid in tids]
    if not tids:
        return []
    topics = {tid: (cid, deleted) for tid, cid, deleted in db.query(Topic.tid, Topic.cid, Topic.deleted).filter(Topic.tid.in_(tids))}
    cids = filter_cids(db, privilege, [cid for cid, _ in topics.values()], uid)
    allowed_cids = set(cids)
    moderated = {cid for cid in allowed_cids if users.is_moderator(db, uid, cid)}
    can_view_deleted = _is_admin_or_global_mod(db, uid)
    out = []
    for tid in tids:
        if tid not in topics:
            continue
        cid, deleted = topics[tid]
        if cid not in allowed_cids:
            continue
        if deleted and not (can_view_deleted or cid in moderated):
            continue
        out.append(tid)
    return out


def can_edit(db: Session, tid: int, uid: int) -> bool:
    """Admins, moderators of the topic's category and the topic owner; never guests."""
    if not uid or uid <= 0:
        return False
    topic = db.query(Topic.cid, Topic.uid).filter(Topic.tid == tid).first()
    if not topic:
        return False
    cid, owner = topic
    if _is_admin_or_global_mod(db, uid) or users.is_moderator(db, uid, cid):
        return True
    return owner == uid and bool(filter_cids(db, "read", [cid], uid))


def get_topic_privileges(db: Session, tid: int, uid: int) -> Dict[str, Any]:
    topic = db.query(Topic.cid, Topic.uid).filter(Topic.tid == tid).first()
    cid = topic[0] if topic else None
    is_admin_or_mod = _is_admin_or_global_mod(db, uid) or (cid is not None and users.is_moderator(db, uid, cid))
    return {
        "tid": tid,
        "read": bool(cid is not None and filter_cids(db, "read", [cid], uid)),
        "view_deleted": is_admin_or_mod,
        "is_admin_or_mod": is_admin_or_mod,
        "editable": can_edit(db, tid, uid),
        "uid": uid,
    }


def modify_posts_by_privilege(topic_data: Dict[str, Any], topic_privileges: Dict[str, Any]):
    for post in topic_data.get("posts", []):
        if not post:
            continue
        own = bool(topic_privileges.get("uid")) and post.get("uid") == topic_privileges.get("uid")
        post["display_edit_tools"] = bool(topic_privileges.get("is_admin_or_mod") or own)
        post["display_moderator_tools"] = bool(topic_privileges.get("is_admin_or_mod"))
        if post.get("deleted") and not (topic_privileges.get("view_deleted") or own):
            post["content"] = "[[topic:post_is_deleted]]"
