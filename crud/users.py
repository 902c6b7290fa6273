# crud/users.py
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.orm import Session
from models import User, UserField, CategoryPrivilege

DEFAULT_TOPICS_PER_PAGE = 20


@dataclass
class UserSettings:
    topics_per_page: int = DEFAULT_TOPICS_PER_PAGE


def get_user(db: Session, uid: int) -> Optional[User]:
    if not uid or uid <= 0:
        return None
    return db.query(User).filter(User.id == uid).first()


def get_settings(db: Session, uid: int) -> UserSettings:
    user = get_user(db, uid)
    per_page = user.topics_per_page if user and user.topics_per_page else DEFAULT_TOPICS_PER_PAGE
    return UserSettings(topics_per_page=max(1, per_page))


def is_admin(db: Session, uid: int) -> bool:
    user = get_user(db, uid)
    return bool(user and user.is_admin)


def is_moderator(db: Session, uid: int, cid: int) -> bool:
    if not uid or uid <= 0:
        return False
    return db.query(CategoryPrivilege.id).filter(
        CategoryPrivilege.cid == cid,
        CategoryPrivilege.privilege == "moderate",
        CategoryPrivilege.uid == uid,
    ).first() is not None


def is_privileged(db: Session, uid: int) -> bool:
    """Admins, global moderators and moderators of any category."""
    user = get_user(db, uid)
    if not user:
        return False
    if user.is_admin or user.is_global_mod:
        return True
    return db.query(CategoryPrivilege.id).filter(
        CategoryPrivilege.privilege == "moderate",
        CategoryPrivilege.uid == uid,
    ).first() is not None


def get_user_field(db: Session, uid: int, field: str) -> int:
    row = db.get(UserField, (uid, field))
    return row.value if row else 0


def increment_user_field_by(db: Session, uid: int, field: str, value: int) -> int:
    row = db.get(UserField, (uid, field))
    if row:
        row.value = (row.value or 0) + value
    else:
        row = UserField(uid=uid, field=field, value=value)
        db.add(row)
    db.commit()
    return row.value
