# crud/sorted_sets.py
from typing import Iterable, List, Optional
from sqlalchemy import func, desc
from sqlalchemy.orm import Session
from models import SortedSetEntry


def _apply_range(query, start: int, stop: int):
    start = max(0, start)
    if stop < 0:
        return query.offset(start)
    if stop < start:
        return None
    return query.offset(start).limit(stop - start + 1)


def sorted_set_add(db: Session, key: str, score: float, value: int):
    entry = db.get(SortedSetEntry, (key, int(value)))
    if entry:
        entry.score = score
    else:
        db.add(SortedSetEntry(key=key, value=int(value), score=score))
    db.commit()


def sorted_set_remove(db: Session, key: str, value: int):
    db.query(SortedSetEntry).filter(
        SortedSetEntry.key == key,
        SortedSetEntry.value == int(value),
    ).delete(synchronize_session=False)
    db.commit()


def sorted_sets_remove(db: Session, keys: Iterable[str], value: int):
    db.query(SortedSetEntry).filter(
        SortedSetEntry.key.in_(list(keys)),
        SortedSetEntry.value == int(value),
    ).delete(synchronize_session=False)
    db.commit()


def get_sorted_set_range(db: Session, key: str, start: int, stop: int) -> List[int]:
    query = (
        db.query(SortedSetEntry.value)
        .filter(SortedSetEntry.key == key)
        .order_by(SortedSetEntry.score.asc(), SortedSetEntry.value.asc())
    )
    query = _apply_range(query, start, stop)
    return [value for (value,) in query.all()] if query is not None else []


def get_sorted_set_rev_range(db: Session, key: str, start: int, stop: int) -> List[int]:
    query = (
        db.query(SortedSetEntry.value)
        .filter(SortedSetEntry.key == key)
        .order_by(SortedSetEntry.score.desc(), SortedSetEntry.value.desc())
    )
    query = _apply_range(query, start, stop)
    return [value for (value,) in query.all()] if query is not None else []


def get_sorted_set_rev_intersect(db: Session, sets: List[str], start: int, stop: int) -> List[int]:
    """Members present in every set, highest summed score first."""
    keys = list(dict.fromkeys(sets))
    if not keys:
        return []
    total = func.sum(SortedSetEntry.score).label("total")
    query = (
        db.query(SortedSetEntry.value, total)
        .filter(SortedSetEntry.key.in_(keys))
        .group_by(SortedSetEntry.value)
        .having(func.count(SortedSetEntry.key) == len(keys))
        .order_by(desc("total"), SortedSetEntry.value.desc())
    )
    query = _apply_range(query, start, stop)
    return [value for (value, _) in query.all()] if query is not None else []


def sorted_set_card(db: Session, key: str) -> int:
    return db.query(func.count(SortedSetEntry.value)).filter(SortedSetEntry.key == key).scalar() or 0


def sorted_set_score(db: Session, key: str, value: int) -> Optional[float]:
    entry = db.get(SortedSetEntry, (key, int(value)))
    return entry.score if entry else None


def is_sorted_set_member(db: Session, key: str, value: int) -> bool:
    return sorted_set_score(db, key, value) is not None
