# qanda/indexes.py
from typing import Optional
from sqlalchemy.orm import Session
from crud import sorted_sets
from models import now_ms

SOLVED_SET = "topics:solved"
UNSOLVED_SET = "topics:unsolved"


def list_set(list_type: str) -> str:
    if list_type not in ("solved", "unsolved"):
        raise ValueError(f"unknown list type: {list_type}")
    return f"topics:{list_type}"


def sync_topic_index(db: Session, tid: int, is_question: bool, is_solved: bool, score: Optional[float] = None) -> Optional[str]:
    """
    Put ``tid`` into the index matching its flags and take it out of the other.
    Non-questions end up in neither. Each write commits on its own, so a
    failure between them can leave membership inconsistent until the next sync.
    """
    if not is_question:
        sorted_sets.sorted_sets_remove(db, [SOLVED_SET, UNSOLVED_SET], tid)
        return None

    target, other = (SOLVED_SET, UNSOLVED_SET) if is_solved else (UNSOLVED_SET, SOLVED_SET)
    sorted_sets.sorted_set_add(db, target, score if score is not None else now_ms(), tid)
    sorted_sets.sorted_set_remove(db, other, tid)
    return target


def purge_topic(db: Session, tid: int):
    sorted_sets.sorted_sets_remove(db, [SOLVED_SET, UNSOLVED_SET], tid)


def index_summary(db: Session, oldest: int = 5) -> dict:
    """Index sizes plus the unsolved questions that have waited longest."""
    return {
        "solved": sorted_sets.sorted_set_card(db, SOLVED_SET),
        "unsolved": sorted_sets.sorted_set_card(db, UNSOLVED_SET),
        "oldest_unsolved": sorted_sets.get_sorted_set_range(db, UNSOLVED_SET, 0, oldest - 1),
    }
