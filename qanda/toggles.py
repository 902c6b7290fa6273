# qanda/toggles.py
import logging
from typing import Any, Optional
from crud import topics, posts, users, rewards, events
from qanda import indexes
from qanda.hooks import PluginContext, TopicSolvedToggled, TopicQuestionToggled

logger = logging.getLogger("qanda.toggles")

ACCEPTED_CONDITION = "qanda/question.accepted"

EVENT_AS_QUESTION = "qanda.as_question"
EVENT_MAKE_NORMAL = "qanda.make_normal"
EVENT_SOLVED = "qanda.solved"
EVENT_UNSOLVED = "qanda.unsolved"


def is_set(value: Any) -> bool:
    """Stored flags are 0/1 integers, NULL when absent; clients may send bools or strings."""
    if isinstance(value, bool):
        return value
    try:
        return int(value) == 1
    except (TypeError, ValueError):
        return False


def toggle_solved(ctx: PluginContext, uid: int, tid: int, pid: Optional[int] = None) -> bool:
    """Flip the solved state of ``tid``; ``pid`` becomes the accepted answer when solving."""
    db = ctx.db
    current = topics.get_topic_fields(db, tid, ["is_solved", "is_question"])
    was_solved = is_set(current["is_solved"])

    updated = {"is_solved": 0, "solved_pid": 0} if was_solved else {"is_solved": 1, "solved_pid": pid}
    if ctx.config.toggle_lock:
        updated["locked"] = 0 if was_solved else 1
    topics.set_topic_fields(db, tid, updated)

    indexes.sync_topic_index(db, tid, is_set(current["is_question"]), not was_solved)
    events.log_topic_event(db, tid, EVENT_UNSOLVED if was_solved else EVENT_SOLVED, uid)

    if not was_solved and pid:
        answer = posts.get_post_data(db, pid)
        author = answer["uid"] if answer else None
        if author:
            rewards.check_condition_and_reward_user(
                db,
                uid=author,
                condition=ACCEPTED_CONDITION,
                method=lambda: users.increment_user_field_by(db, author, ACCEPTED_CONDITION, 1),
            )

    logger.info("Topic %s marked %s by uid %s", tid, "unsolved" if was_solved else "solved", uid)
    ctx.hooks.fire(TopicSolvedToggled(uid=uid, tid=tid, pid=pid, is_solved=not was_solved), ctx)
    return not was_solved


def toggle_question_status(ctx: PluginContext, uid: int, tid: int) -> bool:
    db = ctx.db
    was_question = is_set(topics.get_topic_field(db, tid, "is_question"))

    if not was_question:
        topics.set_topic_fields(db, tid, {"is_question": 1, "is_solved": 0, "solved_pid": 0})
        indexes.sync_topic_index(db, tid, True, False)
        events.log_topic_event(db, tid, EVENT_AS_QUESTION, uid)
    else:
        topics.delete_topic_fields(db, tid, ["is_question", "is_solved", "solved_pid"])
        indexes.sync_topic_index(db, tid, False, False)
        events.log_topic_event(db, tid, EVENT_MAKE_NORMAL, uid)

    logger.info("Topic %s %s by uid %s", tid, "made normal" if was_question else "marked as question", uid)
    ctx.hooks.fire(TopicQuestionToggled(uid=uid, tid=tid, is_question=not was_question), ctx)
    return not was_question
