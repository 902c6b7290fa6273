from crud import events, sorted_sets, topics, users
from models import Reward, RewardClaim
from qanda import indexes
from qanda.hooks import TopicQuestionToggled, TopicSolvedToggled
from qanda.toggles import ACCEPTED_CONDITION, toggle_question_status, toggle_solved
from conftest import index_of


def _event_types(db, tid):
    return [e["type"] for e in events.get_topic_events(db, tid)]


def _question(ctx, forum):
    owner = forum.user("asker")
    category = forum.category("Help")
    topic = forum.topic(category.cid, owner.id, title="How do I?")
    toggle_question_status(ctx, owner.id, topic.tid)
    return owner, category, topic


def test_marking_a_topic_as_question(ctx, forum, db):
    owner = forum.user("asker")
    topic = forum.topic(forum.category("Help").cid, owner.id)
    fired = []
    ctx.hooks.register(TopicQuestionToggled, lambda event, _: fired.append(event))

    assert toggle_question_status(ctx, owner.id, topic.tid) is True

    assert topics.get_topic_fields(db, topic.tid, ["is_question", "is_solved", "solved_pid"]) == {
        "is_question": 1, "is_solved": 0, "solved_pid": 0,
    }
    assert index_of(db, topic.tid) == indexes.UNSOLVED_SET
    assert _event_types(db, topic.tid) == ["qanda.as_question"]
    assert fired == [TopicQuestionToggled(uid=owner.id, tid=topic.tid, is_question=True)]


def test_making_a_question_normal_deletes_fields(ctx, forum, db):
    owner, _, topic = _question(ctx, forum)
    toggle_solved(ctx, owner.id, topic.tid, topic.main_pid)

    assert toggle_question_status(ctx, owner.id, topic.tid) is False

    assert topics.get_topic_fields(db, topic.tid, ["is_question", "is_solved", "solved_pid"]) == {
        "is_question": None, "is_solved": None, "solved_pid": None,
    }
    assert not sorted_sets.is_sorted_set_member(db, indexes.SOLVED_SET, topic.tid)
    assert not sorted_sets.is_sorted_set_member(db, indexes.UNSOLVED_SET, topic.tid)
    assert _event_types(db, topic.tid)[-1] == "qanda.make_normal"


def test_solving_with_an_answer(ctx, forum, db):
    owner, _, topic = _question(ctx, forum)
    helper = forum.user("helper")
    answer = forum.post(topic.tid, helper.id, "Try turning it off and on again")
    fired = []
    ctx.hooks.register(TopicSolvedToggled, lambda event, _: fired.append(event))

    assert toggle_solved(ctx, owner.id, topic.tid, answer.pid) is True

    assert topics.get_topic_fields(db, topic.tid, ["is_solved", "solved_pid"]) == {"is_solved": 1, "solved_pid": answer.pid}
    assert index_of(db, topic.tid) == indexes.SOLVED_SET
    assert not sorted_sets.is_sorted_set_member(db, indexes.UNSOLVED_SET, topic.tid)
    assert _event_types(db, topic.tid).count("qanda.solved") == 1
    assert users.get_user_field(db, helper.id, ACCEPTED_CONDITION) == 1
    assert users.get_user_field(db, owner.id, ACCEPTED_CONDITION) == 0
    assert fired == [TopicSolvedToggled(uid=owner.id, tid=topic.tid, pid=answer.pid, is_solved=True)]


def test_toggle_solved_twice_restores_state(ctx, forum, db):
    owner, _, topic = _question(ctx, forum)
    answer = forum.post(topic.tid, owner.id)

    toggle_solved(ctx, owner.id, topic.tid, answer.pid)
    assert toggle_solved(ctx, owner.id, topic.tid, answer.pid) is False

    assert topics.get_topic_fields(db, topic.tid, ["is_solved", "solved_pid"]) == {"is_solved": 0, "solved_pid": 0}
    assert index_of(db, topic.tid) == indexes.UNSOLVED_SET
    assert _event_types(db, topic.tid)[-2:] == ["qanda.solved", "qanda.unsolved"]


def test_solving_without_pid_skips_reward(ctx, forum, db):
    owner, _, topic = _question(ctx, forum)

    assert toggle_solved(ctx, owner.id, topic.tid) is True

    assert topics.get_topic_field(db, topic.tid, "solved_pid") is None
    assert users.get_user_field(db, owner.id, ACCEPTED_CONDITION) == 0


def test_toggle_lock_follows_solved_state(ctx, forum, db):
    ctx.config.toggle_lock = True
    owner, _, topic = _question(ctx, forum)

    toggle_solved(ctx, owner.id, topic.tid)
    assert topics.get_topic_field(db, topic.tid, "locked") == 1

    toggle_solved(ctx, owner.id, topic.tid)
    assert topics.get_topic_field(db, topic.tid, "locked") == 0


def test_lock_untouched_when_setting_off(ctx, forum, db):
    owner, _, topic = _question(ctx, forum)

    toggle_solved(ctx, owner.id, topic.tid)

    assert topics.get_topic_field(db, topic.tid, "locked") == 0


def test_accepted_answer_grants_reward_once(ctx, forum, db):
    owner, category, topic = _question(ctx, forum)
    helper = forum.user("helper")
    db.add(Reward(condition=ACCEPTED_CONDITION, threshold=1, claimable=1, reward_name="Helpful"))
    db.commit()
    other = forum.topic(category.cid, owner.id)
    toggle_question_status(ctx, owner.id, other.tid)

    toggle_solved(ctx, owner.id, topic.tid, forum.post(topic.tid, helper.id).pid)
    toggle_solved(ctx, owner.id, other.tid, forum.post(other.tid, helper.id).pid)

    assert users.get_user_field(db, helper.id, ACCEPTED_CONDITION) == 2
    assert db.query(RewardClaim).filter(RewardClaim.uid == helper.id).count() == 1


def test_solving_a_normal_topic_keeps_it_out_of_indexes(ctx, forum, db):
    owner = forum.user("poster")
    topic = forum.topic(forum.category("General").cid, owner.id)

    toggle_solved(ctx, owner.id, topic.tid)

    assert index_of(db, topic.tid) is None
