import pytest

from crud import topics
from qanda import indexes, plugin
from qanda.config import QandAConfig
from qanda.hooks import (
    AdminNavigation, ClientConfig, ComposerPush, HookRegistry, Navigation, PostTools,
    RewardConditions, ThreadTools, TopicCreated, TopicEdited, TopicEventTypes, TopicPurged, TopicSaved,
)
from qanda.toggles import toggle_question_status, toggle_solved
from conftest import index_of


def _created(ctx, forum, data, cid=None):
    category_cid = cid or forum.category("Help").cid
    topic = forum.topic(category_cid)
    ctx.hooks.fire(TopicCreated(topic=topics.get_topic_data(ctx.db, topic.tid), data=data), ctx)
    return topic


def test_create_with_question_marker(ctx, forum, db):
    topic = _created(ctx, forum, {"is_question": True})

    assert topics.get_topic_fields(db, topic.tid, ["is_question", "is_solved"]) == {"is_question": 1, "is_solved": 0}
    assert index_of(db, topic.tid) == indexes.UNSOLVED_SET


def test_create_without_marker_stays_normal(ctx, forum, db):
    topic = _created(ctx, forum, {"title": "hello"})

    assert topics.get_topic_field(db, topic.tid, "is_question") is None
    assert index_of(db, topic.tid) is None


def test_force_questions_setting(ctx, forum, db):
    ctx.config.force_questions = True

    topic = _created(ctx, forum, {})

    assert topics.get_topic_field(db, topic.tid, "is_question") == 1


def test_default_category_setting(ctx, forum, db):
    help_desk = forum.category("Help desk")
    chat = forum.category("Chat")
    ctx.config.default_cids = [help_desk.cid]

    asked = _created(ctx, forum, {}, cid=help_desk.cid)
    chatted = _created(ctx, forum, {}, cid=chat.cid)

    assert topics.get_topic_field(db, asked.tid, "is_question") == 1
    assert topics.get_topic_field(db, chatted.tid, "is_question") is None


def test_save_reindexes_questions(ctx, forum, db):
    topic = _created(ctx, forum, {"is_question": True})
    db.query(type(topic)).filter_by(tid=topic.tid).update({"is_solved": 1})
    db.commit()
    indexes.purge_topic(db, topic.tid)

    ctx.hooks.fire(TopicSaved(topic=topics.get_topic_data(db, topic.tid)), ctx)

    assert index_of(db, topic.tid) == indexes.SOLVED_SET


def test_edit_toggles_question_flag(ctx, forum, db):
    topic = forum.topic(forum.category("Help").cid)

    ctx.hooks.fire(TopicEdited(topic=topics.get_topic_data(db, topic.tid), data={"is_question": 1}, uid=1), ctx)
    assert topics.get_topic_field(db, topic.tid, "is_question") == 1

    ctx.hooks.fire(TopicEdited(topic=topics.get_topic_data(db, topic.tid), data={"is_question": False}, uid=1), ctx)
    assert topics.get_topic_field(db, topic.tid, "is_question") is None


def test_edit_without_flag_keeps_question(ctx, forum, db):
    topic = _created(ctx, forum, {"is_question": True})

    ctx.hooks.fire(TopicEdited(topic=topics.get_topic_data(db, topic.tid), data={"title": "renamed"}, uid=1), ctx)

    assert topics.get_topic_field(db, topic.tid, "is_question") == 1


def test_purge_cleans_indexes(ctx, forum, db):
    topic = _created(ctx, forum, {"is_question": True})

    ctx.hooks.fire(TopicPurged(topic=topics.get_topic_data(db, topic.tid)), ctx)

    assert index_of(db, topic.tid) is None


def test_thread_tools(ctx, forum, db):
    topic = forum.topic(forum.category("Help").cid)

    normal = ctx.hooks.fire(ThreadTools(topic=topics.get_topic_data(db, topic.tid)), ctx).tools
    assert [t["title"] for t in normal] == ["[[qanda:thread.tool.as_question]]"]

    toggle_question_status(ctx, 1, topic.tid)
    question = ctx.hooks.fire(ThreadTools(topic=topics.get_topic_data(db, topic.tid)), ctx).tools
    assert [t["title"] for t in question] == ["[[qanda:thread.tool.mark_solved]]", "[[qanda:thread.tool.make_normal]]"]

    toggle_solved(ctx, 1, topic.tid)
    solved = ctx.hooks.fire(ThreadTools(topic=topics.get_topic_data(db, topic.tid)), ctx).tools
    assert solved[0]["title"] == "[[qanda:thread.tool.mark_unsolved]]"
    assert "topic-solved" in solved[0]["class"]


def test_post_tools_offer_mark_correct(ctx, forum, db):
    owner = forum.user("owner")
    stranger = forum.user("stranger")
    topic = forum.topic(forum.category("Help").cid, owner.id)
    reply = forum.post(topic.tid, stranger.id)
    toggle_question_status(ctx, owner.id, topic.tid)

    def tools(pid, uid):
        return [t["action"] for t in ctx.hooks.fire(PostTools(pid=pid, uid=uid), ctx).tools]

    assert tools(reply.pid, owner.id) == ["qanda/post-solved"]
    assert tools(topic.main_pid, owner.id) == []
    assert tools(reply.pid, stranger.id) == []

    toggle_solved(ctx, owner.id, topic.tid, reply.pid)
    assert tools(reply.pid, owner.id) == []


def test_composer_push_exposes_question_flag(ctx, forum, db):
    topic = _created(ctx, forum, {"is_question": True})

    event = ctx.hooks.fire(ComposerPush(pid=topic.main_pid, data={}), ctx)

    assert event.data["is_question"] == 1


def test_registration_hooks(ctx):
    conditions = ctx.hooks.fire(RewardConditions(), ctx).conditions
    types = ctx.hooks.fire(TopicEventTypes(types={"pin": {"icon": "fa-thumb-tack"}}), ctx).types
    menu = ctx.hooks.fire(Navigation(), ctx).menu
    admin = ctx.hooks.fire(AdminNavigation(), ctx).plugins

    assert conditions == [{"name": "Times questions accepted", "condition": "qanda/question.accepted"}]
    assert set(types) == {"pin", "qanda.as_question", "qanda.make_normal", "qanda.solved", "qanda.unsolved"}
    assert [m["route"] for m in menu] == ["/unsolved", "/solved"]
    assert admin[0]["route"] == "/plugins/question-and-answer"


def test_client_config_reflects_current_settings(db, hooks):
    from qanda.hooks import PluginContext

    ctx = PluginContext(db=db, config=QandAConfig(toggle_lock=True, default_cids=[3]), hooks=hooks)

    config = ctx.hooks.fire(ClientConfig(), ctx).config

    assert config["question-and-answer"] == {"force_questions": False, "toggle_lock": True, "default_cids": [3]}


def test_registry_runs_handlers_by_priority(ctx):
    registry = HookRegistry()
    calls = []
    registry.register(Navigation, lambda e, c: calls.append("late"), priority=20)
    registry.register(Navigation, lambda e, c: calls.append("early"), priority=5)
    registry.register(Navigation, lambda e, c: Navigation(menu=["replaced"]))

    result = registry.fire(Navigation(), ctx)

    assert calls == ["early", "late"]
    assert result.menu == ["replaced"]


def test_registry_propagates_handler_errors(ctx):
    registry = HookRegistry()

    def boom(event, _):
        raise RuntimeError("store down")

    registry.register(TopicSaved, boom)

    with pytest.raises(RuntimeError):
        registry.fire(TopicSaved(topic={}), ctx)


def test_plugin_register_returns_registry():
    registry = HookRegistry()

    assert plugin.register(registry) is registry
    assert registry.handlers(TopicCreated) == [plugin.on_topic_create]
