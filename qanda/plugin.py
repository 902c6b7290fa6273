# qanda/plugin.py
"""Question-and-answer hook handlers and their registration."""
import logging
from crud import posts, privileges, sorted_sets, topics
from models import now_ms
from qanda import indexes
from qanda.answers import ICON_SOLVED, ICON_UNSOLVED, add_answer_data_to_topic
from qanda.hooks import (
    AdminNavigation, ClientConfig, ComposerPush, HookRegistry, Navigation, PluginContext,
    PostTools, RenderSingleTopic, RenderTopicList, RewardConditions, ThreadTools,
    TopicCreated, TopicEdited, TopicEventTypes, TopicPurged, TopicQuestionToggled,
    TopicSaved, TopicSolvedToggled,
)
from qanda.toggles import (
    ACCEPTED_CONDITION, EVENT_AS_QUESTION, EVENT_MAKE_NORMAL, EVENT_SOLVED, EVENT_UNSOLVED,
    is_set, toggle_question_status,
)

logger = logging.getLogger("qanda.plugin")


# ---------- topic lifecycle ----------

def on_topic_create(event: TopicCreated, ctx: PluginContext):
    is_question = is_set(event.data.get("is_question"))
    # admin overrides
    if ctx.config.is_question_by_default(event.topic.get("cid")):
        is_question = True
    if not is_question:
        return event

    tid = event.topic["tid"]
    topics.set_topic_fields(ctx.db, tid, {"is_question": 1, "is_solved": 0})
    sorted_sets.sorted_set_add(ctx.db, indexes.UNSOLVED_SET, now_ms(), tid)
    event.topic.update({"is_question": 1, "is_solved": 0})
    return event


def on_topic_save(event: TopicSaved, ctx: PluginContext):
    topic = event.topic
    if topic and is_set(topic.get("is_question")):
        index = indexes.SOLVED_SET if is_set(topic.get("is_solved")) else indexes.UNSOLVED_SET
        sorted_sets.sorted_set_add(ctx.db, index, now_ms(), topic["tid"])


def on_topic_edit(event: TopicEdited, ctx: PluginContext):
    # edits that don't carry the flag leave question state alone
    if "is_question" not in event.data:
        return event
    is_now_question = is_set(event.data.get("is_question"))
    was_question = is_set(topics.get_topic_field(ctx.db, event.topic["tid"], "is_question"))
    if is_now_question != was_question:
        toggle_question_status(ctx, event.uid, event.topic["tid"])
    return event


def on_topic_purge(event: TopicPurged, ctx: PluginContext):
    if event.topic:
        indexes.purge_topic(ctx.db, event.topic["tid"])


# ---------- rendering ----------

def on_topic_list(event: RenderTopicList, ctx: PluginContext):
    for topic in event.topics:
        if topic and is_set(topic.get("is_question")):
            topic.setdefault("icons", []).append(ICON_SOLVED if is_set(topic.get("is_solved")) else ICON_UNSOLVED)
    return event


def add_thread_tool(event: ThreadTools, ctx: PluginContext):
    is_solved = is_set(event.topic.get("is_solved"))
    if is_set(event.topic.get("is_question")):
        event.tools.extend([
            {
                "class": f"toggleSolved {'alert-warning topic-solved' if is_solved else 'alert-success topic-unsolved'}",
                "title": "[[qanda:thread.tool.mark_unsolved]]" if is_solved else "[[qanda:thread.tool.mark_solved]]",
                "icon": "fa-question-circle" if is_solved else "fa-check-circle",
            },
            {
                "class": "toggleQuestionStatus",
                "title": "[[qanda:thread.tool.make_normal]]",
                "icon": "fa-comments",
            },
        ])
    else:
        event.tools.append({
            "class": "toggleQuestionStatus alert-warning",
            "title": "[[qanda:thread.tool.as_question]]",
            "icon": "fa-question-circle",
        })
    return event


def add_post_tool(event: PostTools, ctx: PluginContext):
    data = topics.get_topic_data_by_pid(ctx.db, event.pid)
    if not data:
        return event
    can_edit = privileges.can_edit(ctx.db, data["tid"], event.uid)
    if (
        can_edit
        and not is_set(data.get("is_solved"))
        and is_set(data.get("is_question"))
        and int(data.get("main_pid") or 0) != int(event.pid)
    ):
        event.tools.append({
            "action": "qanda/post-solved",
            "html": "[[qanda:post.tool.mark_correct]]",
            "icon": "fa-check-circle",
        })
    return event


def on_composer_push(event: ComposerPush, ctx: PluginContext):
    tid = posts.get_post_field(ctx.db, event.pid, "tid")
    event.data["is_question"] = topics.get_topic_field(ctx.db, tid, "is_question") if tid else None
    return event


# ---------- registration hooks ----------

def get_conditions(event: RewardConditions, ctx: PluginContext):
    event.conditions.append({
        "name": "Times questions accepted",
        "condition": ACCEPTED_CONDITION,
    })
    return event


def register_topic_events(event: TopicEventTypes, ctx: PluginContext):
    event.types.update({
        EVENT_AS_QUESTION: {"icon": "fa-question", "text": "[[qanda:thread.alert.as_question]]"},
        EVENT_MAKE_NORMAL: {"icon": "fa-comments", "text": "[[qanda:thread.alert.make_normal]]"},
        EVENT_SOLVED: {"icon": "fa-check", "text": "[[qanda:thread.alert.solved]]"},
        EVENT_UNSOLVED: {"icon": "fa-question", "text": "[[qanda:thread.alert.unsolved]]"},
    })
    return event


def add_navigation(event: Navigation, ctx: PluginContext):
    event.menu.extend([
        {
            "route": "/unsolved",
            "title": "[[qanda:menu.unsolved]]",
            "icon_class": "fa-question-circle",
            "text_class": "visible-xs-inline",
            "text": "[[qanda:menu.unsolved]]",
        },
        {
            "route": "/solved",
            "title": "[[qanda:menu.solved]]",
            "icon_class": "fa-check-circle",
            "text_class": "visible-xs-inline",
            "text": "[[qanda:menu.solved]]",
        },
    ])
    return event


def add_admin_navigation(event: AdminNavigation, ctx: PluginContext):
    event.plugins.append({
        "route": "/plugins/question-and-answer",
        "icon": "fa-question-circle",
        "name": "Q&A",
    })
    return event


def append_config(event: ClientConfig, ctx: PluginContext):
    event.config["question-and-answer"] = ctx.config.model_dump()
    return event


def log_toggle(event, ctx: PluginContext):
    logger.debug("action %s: %s", type(event).__name__, event)


def register(registry: HookRegistry) -> HookRegistry:
    registry.register(TopicCreated, on_topic_create)
    registry.register(TopicSaved, on_topic_save)
    registry.register(TopicEdited, on_topic_edit)
    registry.register(TopicPurged, on_topic_purge)
    registry.register(RenderTopicList, on_topic_list)
    registry.register(RenderSingleTopic, add_answer_data_to_topic)
    registry.register(ThreadTools, add_thread_tool)
    registry.register(PostTools, add_post_tool)
    registry.register(ComposerPush, on_composer_push)
    registry.register(RewardConditions, get_conditions)
    registry.register(TopicEventTypes, register_topic_events)
    registry.register(Navigation, add_navigation)
    registry.register(AdminNavigation, add_admin_navigation)
    registry.register(ClientConfig, append_config)
    registry.register(TopicSolvedToggled, log_toggle)
    registry.register(TopicQuestionToggled, log_toggle)
    return registry
