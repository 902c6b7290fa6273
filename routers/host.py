# routers/host.py
# Minimal host-forum surface: just enough topic/post handling to drive the Q&A hooks.
import math
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse

from crud import posts, privileges, sorted_sets, topics, users, events
from models import Topic, Post, now_ms
from qanda.hooks import (
    AdminNavigation, ClientConfig, ComposerPush, Navigation, PluginContext, PostTools,
    RenderSingleTopic, RewardConditions, ThreadTools, TopicCreated, TopicEdited,
    TopicEventTypes, TopicPurged, TopicSaved,
)
from qanda.rendering import templates
from routers.auth import get_current_uid, require_uid
from routers.deps import get_plugin_context
from schemas import PostOut, ReplyCreate, TopicCreate, TopicEdit, TopicOut
from utils import pagination
from utils.helpers import parse_page

router = APIRouter(tags=["Host"])


# ---------- helpers ----------

def get_topic_or_404(ctx: PluginContext, tid: int) -> Topic:
    topic = topics.get_topic(ctx.db, tid)
    if not topic:
        raise HTTPException(status_code=404, detail="[[error:no-topic]]")
    return topic


def assert_can_edit(ctx: PluginContext, tid: int, uid: int):
    if not privileges.can_edit(ctx.db, tid, uid):
        raise HTTPException(status_code=403, detail="[[error:no-privileges]]")


def touch_lastposttime(ctx: PluginContext, topic: Topic, timestamp: int):
    topics.set_topic_fields(ctx.db, topic.tid, {"lastposttime": timestamp})
    sorted_sets.sorted_set_add(ctx.db, f"cid:{topic.cid}:tids:lastposttime", timestamp, topic.tid)


def build_topic_view(ctx: PluginContext, tid: int, uid: int, page: int) -> dict:
    db = ctx.db
    get_topic_or_404(ctx, tid)
    if not privileges.filter_tids(db, "read", [tid], uid):
        raise HTTPException(status_code=403, detail="[[error:no-privileges]]")

    template_data = topics.get_topic_data(db, tid)
    per_page = users.get_settings(db, uid).topics_per_page
    all_pids = posts.get_topic_post_pids(db, tid, 0, -1)
    page_count = max(1, math.ceil(len(all_pids) / per_page))
    page = min(page, page_count)
    start = (page - 1) * per_page

    page_posts = posts.add_post_data(db, posts.get_posts_by_pids(db, all_pids[start:start + per_page], uid), uid)
    for i, post in enumerate(page_posts):
        post["index"] = start + i

    template_data.update({
        "posts": page_posts,
        "postcount": len(all_pids),
        "icons": [],
        "pagination": pagination.create(page, page_count),
    })
    privileges.modify_posts_by_privilege(template_data, privileges.get_topic_privileges(db, tid, uid))

    event = ctx.hooks.fire(RenderSingleTopic(template_data=template_data, uid=uid), ctx)
    return {**event.template_data, "post_header": event.post_header}


# ---------- topics ----------

@router.post("/api/topics", response_model=TopicOut)
def create_topic(body: TopicCreate, ctx: PluginContext = Depends(get_plugin_context), uid: int = Depends(require_uid)):
    db = ctx.db
    if not privileges.filter_cids(db, "topics:create", [body.cid], uid):
        raise HTTPException(status_code=403, detail="[[error:no-privileges]]")

    timestamp = now_ms()
    topic = Topic(cid=body.cid, uid=uid, title=body.title, timestamp=timestamp, lastposttime=timestamp)
    db.add(topic)
    db.flush()
    post = Post(tid=topic.tid, uid=uid, content=body.content, timestamp=timestamp)
    db.add(post)
    db.flush()
    topic.main_pid = post.pid
    db.commit()
    touch_lastposttime(ctx, topic, timestamp)

    ctx.hooks.fire(TopicCreated(topic=topics.get_topic_data(db, topic.tid), data=body.model_dump(exclude_none=True), uid=uid), ctx)
    ctx.hooks.fire(TopicSaved(topic=topics.get_topic_data(db, topic.tid)), ctx)
    db.refresh(topic)
    return topic


@router.post("/api/topics/{tid}/posts", response_model=PostOut)
def reply(tid: int, body: ReplyCreate, ctx: PluginContext = Depends(get_plugin_context), uid: int = Depends(require_uid)):
    db = ctx.db
    topic = get_topic_or_404(ctx, tid)
    if not privileges.filter_tids(db, "read", [tid], uid):
        raise HTTPException(status_code=403, detail="[[error:no-privileges]]")
    if topic.locked and not privileges.can_edit(db, tid, uid):
        raise HTTPException(status_code=403, detail="[[error:topic-locked]]")

    timestamp = now_ms()
    post = Post(tid=tid, uid=uid, content=body.content, timestamp=timestamp)
    db.add(post)
    db.commit()
    db.refresh(post)
    touch_lastposttime(ctx, topic, timestamp)
    return post


@router.put("/api/topics/{tid}", response_model=TopicOut)
def edit_topic(tid: int, body: TopicEdit, ctx: PluginContext = Depends(get_plugin_context), uid: int = Depends(require_uid)):
    db = ctx.db
    topic = get_topic_or_404(ctx, tid)
    assert_can_edit(ctx, tid, uid)

    if body.title is not None:
        topics.set_topic_fields(db, tid, {"title": body.title})
    if body.content is not None and topic.main_pid:
        db.query(Post).filter(Post.pid == topic.main_pid).update({"content": body.content})
        db.commit()

    ctx.hooks.fire(TopicEdited(topic=topics.get_topic_data(db, tid), data=body.model_dump(exclude_unset=True), uid=uid), ctx)
    ctx.hooks.fire(TopicSaved(topic=topics.get_topic_data(db, tid)), ctx)
    db.refresh(topic)
    return topic


@router.delete("/api/topics/{tid}")
def purge_topic(tid: int, ctx: PluginContext = Depends(get_plugin_context), uid: int = Depends(require_uid)):
    db = ctx.db
    topic = get_topic_or_404(ctx, tid)
    assert_can_edit(ctx, tid, uid)

    ctx.hooks.fire(TopicPurged(topic=topics.get_topic_data(db, tid), uid=uid), ctx)
    sorted_sets.sorted_set_remove(db, f"cid:{topic.cid}:tids:lastposttime", tid)
    db.delete(topic)
    db.commit()
    return {"detail": "Topic purged"}


@router.get("/api/topic/{tid}")
def get_topic(tid: int, page: Optional[str] = None, ctx: PluginContext = Depends(get_plugin_context), uid: int = Depends(get_current_uid)):
    return build_topic_view(ctx, tid, uid, parse_page(page))


@router.get("/topic/{tid}", response_class=HTMLResponse)
def topic_page(request: Request, tid: int, page: Optional[str] = None, ctx: PluginContext = Depends(get_plugin_context), uid: int = Depends(get_current_uid)):
    data = build_topic_view(ctx, tid, uid, parse_page(page))
    return templates.TemplateResponse(request, "topic.html", data)


@router.get("/api/topic/{tid}/tools")
def get_thread_tools(tid: int, ctx: PluginContext = Depends(get_plugin_context), uid: int = Depends(get_current_uid)):
    get_topic_or_404(ctx, tid)
    if not privileges.can_edit(ctx.db, tid, uid):
        return {"tools": []}
    event = ctx.hooks.fire(ThreadTools(topic=topics.get_topic_data(ctx.db, tid), uid=uid), ctx)
    return {"tools": event.tools}


@router.get("/api/topic/{tid}/events")
def get_events(tid: int, ctx: PluginContext = Depends(get_plugin_context), uid: int = Depends(get_current_uid)):
    get_topic_or_404(ctx, tid)
    if not privileges.filter_tids(ctx.db, "read", [tid], uid):
        raise HTTPException(status_code=403, detail="[[error:no-privileges]]")
    types = ctx.hooks.fire(TopicEventTypes(), ctx).types
    return {"events": events.get_topic_events(ctx.db, tid, types)}


# ---------- posts ----------

@router.get("/api/posts/{pid}/tools")
def get_post_tools(pid: int, ctx: PluginContext = Depends(get_plugin_context), uid: int = Depends(get_current_uid)):
    if not posts.get_post_data(ctx.db, pid):
        raise HTTPException(status_code=404, detail="[[error:no-post]]")
    event = ctx.hooks.fire(PostTools(pid=pid, uid=uid), ctx)
    return {"tools": event.tools}


@router.get("/api/composer/{pid}")
def composer_push(pid: int, ctx: PluginContext = Depends(get_plugin_context), uid: int = Depends(require_uid)):
    post = posts.get_post_data(ctx.db, pid)
    if not post:
        raise HTTPException(status_code=404, detail="[[error:no-post]]")
    data = {"pid": pid, "tid": post["tid"], "body": post["content"]}
    return ctx.hooks.fire(ComposerPush(pid=pid, uid=uid, data=data), ctx).data


# ---------- registries ----------

@router.get("/api/navigation")
def get_navigation(ctx: PluginContext = Depends(get_plugin_context)):
    return {"menu": ctx.hooks.fire(Navigation(), ctx).menu}


@router.get("/api/config")
def get_client_config(ctx: PluginContext = Depends(get_plugin_context)):
    return ctx.hooks.fire(ClientConfig(), ctx).config


@router.get("/api/admin/navigation")
def get_admin_navigation(ctx: PluginContext = Depends(get_plugin_context)):
    return {"plugins": ctx.hooks.fire(AdminNavigation(), ctx).plugins}


@router.get("/api/admin/rewards/conditions")
def get_reward_conditions(ctx: PluginContext = Depends(get_plugin_context)):
    return {"conditions": ctx.hooks.fire(RewardConditions(), ctx).conditions}
