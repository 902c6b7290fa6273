# qanda/answers.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from crud import posts, privileges
from qanda.hooks import PluginContext, RenderSingleTopic
from qanda.rendering import render_partial
from qanda.toggles import is_set

ICON_SOLVED = '<span class="answered"><i class="fa fa-check"></i> [[qanda:topic_solved]]</span>'
ICON_UNSOLVED = '<span class="unanswered"><i class="fa fa-question-circle"></i> [[qanda:topic_unsolved]]</span>'

JSONLD_TEMPLATE = "partials/question-and-answer/topic-jsonld.html"

# display-order sentinel for the pinned copy of the accepted answer
PINNED_ANSWER_INDEX = -1


# ---------- structured data view model ----------

class _JsonLd(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class JsonLdPerson(_JsonLd):
    type_: str = Field(default="Person", alias="@type")
    name: str


class JsonLdAnswer(_JsonLd):
    type_: str = Field(default="Answer", alias="@type")
    text: str
    date_created: Optional[str] = Field(default=None, alias="dateCreated")
    upvote_count: int = Field(default=0, alias="upvoteCount")
    url: str
    author: JsonLdPerson


class JsonLdQuestion(_JsonLd):
    type_: str = Field(default="Question", alias="@type")
    name: str
    text: str
    answer_count: int = Field(default=0, alias="answerCount")
    upvote_count: int = Field(default=0, alias="upvoteCount")
    date_created: Optional[str] = Field(default=None, alias="dateCreated")
    author: JsonLdPerson
    accepted_answer: Optional[JsonLdAnswer] = Field(default=None, alias="acceptedAnswer")
    suggested_answer: Optional[List[JsonLdAnswer]] = Field(default=None, alias="suggestedAnswer")


class QAPageJsonLd(_JsonLd):
    context: str = Field(default="https://schema.org", alias="@context")
    type_: str = Field(default="QAPage", alias="@type")
    main_entity: JsonLdQuestion = Field(alias="mainEntity")

    def to_jsonable(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def _iso(timestamp: Optional[int]) -> Optional[str]:
    if not timestamp:
        return None
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).isoformat()


def _person(post: Dict[str, Any]) -> JsonLdPerson:
    return JsonLdPerson(name=(post.get("user") or {}).get("username") or "[[global:guest]]")


def _answer(post: Dict[str, Any]) -> JsonLdAnswer:
    return JsonLdAnswer(
        text=str(post.get("content") or ""),
        date_created=_iso(post.get("timestamp")),
        upvote_count=post.get("votes") or 0,
        url=f"/post/{post['pid']}",
        author=_person(post),
    )


def build_jsonld(template_data: Dict[str, Any]) -> Optional[QAPageJsonLd]:
    main_post = template_data.get("main_post") or {}
    if not main_post:
        return None
    accepted = template_data.get("accepted_answer") or {}
    suggested = template_data.get("suggested_answer") or {}
    question = JsonLdQuestion(
        name=str(template_data.get("title") or ""),
        text=str(main_post.get("content") or ""),
        answer_count=max(0, (template_data.get("postcount") or 1) - 1),
        upvote_count=main_post.get("votes") or 0,
        date_created=_iso(main_post.get("timestamp")),
        author=_person(main_post),
        accepted_answer=_answer(accepted) if accepted else None,
        suggested_answer=[_answer(suggested)] if suggested else None,
    )
    return QAPageJsonLd(main_entity=question)


# ---------- topic enrichment ----------

def pin_accepted_answer(ctx: PluginContext, template_data: Dict[str, Any], solved_pid: int, uid: int):
    """Insert a copy of the accepted answer right after the original post."""
    db = ctx.db
    answers = posts.add_post_data(db, posts.get_posts_by_pids(db, [solved_pid], uid), uid)
    post = answers[0]
    if not post:
        return
    best_answer_topic = {**template_data, "posts": [post]}
    topic_privileges = privileges.get_topic_privileges(db, template_data["tid"], uid)
    privileges.modify_posts_by_privilege(best_answer_topic, topic_privileges)

    post = best_answer_topic["posts"][0]
    post["index"] = PINNED_ANSWER_INDEX

    page_posts = template_data["posts"]
    if page_posts:
        op = page_posts.pop(0)
        page_posts.insert(0, post)
        page_posts.insert(0, op)
    else:
        page_posts.append(post)


def add_meta_data(ctx: PluginContext, event: RenderSingleTopic) -> RenderSingleTopic:
    db = ctx.db
    template_data = event.template_data
    uid = event.uid
    main_pid = template_data.get("main_pid")
    solved_pid = template_data.get("solved_pid")

    pids = [main_pid, posts.get_top_voted_pid(db, template_data["tid"])]
    if solved_pid:
        pids.append(solved_pid)
    fetched = posts.add_post_data(db, posts.get_posts_by_pids(db, pids, uid), uid)
    main_post, suggested_answer = fetched[0], fetched[1]
    accepted_answer = fetched[2] if len(fetched) > 2 else None

    template_data["main_post"] = main_post or {}
    template_data["accepted_answer"] = accepted_answer or {}
    if suggested_answer and suggested_answer["pid"] != main_pid:
        template_data["suggested_answer"] = suggested_answer

    jsonld = build_jsonld(template_data)
    event.post_header = render_partial(JSONLD_TEMPLATE, {"jsonld": jsonld.to_jsonable() if jsonld else None})
    return event


def add_answer_data_to_topic(event: RenderSingleTopic, ctx: PluginContext) -> RenderSingleTopic:
    template_data = event.template_data
    if not is_set(template_data.get("is_question")):
        return event

    template_data.setdefault("icons", []).append(
        ICON_SOLVED if is_set(template_data.get("is_solved")) else ICON_UNSOLVED
    )

    solved_pid = int(template_data.get("solved_pid") or 0)
    current_page = (template_data.get("pagination") or {}).get("current_page", 1)
    if solved_pid and current_page <= 1:
        pin_accepted_answer(ctx, template_data, solved_pid, event.uid)

    for post in template_data.get("posts", []):
        if post:
            post["is_answer"] = bool(solved_pid) and post.get("pid") == solved_pid

    return add_meta_data(ctx, event)
