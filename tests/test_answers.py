import json
import re

from qanda.answers import PINNED_ANSWER_INDEX, add_answer_data_to_topic, build_jsonld
from qanda.hooks import RenderSingleTopic
from qanda.toggles import toggle_question_status, toggle_solved


def _template_data(db, topic, page=1):
    from crud import posts, topics

    data = topics.get_topic_data(db, topic.tid)
    page_posts = posts.add_post_data(db, posts.get_posts_by_pids(db, posts.get_topic_post_pids(db, topic.tid, 0, -1), 0), 0)
    for i, post in enumerate(page_posts):
        post["index"] = i
    data.update({"posts": page_posts, "postcount": len(page_posts), "icons": [], "pagination": {"current_page": page}})
    return data


def _solved_thread(ctx, forum):
    asker = forum.user("asker")
    helper = forum.user("helper")
    topic = forum.topic(forum.category("Help").cid, asker.id, title='Why "quotes"?', content="Question body")
    popular = forum.post(topic.tid, helper.id, "Popular reply", votes=5)
    accepted = forum.post(topic.tid, helper.id, 'Use \\ and "escape"\n</script><b>x</b>')
    toggle_question_status(ctx, asker.id, topic.tid)
    toggle_solved(ctx, asker.id, topic.tid, accepted.pid)
    ctx.db.expire_all()
    return topic, popular, accepted


def _jsonld(header):
    match = re.search(r'<script type="application/ld\+json">(.*)</script>', header, re.S)
    return json.loads(match.group(1))


def test_accepted_answer_is_pinned_after_main_post(ctx, forum, db):
    topic, popular, accepted = _solved_thread(ctx, forum)

    event = add_answer_data_to_topic(RenderSingleTopic(template_data=_template_data(db, topic), uid=0), ctx)
    page_posts = event.template_data["posts"]

    assert [p["pid"] for p in page_posts] == [topic.main_pid, accepted.pid, popular.pid, accepted.pid]
    assert page_posts[1]["index"] == PINNED_ANSWER_INDEX
    assert [p["is_answer"] for p in page_posts] == [False, True, False, True]
    assert "[[qanda:topic_solved]]" in event.template_data["icons"][0]


def test_answer_metadata_is_exposed(ctx, forum, db):
    topic, popular, accepted = _solved_thread(ctx, forum)

    event = add_answer_data_to_topic(RenderSingleTopic(template_data=_template_data(db, topic), uid=0), ctx)
    data = event.template_data

    assert data["main_post"]["pid"] == topic.main_pid
    assert data["accepted_answer"]["pid"] == accepted.pid
    assert data["suggested_answer"]["pid"] == popular.pid
    assert data["accepted_answer"]["user"]["username"] == "helper"


def test_jsonld_survives_quotes_and_script_tags(ctx, forum, db):
    topic, _, accepted = _solved_thread(ctx, forum)

    event = add_answer_data_to_topic(RenderSingleTopic(template_data=_template_data(db, topic), uid=0), ctx)

    assert event.post_header.count("</script>") == 1
    jsonld = _jsonld(event.post_header)
    assert jsonld["@type"] == "QAPage"
    assert jsonld["mainEntity"]["name"] == 'Why "quotes"?'
    assert jsonld["mainEntity"]["answerCount"] == 2
    assert jsonld["mainEntity"]["acceptedAnswer"]["text"] == 'Use \\ and "escape"\n</script><b>x</b>'
    assert jsonld["mainEntity"]["acceptedAnswer"]["url"] == f"/post/{accepted.pid}"


def test_no_pinning_after_first_page(ctx, forum, db):
    topic, _, accepted = _solved_thread(ctx, forum)
    data = _template_data(db, topic, page=2)
    before = [p["pid"] for p in data["posts"]]

    event = add_answer_data_to_topic(RenderSingleTopic(template_data=data, uid=0), ctx)

    assert [p["pid"] for p in event.template_data["posts"]] == before
    assert event.template_data["accepted_answer"]["pid"] == accepted.pid


def test_unsolved_question_has_no_accepted_answer(ctx, forum, db):
    asker = forum.user("asker")
    topic = forum.topic(forum.category("Help").cid, asker.id)
    toggle_question_status(ctx, asker.id, topic.tid)
    ctx.db.expire_all()

    event = add_answer_data_to_topic(RenderSingleTopic(template_data=_template_data(db, topic), uid=0), ctx)

    assert event.template_data["accepted_answer"] == {}
    # the only post is the main post, so nothing is suggested
    assert "suggested_answer" not in event.template_data
    assert "[[qanda:topic_unsolved]]" in event.template_data["icons"][0]
    assert "acceptedAnswer" not in _jsonld(event.post_header)["mainEntity"]


def test_normal_topics_are_left_alone(ctx, forum, db):
    topic = forum.topic(forum.category("General").cid)
    data = _template_data(db, topic)

    event = add_answer_data_to_topic(RenderSingleTopic(template_data=data, uid=0), ctx)

    assert event.template_data["icons"] == []
    assert event.post_header == ""
    assert "main_post" not in event.template_data


def test_deleted_accepted_answer_is_masked_for_guests(ctx, forum, db):
    topic, _, accepted = _solved_thread(ctx, forum)
    accepted_row = db.get(type(accepted), accepted.pid)
    accepted_row.deleted = 1
    db.commit()

    event = add_answer_data_to_topic(RenderSingleTopic(template_data=_template_data(db, topic), uid=0), ctx)

    assert event.template_data["posts"][1]["content"] == "[[topic:post_is_deleted]]"


def test_build_jsonld_without_main_post():
    assert build_jsonld({"title": "x"}) is None
