# qanda/listing.py
import math
from typing import Any, Dict, List, Optional, Union
from crud import categories, privileges, sorted_sets, topics, users
from crud.users import UserSettings
from qanda.hooks import PluginContext, RenderTopicList
from qanda.indexes import list_set
from utils import pagination
from utils.helpers import build_breadcrumbs, build_query_string

# Only the most recent entries of an index are ever read. Counts and later
# pages silently stop at this many topics; there is no setting to raise it.
INDEX_RANGE_CAP = 200


def _normalize_cids(cids: Union[None, int, str, List[Any]]) -> List[Any]:
    if cids is None or cids == "":
        return []
    if not isinstance(cids, list):
        return [cids]
    return cids


def get_topics(
    ctx: PluginContext,
    list_type: str,
    page: int,
    cids: Union[None, int, str, List[Any]],
    uid: int,
    settings: UserSettings,
) -> Dict[str, Any]:
    db = ctx.db
    index = list_set(list_type)
    cids = _normalize_cids(cids)

    if cids:
        readable = privileges.filter_cids(db, "read", cids, uid)
        tids = []
        for cid in readable:
            tids.extend(sorted_sets.get_sorted_set_rev_intersect(
                db, [index, f"cid:{cid}:tids:lastposttime"], 0, INDEX_RANGE_CAP - 1,
            ))
        # higher tid stands in for more recent across categories
        tids.sort(reverse=True)
    else:
        tids = sorted_sets.get_sorted_set_rev_range(db, index, 0, INDEX_RANGE_CAP - 1)
        tids = privileges.filter_tids(db, "read", tids, uid)

    per_page = settings.topics_per_page
    start = max(0, (page - 1) * per_page)
    stop = start + per_page - 1

    topic_count = len(tids)
    tids = tids[start:stop + 1]

    topics_data = topics.get_topics_by_tids(db, tids, uid)
    topics.calculate_topic_indices(topics_data, start)
    topics_data = ctx.hooks.fire(RenderTopicList(topics=topics_data, uid=uid), ctx).topics
    return {
        "topic_count": topic_count,
        "topics": topics_data,
    }


def can_post_topic(ctx: PluginContext, uid: int) -> bool:
    cids = categories.get_all_cids(ctx.db)
    return len(privileges.filter_cids(ctx.db, "topics:create", cids, uid)) > 0


def render_qna_page(
    ctx: PluginContext,
    list_type: str,
    page: int,
    cids: Optional[List[str]],
    uid: int,
    query: List[tuple],
    path: str,
) -> Dict[str, Any]:
    db = ctx.db
    settings = users.get_settings(db, uid)
    category_data = categories.get_selected_category(db, cids)
    is_privileged = users.is_privileged(db, uid)

    topics_data = get_topics(ctx, list_type, page, cids, uid, settings)

    data: Dict[str, Any] = {
        "topics": topics_data["topics"],
        "topic_count": topics_data["topic_count"],
        "show_select": is_privileged,
        "show_topic_tools": is_privileged,
        "all_categories_url": list_type + build_query_string(query, "cid", ""),
        "selected_category": category_data["selected_category"],
        "selected_cids": category_data["selected_cids"],
        "feeds:disableRSS": True,
    }
    page_count = max(1, math.ceil(topics_data["topic_count"] / settings.topics_per_page))
    data["pagination"] = pagination.create(page, page_count, query)
    data["can_post"] = can_post_topic(ctx, uid)
    data["title"] = f"[[qanda:menu.{list_type}]]"

    if path.startswith(f"/api/{list_type}") or path.startswith(f"/{list_type}"):
        data["breadcrumbs"] = build_breadcrumbs([{"text": f"[[qanda:menu.{list_type}]]"}])
    return data
