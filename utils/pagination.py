# utils/pagination.py
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode


def _page_link(page: int, query: Optional[List[tuple]]) -> str:
    params = [(k, v) for k, v in (query or []) if k != "page"]
    params.append(("page", page))
    return "?" + urlencode(params)


def create(current_page: int, page_count: int, query: Optional[List[tuple]] = None) -> Dict[str, Any]:
    """Pagination block for list templates: a window around the current page plus first/last."""
    page_count = max(1, int(page_count))
    current_page = min(max(1, int(current_page)), page_count)

    data: Dict[str, Any] = {
        "current_page": current_page,
        "page_count": page_count,
        "rel": [],
        "pages": [],
        "prev": {"page": max(1, current_page - 1), "active": current_page > 1},
        "next": {"page": min(page_count, current_page + 1), "active": current_page < page_count},
        "first": {"page": 1, "active": current_page > 1},
        "last": {"page": page_count, "active": current_page < page_count},
    }
    if page_count <= 1:
        return data

    shown = {1, 2, page_count - 1, page_count}
    shown.update(range(current_page - 2, current_page + 3))
    shown = sorted(p for p in shown if 1 <= p <= page_count)

    previous = None
    for page in shown:
        if previous is not None and page - previous > 1:
            data["pages"].append({"separator": True})
        data["pages"].append({"page": page, "active": page == current_page, "qs": _page_link(page, query)})
        previous = page

    if current_page > 1:
        data["rel"].append({"rel": "prev", "href": _page_link(current_page - 1, query)})
    if current_page < page_count:
        data["rel"].append({"rel": "next", "href": _page_link(current_page + 1, query)})
    return data
