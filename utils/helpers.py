# utils/helpers.py
from typing import Dict, List, Optional
from urllib.parse import urlencode


def build_query_string(query: List[tuple], key: str, value: Optional[str]) -> str:
    """Re-encode ``query`` with ``key`` replaced by ``value`` (dropped when empty)."""
    params = [(k, v) for k, v in query if k != key]
    if value:
        params.append((key, value))
    return "?" + urlencode(params) if params else ""


def build_breadcrumbs(crumbs: List[Dict[str, str]]) -> List[Dict[str, str]]:
    breadcrumbs = [{"text": "[[global:home]]", "url": "/"}]
    for crumb in crumbs:
        breadcrumbs.append(crumb)
    return breadcrumbs


def parse_page(raw: Optional[str]) -> int:
    try:
        page = int(raw)
    except (TypeError, ValueError):
        return 1
    return page if page > 0 else 1
