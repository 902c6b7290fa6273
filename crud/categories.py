# crud/categories.py
from typing import Any, Dict, List, Union
from sqlalchemy.orm import Session
from models import Category


def get_all_cids(db: Session) -> List[int]:
    return [cid for (cid,) in db.query(Category.cid).order_by(Category.order.asc(), Category.cid.asc()).all()]


def get_categories_fields(db: Session, cids: List[int], fields: List[str]) -> List[Dict[str, Any]]:
    rows = {c.cid: c for c in db.query(Category).filter(Category.cid.in_(cids)).all()} if cids else {}
    out = []
    for cid in cids:
        category = rows.get(cid)
        out.append({f: getattr(category, f) for f in fields} if category else {})
    return out


def get_tree(categories: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Nest flat category dicts under their ``parent_cid``."""
    by_cid = {}
    for category in categories:
        if category and category.get("cid") is not None:
            by_cid[category["cid"]] = {**category, "children": []}
    tree = []
    for category in by_cid.values():
        parent = by_cid.get(category.get("parent_cid"))
        if parent:
            parent["children"].append(category)
        else:
            tree.append(category)
    return tree


def get_selected_category(db: Session, cid: Union[None, int, List[int]]) -> Dict[str, Any]:
    cids = cid if isinstance(cid, list) else ([cid] if cid else [])
    cids = [int(c) for c in cids if str(c).isdigit()]
    data = get_categories_fields(db, cids, ["cid", "name"])
    selected = [c for c in data if c]
    selected_category = selected[0] if len(selected) == 1 else None
    if len(selected) > 1:
        selected_category = {"cid": None, "name": "[[unread:multiple-categories-selected]]"}
    return {
        "selected_category": selected_category,
        "selected_cids": [c["cid"] for c in selected],
    }
