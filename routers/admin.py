# routers/admin.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from crud import categories, users
from database import get_db
from qanda import indexes
from qanda.config import ConfigHolder, QandAConfig
from qanda.rendering import templates
from routers.auth import get_current_uid
from routers.deps import get_config_holder
from schemas import QandASettingsUpdate

logger = logging.getLogger("admin")

router = APIRouter(tags=["Admin"])


def require_admin(uid: int = Depends(get_current_uid), db: Session = Depends(get_db)) -> int:
    if not users.is_admin(db, uid):
        raise HTTPException(status_code=403, detail="[[error:no-privileges]]")
    return uid


def _admin_data(db: Session, holder: ConfigHolder) -> dict:
    cids = categories.get_all_cids(db)
    data = categories.get_categories_fields(db, cids, ["cid", "name", "parent_cid"])
    return {
        "categories": categories.get_tree(data),
        "settings": holder.current.model_dump(),
        "indexes": indexes.index_summary(db),
    }


@router.get("/api/admin/plugins/question-and-answer")
def get_admin_settings(
    _: int = Depends(require_admin),
    db: Session = Depends(get_db),
    holder: ConfigHolder = Depends(get_config_holder),
):
    return _admin_data(db, holder)


@router.get("/admin/plugins/question-and-answer", response_class=HTMLResponse)
def admin_page(
    request: Request,
    _: int = Depends(require_admin),
    db: Session = Depends(get_db),
    holder: ConfigHolder = Depends(get_config_holder),
):
    return templates.TemplateResponse(request, "admin/plugins/question-and-answer.html", _admin_data(db, holder))


@router.put("/api/admin/plugins/question-and-answer")
def save_admin_settings(
    body: QandASettingsUpdate,
    uid: int = Depends(require_admin),
    db: Session = Depends(get_db),
    holder: ConfigHolder = Depends(get_config_holder),
):
    config = holder.save(db, QandAConfig(**body.model_dump()), categories.get_all_cids(db))
    logger.info("uid %s saved question-and-answer settings", uid)
    return config.model_dump()
