# routers/questions.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse

from crud import topics
from qanda.hooks import PluginContext
from qanda.listing import render_qna_page
from qanda.rendering import templates
from routers.auth import get_current_uid
from routers.deps import get_plugin_context
from schemas import QnaStatusOut
from utils.helpers import parse_page

router = APIRouter(tags=["Q&A"])


def _page_data(list_type: str, request: Request, ctx: PluginContext, uid: int, page: Optional[str], cid: List[str]):
    return render_qna_page(
        ctx,
        list_type,
        parse_page(page),
        cid or None,
        uid,
        list(request.query_params.multi_items()),
        request.url.path,
    )


@router.get("/api/unsolved")
def api_unsolved(
    request: Request,
    page: Optional[str] = None,
    cid: List[str] = Query(default=[]),
    ctx: PluginContext = Depends(get_plugin_context),
    uid: int = Depends(get_current_uid),
):
    return _page_data("unsolved", request, ctx, uid, page, cid)


@router.get("/api/solved")
def api_solved(
    request: Request,
    page: Optional[str] = None,
    cid: List[str] = Query(default=[]),
    ctx: PluginContext = Depends(get_plugin_context),
    uid: int = Depends(get_current_uid),
):
    return _page_data("solved", request, ctx, uid, page, cid)


@router.get("/unsolved", response_class=HTMLResponse)
def unsolved_page(
    request: Request,
    page: Optional[str] = None,
    cid: List[str] = Query(default=[]),
    ctx: PluginContext = Depends(get_plugin_context),
    uid: int = Depends(get_current_uid),
):
    data = _page_data("unsolved", request, ctx, uid, page, cid)
    return templates.TemplateResponse(request, "recent.html", data)


@router.get("/solved", response_class=HTMLResponse)
def solved_page(
    request: Request,
    page: Optional[str] = None,
    cid: List[str] = Query(default=[]),
    ctx: PluginContext = Depends(get_plugin_context),
    uid: int = Depends(get_current_uid),
):
    data = _page_data("solved", request, ctx, uid, page, cid)
    return templates.TemplateResponse(request, "recent.html", data)


@router.get("/api/qna/{tid}", response_model=QnaStatusOut)
def get_qna_status(tid: int, ctx: PluginContext = Depends(get_plugin_context)):
    if not topics.topic_exists(ctx.db, tid):
        raise HTTPException(status_code=404, detail="[[error:no-topic]]")
    fields = topics.get_topic_fields(ctx.db, tid, ["is_question", "is_solved"])
    return QnaStatusOut(
        is_question=fields["is_question"] or 0,
        is_solved=fields["is_solved"] or 0,
    )
