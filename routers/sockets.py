# routers/sockets.py
import json
import logging
from typing import Any, Callable, Dict
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from crud import privileges
from database import SessionLocal
from qanda.errors import InvalidDataError, InvalidEventError, NoPrivilegesError, QandAError
from qanda.hooks import PluginContext
from qanda.toggles import toggle_question_status, toggle_solved
from routers.auth import get_current_uid
from schemas import SocketMessage, SocketReply, ToggleQuestionIn, ToggleSolvedIn

logger = logging.getLogger("sockets")

router = APIRouter()


def _assert_can_edit(ctx: PluginContext, uid: int, tid: int):
    if not privileges.can_edit(ctx.db, tid, uid):
        logger.warning("uid %s denied edit on topic %s", uid, tid)
        raise NoPrivilegesError()


def socket_toggle_solved(ctx: PluginContext, uid: int, data: Dict[str, Any]):
    payload = ToggleSolvedIn(**data)
    _assert_can_edit(ctx, uid, payload.tid)
    return {"is_solved": toggle_solved(ctx, uid, payload.tid, payload.pid)}


def socket_toggle_question_status(ctx: PluginContext, uid: int, data: Dict[str, Any]):
    payload = ToggleQuestionIn(**data)
    _assert_can_edit(ctx, uid, payload.tid)
    return {"is_question": toggle_question_status(ctx, uid, payload.tid)}


SOCKET_PLUGINS: Dict[str, Callable[[PluginContext, int, Dict[str, Any]], Any]] = {
    "plugins.QandA.toggleSolved": socket_toggle_solved,
    "plugins.QandA.toggleQuestionStatus": socket_toggle_question_status,
}


def dispatch(ctx: PluginContext, uid: int, raw: Any) -> SocketReply:
    try:
        message = SocketMessage(**raw) if isinstance(raw, dict) else None
    except ValidationError:
        message = None
    if message is None:
        return SocketReply(error=InvalidDataError.message)

    handler = SOCKET_PLUGINS.get(message.event)
    try:
        if handler is None:
            raise InvalidEventError()
        try:
            result = handler(ctx, uid, message.data)
        except ValidationError as e:
            raise InvalidDataError() from e
    except QandAError as e:
        logger.info("socket event %s from uid %s rejected: %s", message.event, uid, e)
        return SocketReply(id=message.id, error=str(e))
    return SocketReply(id=message.id, result=result)


def dispatch_in_session(app, uid: int, raw: Any) -> SocketReply:
    """Each message gets its own session and the config current at that moment."""
    db = SessionLocal()
    try:
        ctx = PluginContext(db=db, config=app.state.qanda_config.current, hooks=app.state.hooks)
        return dispatch(ctx, uid, raw)
    finally:
        db.close()


@router.websocket("/socket")
async def socket_endpoint(websocket: WebSocket, uid: int = Depends(get_current_uid)):
    await websocket.accept()
    try:
        while True:
            text = await websocket.receive_text()
            try:
                raw = json.loads(text)
            except ValueError:
                raw = None
            reply = await run_in_threadpool(dispatch_in_session, websocket.app, uid, raw)
            await websocket.send_json(reply.model_dump())
    except WebSocketDisconnect:
        logger.debug("socket closed for uid %s", uid)
