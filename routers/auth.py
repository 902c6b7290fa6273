from datetime import datetime, timedelta, timezone
import logging
from typing import Optional

import jwt
from fastapi import Depends, HTTPException
from fastapi.requests import HTTPConnection

from settings import settings as app_settings

logger = logging.getLogger("auth")

ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=app_settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, app_settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token_raw(token: str) -> int:
    """uid carried by ``token``; 0 (guest) when the token is missing, expired or invalid."""
    try:
        payload = jwt.decode(token, app_settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.PyJWTError as e:
        logger.info("Rejected token: %s", e)
        return 0
    try:
        return int(payload.get("sub") or 0)
    except (TypeError, ValueError):
        return 0


def _token_from(conn: HTTPConnection) -> Optional[str]:
    header = conn.headers.get("Authorization")
    if header and header.startswith("Bearer "):
        return header.replace("Bearer ", "")
    # websocket clients can't always set headers
    return conn.query_params.get("token")


def get_current_uid(conn: HTTPConnection) -> int:
    token = _token_from(conn)
    return decode_token_raw(token) if token else 0


def require_uid(uid: int = Depends(get_current_uid)) -> int:
    if not uid:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return uid
