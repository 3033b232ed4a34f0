"""
Admin authentication — HS256 bearer tokens.

  POST /api/admin/login   → {"token": ..., "user": {...}}
  Authorization: Bearer <token>  on every /api/admin/* route
"""
from __future__ import annotations

import structlog
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Header, HTTPException, Request
from jose import JWTError, jwt

from config.settings import AuthConfig

logger = structlog.get_logger()


def create_access_token(data: dict, auth: AuthConfig, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=auth.token_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, auth.jwt_secret, algorithm=auth.algorithm)


def decode_access_token(token: str, auth: AuthConfig) -> dict:
    """Raises JWTError on a bad signature or an expired token."""
    return jwt.decode(token, auth.jwt_secret, algorithms=[auth.algorithm])


async def get_current_admin(request: Request, authorization: Optional[str] = Header(None)) -> dict:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Access token required")
    token = authorization.split(" ", 1)[1]

    try:
        payload = decode_access_token(token, request.app.state.settings.auth)
    except JWTError as e:
        logger.info("admin_token_rejected", error=str(e))
        raise HTTPException(status_code=403, detail="Invalid or expired token")

    if not payload.get("id") or not payload.get("username"):
        raise HTTPException(status_code=403, detail="Invalid or expired token")
    return {"id": payload["id"], "username": payload["username"]}
