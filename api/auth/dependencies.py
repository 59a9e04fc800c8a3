"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header

from core.errors import InvalidTokenError

from . import service
from .policy import Principal, require_institution


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise InvalidTokenError("Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise InvalidTokenError("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise InvalidTokenError("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_principal(access_token: str = Depends(get_bearer_token)) -> Principal:
    return await service.verify_token(access_token)


async def get_current_institution(principal: Principal = Depends(get_current_principal)) -> Principal:
    return require_institution(principal)
