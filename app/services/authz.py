"""Authorization helpers for staff-only API endpoints."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fields import StaffRole
from app.schemas.auth import AuthUser
from app.services.auth_service import get_user_for_session_token
from app.utils.db_async import get_session

_UNAUTHENTICATED_HEADERS = {"WWW-Authenticate": "Bearer"}


def extract_bearer_token(request: Request) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    header = request.headers.get("authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> AuthUser:
    """Resolve the current staff user from the bearer token (or raise 401)."""
    raw_token = extract_bearer_token(request)
    if not raw_token:
        raise HTTPException(
            status_code=401, detail="Not authenticated", headers=_UNAUTHENTICATED_HEADERS
        )

    user = await get_user_for_session_token(db, raw_token=raw_token)
    if user is None:
        raise HTTPException(
            status_code=401, detail="Not authenticated", headers=_UNAUTHENTICATED_HEADERS
        )
    return user


def require_role(*roles: StaffRole) -> Callable[..., Awaitable[AuthUser]]:
    """FastAPI dependency allowing only the given roles (raises 401/403)."""
    allowed = {role.value for role in roles}

    async def _dependency(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if user.role not in allowed:
            raise HTTPException(status_code=403, detail="Forbidden")
        return user

    return _dependency


require_admin = require_role(StaffRole.admin)
require_editor = require_role(StaffRole.admin, StaffRole.editor)
