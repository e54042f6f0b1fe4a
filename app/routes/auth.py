"""Staff authentication routes (bearer token login/logout)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.auth import LoginRequest, TokenResponse, UserRead
from app.schemas.auth import AuthUser
from app.services.auth_service import authenticate_user, issue_session, revoke_session
from app.services.authz import extract_bearer_token, get_current_user
from app.utils.db_async import get_session

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Exchange a username and password for a bearer token."""
    user = await authenticate_user(db, username=payload.username, password=payload.password)
    if user is None or user.id is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    raw_token, session = await issue_session(
        db,
        user_id=user.id,
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return TokenResponse(access_token=raw_token, expires_at=session.expires_at)


@router.post("/logout", status_code=204)
async def logout(
    request: Request,
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> None:
    """Revoke the bearer token used for this request."""
    raw_token = extract_bearer_token(request)
    if raw_token:
        await revoke_session(db, raw_token=raw_token)


@router.get("/me", response_model=UserRead)
async def me(user: AuthUser = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(user, from_attributes=True)
