"""Staff user management (admin only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.auth import PasswordUpdate, UserCreate, UserRead, UserUpdate
from app.models.fields import MAX_DB_ID
from app.routes.helpers import raise_for_service_error
from app.schemas.auth import AuthUser
from app.services.auth_service import (
    create_user,
    delete_user,
    list_users,
    set_user_password,
    update_user,
)
from app.services.authz import require_admin
from app.utils.db_async import get_session

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserRead])
async def list_users_handler(
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> list[UserRead]:
    users = await list_users(db)
    return [UserRead.model_validate(u, from_attributes=True) for u in users]


@router.post("", response_model=UserRead, status_code=201)
async def create_user_handler(
    payload: UserCreate,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> UserRead:
    try:
        user = await create_user(
            db,
            username=payload.username,
            password=payload.password,
            role=payload.role,
            email=payload.email,
            created_by=admin.username,
        )
    except ValueError as exc:
        raise_for_service_error(exc)
    return UserRead.model_validate(user, from_attributes=True)


@router.put("/{user_id}", response_model=UserRead)
async def update_user_handler(
    payload: UserUpdate,
    user_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> UserRead:
    try:
        user = await update_user(
            db,
            user_id,
            username=payload.username,
            email=payload.email,
            role=payload.role,
            is_active=payload.is_active,
        )
    except ValueError as exc:
        raise_for_service_error(exc)
    return UserRead.model_validate(user, from_attributes=True)


@router.put("/{user_id}/password", status_code=204)
async def set_password_handler(
    payload: PasswordUpdate,
    user_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> None:
    try:
        await set_user_password(db, user_id, password=payload.password)
    except ValueError as exc:
        raise_for_service_error(exc)


@router.delete("/{user_id}", status_code=204)
async def delete_user_handler(
    user_id: int = Path(..., ge=1, le=MAX_DB_ID),
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> None:
    try:
        await delete_user(db, user_id, acting_user_id=admin.id)
    except ValueError as exc:
        raise_for_service_error(exc)
