from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fields import MAX_DB_ID
from app.models.matches import MatchRead, MatchWrite, PlayDatesRead
from app.routes.helpers import raise_for_service_error
from app.schemas.auth import AuthUser
from app.services import match_service
from app.services.authz import get_current_user, require_admin, require_editor
from app.utils.db_async import get_session

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get("", response_model=List[MatchRead])
async def list_matches_handler(
    season_id: Optional[int] = Query(default=None, ge=1, le=MAX_DB_ID),
    play_date: Optional[date] = Query(default=None, description="YYYY-MM-DD"),
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> List[MatchRead]:
    """Recorded matches, newest first."""
    async with db.begin():
        matches = await match_service.list_matches(
            db, season_id=season_id, play_date=play_date, limit=limit
        )
    return [MatchRead.model_validate(m, from_attributes=True) for m in matches]


@router.get("/play-dates", response_model=PlayDatesRead)
async def play_dates_handler(
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> PlayDatesRead:
    """Distinct days with recorded matches, most recent first."""
    async with db.begin():
        play_dates = await match_service.list_play_dates(db)
    return PlayDatesRead(play_dates=play_dates, latest=play_dates[0] if play_dates else None)


@router.get("/{match_id}", response_model=MatchRead)
async def get_match_handler(
    match_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MatchRead:
    try:
        async with db.begin():
            match = await match_service.get_match(db, match_id)
    except ValueError as exc:
        raise_for_service_error(exc)
    return MatchRead.model_validate(match, from_attributes=True)


@router.post("", response_model=MatchRead, status_code=201)
async def create_match_handler(
    payload: MatchWrite,
    _user: AuthUser = Depends(require_editor),
    db: AsyncSession = Depends(get_session),
) -> MatchRead:
    """Record a match. Cached rankings pick it up once their TTL lapses."""
    try:
        async with db.begin():
            match = await match_service.add_match(db, payload)
    except ValueError as exc:
        raise_for_service_error(exc)
    return MatchRead.model_validate(match, from_attributes=True)


@router.put("/{match_id}", response_model=MatchRead)
async def update_match_handler(
    payload: MatchWrite,
    match_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _user: AuthUser = Depends(require_editor),
    db: AsyncSession = Depends(get_session),
) -> MatchRead:
    try:
        async with db.begin():
            match = await match_service.update_match(db, match_id, payload)
    except ValueError as exc:
        raise_for_service_error(exc)
    return MatchRead.model_validate(match, from_attributes=True)


@router.delete("/{match_id}", status_code=204)
async def delete_match_handler(
    match_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> None:
    try:
        async with db.begin():
            await match_service.delete_match(db, match_id)
    except ValueError as exc:
        raise_for_service_error(exc)
