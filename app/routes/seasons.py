from typing import List, Optional

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fields import MAX_DB_ID
from app.models.players import PlayerRead
from app.models.seasons import (
    SeasonEnd,
    SeasonPlayerRead,
    SeasonRead,
    SeasonRosterUpdate,
    SeasonWrite,
)
from app.routes.helpers import raise_for_service_error
from app.schemas.auth import AuthUser
from app.schemas.seasons import Season
from app.services import season_service
from app.services.authz import get_current_user, require_admin, require_editor
from app.utils.db_async import get_session

router = APIRouter(prefix="/seasons", tags=["seasons"])


def _read(season: Season) -> SeasonRead:
    return SeasonRead.model_validate(season, from_attributes=True)


@router.get("", response_model=List[SeasonRead])
async def list_seasons_handler(
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> List[SeasonRead]:
    """All seasons, active first. Expired auto-end seasons are closed first."""
    async with db.begin():
        await season_service.end_expired_seasons(db)
        seasons = await season_service.list_seasons(db)
    return [_read(s) for s in seasons]


@router.get("/active", response_model=List[SeasonRead])
async def list_active_seasons_handler(
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> List[SeasonRead]:
    async with db.begin():
        await season_service.end_expired_seasons(db)
        seasons = await season_service.list_active_seasons(db)
    return [_read(s) for s in seasons]


@router.get("/current", response_model=Optional[SeasonRead])
async def current_season_handler(
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> Optional[SeasonRead]:
    """The default season (latest-starting active season), or null."""
    async with db.begin():
        await season_service.end_expired_seasons(db)
        season = await season_service.get_current_season(db)
    return _read(season) if season else None


@router.get("/{season_id}", response_model=SeasonRead)
async def get_season_handler(
    season_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> SeasonRead:
    try:
        async with db.begin():
            season = await season_service.get_season(db, season_id)
    except ValueError as exc:
        raise_for_service_error(exc)
    return _read(season)


@router.post("", response_model=SeasonRead, status_code=201)
async def create_season_handler(
    payload: SeasonWrite,
    _user: AuthUser = Depends(require_editor),
    db: AsyncSession = Depends(get_session),
) -> SeasonRead:
    async with db.begin():
        season = await season_service.create_season(db, payload)
    return _read(season)


@router.put("/{season_id}", response_model=SeasonRead)
async def update_season_handler(
    payload: SeasonWrite,
    season_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _user: AuthUser = Depends(require_editor),
    db: AsyncSession = Depends(get_session),
) -> SeasonRead:
    try:
        async with db.begin():
            season = await season_service.update_season(db, season_id, payload)
    except ValueError as exc:
        raise_for_service_error(exc)
    return _read(season)


@router.post("/{season_id}/end", response_model=SeasonRead)
async def end_season_handler(
    payload: SeasonEnd,
    season_id: int = Path(..., ge=1, le=MAX_DB_ID),
    user: AuthUser = Depends(require_editor),
    db: AsyncSession = Depends(get_session),
) -> SeasonRead:
    try:
        async with db.begin():
            season = await season_service.end_season(
                db, season_id, ended_by=user.username, end_date=payload.end_date
            )
    except ValueError as exc:
        raise_for_service_error(exc)
    return _read(season)


@router.post("/{season_id}/reactivate", response_model=SeasonRead)
async def reactivate_season_handler(
    season_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _user: AuthUser = Depends(require_editor),
    db: AsyncSession = Depends(get_session),
) -> SeasonRead:
    try:
        async with db.begin():
            season = await season_service.reactivate_season(db, season_id)
    except ValueError as exc:
        raise_for_service_error(exc)
    return _read(season)


@router.delete("/{season_id}", status_code=204)
async def delete_season_handler(
    season_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> None:
    """Delete a season together with its matches."""
    try:
        async with db.begin():
            await season_service.delete_season(db, season_id)
    except ValueError as exc:
        raise_for_service_error(exc)


@router.get("/{season_id}/players", response_model=List[SeasonPlayerRead])
async def season_players_handler(
    season_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> List[SeasonPlayerRead]:
    try:
        async with db.begin():
            rows = await season_service.list_season_players(db, season_id)
    except ValueError as exc:
        raise_for_service_error(exc)
    return [
        SeasonPlayerRead(id=player.id, name=player.name, joined_at=membership.joined_at)  # type: ignore[arg-type]
        for player, membership in rows
    ]


@router.put("/{season_id}/players", response_model=List[PlayerRead])
async def set_season_players_handler(
    payload: SeasonRosterUpdate,
    season_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _user: AuthUser = Depends(require_editor),
    db: AsyncSession = Depends(get_session),
) -> List[PlayerRead]:
    """Replace the season roster."""
    try:
        async with db.begin():
            await season_service.set_season_players(db, season_id, payload.player_ids)
            rows = await season_service.list_season_players(db, season_id)
    except ValueError as exc:
        raise_for_service_error(exc)
    return [PlayerRead.model_validate(player, from_attributes=True) for player, _ in rows]
