from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fields import MAX_DB_ID
from app.models.players import PlayerCreate, PlayerRead
from app.routes.helpers import raise_for_service_error
from app.schemas.auth import AuthUser
from app.services.authz import get_current_user, require_admin, require_editor
from app.services.player_service import add_player, list_players, remove_player
from app.utils.db_async import get_session

router = APIRouter(prefix="/players", tags=["players"])


@router.get("", response_model=List[PlayerRead])
async def list_players_handler(
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> List[PlayerRead]:
    """List all players alphabetically."""
    async with db.begin():
        players = await list_players(db)
    return [PlayerRead.model_validate(p, from_attributes=True) for p in players]


@router.post("", response_model=PlayerRead, status_code=201)
async def create_player_handler(
    payload: PlayerCreate,
    _user: AuthUser = Depends(require_editor),
    db: AsyncSession = Depends(get_session),
) -> PlayerRead:
    """Add a player to the league."""
    try:
        async with db.begin():
            player = await add_player(db, payload.name)
    except ValueError as exc:
        raise_for_service_error(exc)
    return PlayerRead.model_validate(player, from_attributes=True)


@router.delete("/{player_id}", status_code=204)
async def delete_player_handler(
    player_id: int = Path(..., ge=1, le=MAX_DB_ID),
    _user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> None:
    """Remove a player and every match they played in."""
    try:
        async with db.begin():
            await remove_player(db, player_id)
    except ValueError as exc:
        raise_for_service_error(exc)
