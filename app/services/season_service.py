"""Season lifecycle: create, edit, end, reactivate and roster management.

Functions flush but never commit; routes own the transaction.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.seasons import SeasonWrite
from app.schemas.matches import Match
from app.schemas.players import Player
from app.schemas.seasons import Season, SeasonPlayer

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


async def list_seasons(db: AsyncSession) -> list[Season]:
    """All seasons, active first, newest start date first."""
    result = await db.execute(
        select(Season).order_by(
            Season.is_active.desc(),  # type: ignore[attr-defined]
            Season.start_date.desc(),  # type: ignore[attr-defined]
        )
    )
    return list(result.scalars().all())


async def list_active_seasons(db: AsyncSession) -> list[Season]:
    result = await db.execute(
        select(Season)
        .where(Season.is_active.is_(True))  # type: ignore[attr-defined]
        .order_by(Season.start_date.desc())  # type: ignore[attr-defined]
    )
    return list(result.scalars().all())


async def get_current_season(db: AsyncSession) -> Optional[Season]:
    """The default season: the active season with the latest start date."""
    seasons = await list_active_seasons(db)
    return seasons[0] if seasons else None


async def get_season(db: AsyncSession, season_id: int) -> Season:
    """Raises ValueError("season_not_found") for unknown ids."""
    season = await db.get(Season, season_id)
    if season is None:
        raise ValueError("season_not_found")
    return season


async def create_season(db: AsyncSession, data: SeasonWrite) -> Season:
    season = Season(
        name=data.name,
        start_date=data.start_date,
        end_date=data.end_date,
        is_active=True,
        auto_end=data.auto_end,
        description=data.description,
    )
    db.add(season)
    await db.flush()
    return season


async def update_season(db: AsyncSession, season_id: int, data: SeasonWrite) -> Season:
    season = await get_season(db, season_id)
    season.name = data.name
    season.start_date = data.start_date
    season.end_date = data.end_date
    season.auto_end = data.auto_end
    season.description = data.description
    await db.flush()
    return season


async def end_season(
    db: AsyncSession,
    season_id: int,
    *,
    ended_by: str,
    end_date: Optional[date] = None,
) -> Season:
    """Deactivate a season; ``end_date`` defaults to today."""
    season = await get_season(db, season_id)
    season.end_date = end_date or date.today()
    season.is_active = False
    season.ended_at = datetime.utcnow()
    season.ended_by = ended_by
    await db.flush()
    return season


async def reactivate_season(db: AsyncSession, season_id: int) -> Season:
    season = await get_season(db, season_id)
    season.is_active = True
    season.ended_at = None
    season.ended_by = None
    await db.flush()
    return season


async def delete_season(db: AsyncSession, season_id: int) -> None:
    """Delete a season and all of its matches."""
    season = await get_season(db, season_id)
    await db.execute(delete(Match).where(Match.season_id == season_id))  # type: ignore[arg-type]
    await db.delete(season)
    await db.flush()


async def end_expired_seasons(db: AsyncSession, *, today: Optional[date] = None) -> list[Season]:
    """End active auto-end seasons whose end_date is before ``today``.

    Returns:
        The seasons that were ended by this call
    """
    today = today or date.today()
    result = await db.execute(
        select(Season).where(
            Season.is_active.is_(True),  # type: ignore[attr-defined]
            Season.auto_end.is_(True),  # type: ignore[attr-defined]
            Season.end_date.is_not(None),  # type: ignore[union-attr]
            Season.end_date < today,  # type: ignore[operator,arg-type]
        )
    )
    expired = list(result.scalars().all())
    if not expired:
        return []

    now = datetime.utcnow()
    for season in expired:
        season.is_active = False
        season.ended_at = now
        season.ended_by = SYSTEM_ACTOR
        logger.info(f"Auto-ended season {season.id} ({season.name}); end date {season.end_date}")
    await db.flush()
    return expired


async def list_season_players(db: AsyncSession, season_id: int) -> list[tuple[Player, SeasonPlayer]]:
    await get_season(db, season_id)
    result = await db.execute(
        select(Player, SeasonPlayer)
        .join(SeasonPlayer, SeasonPlayer.player_id == Player.id)  # type: ignore[arg-type]
        .where(SeasonPlayer.season_id == season_id)  # type: ignore[arg-type]
        .order_by(Player.name)  # type: ignore[arg-type]
    )
    return [(row[0], row[1]) for row in result.all()]


async def set_season_players(db: AsyncSession, season_id: int, player_ids: list[int]) -> None:
    """Replace the season roster with ``player_ids``.

    Raises:
        ValueError: ``season_not_found`` or ``player_not_found``
    """
    await get_season(db, season_id)
    wanted = list(dict.fromkeys(player_ids))
    if wanted:
        found = await db.execute(select(Player.id).where(Player.id.in_(wanted)))  # type: ignore[call-overload,union-attr]
        if len(found.all()) != len(wanted):
            raise ValueError("player_not_found")

    await db.execute(delete(SeasonPlayer).where(SeasonPlayer.season_id == season_id))  # type: ignore[arg-type]
    db.add_all([SeasonPlayer(season_id=season_id, player_id=pid) for pid in wanted])
    await db.flush()
