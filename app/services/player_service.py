"""Player roster operations.

Functions flush but never commit; routes own the transaction.
"""

from __future__ import annotations

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.matches import Match
from app.schemas.players import Player


async def list_players(db: AsyncSession) -> list[Player]:
    result = await db.execute(select(Player).order_by(Player.name))  # type: ignore[arg-type]
    return list(result.scalars().all())


async def add_player(db: AsyncSession, name: str) -> Player:
    """Insert a player.

    Raises:
        ValueError: ``player_name_taken`` if the name is already used
    """
    existing = await db.execute(select(Player.id).where(Player.name == name))  # type: ignore[call-overload]
    if existing.first() is not None:
        raise ValueError("player_name_taken")

    player = Player(name=name)
    db.add(player)
    await db.flush()
    return player


async def remove_player(db: AsyncSession, player_id: int) -> None:
    """Delete a player together with every match they appear in.

    Raises:
        ValueError: ``player_not_found``
    """
    player = await db.get(Player, player_id)
    if player is None:
        raise ValueError("player_not_found")

    await db.execute(
        delete(Match).where(
            or_(
                Match.player1_id == player_id,  # type: ignore[arg-type]
                Match.player2_id == player_id,  # type: ignore[arg-type]
                Match.player3_id == player_id,  # type: ignore[arg-type]
                Match.player4_id == player_id,  # type: ignore[arg-type]
            )
        )
    )
    await db.delete(player)
    await db.flush()
