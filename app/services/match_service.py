"""Match recording and lookups.

Write helpers validate the match shape before touching the database and
flush without committing; routes own the transaction.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import distinct, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.matches import MatchWrite
from app.schemas.matches import Match
from app.schemas.players import Player
from app.schemas.seasons import Season


def validate_match(data: MatchWrite) -> None:
    """Check slot usage, player uniqueness and the declared winner.

    Raises:
        ValueError: with a stable error code describing the first problem
    """
    slots = [
        pid
        for pid in (data.player1_id, data.player2_id, data.player3_id, data.player4_id)
        if pid is not None
    ]
    if len(slots) > data.match_type.max_players:
        raise ValueError("solo_match_uses_two_players")
    if len(set(slots)) != len(slots):
        raise ValueError("duplicate_player")

    if data.team1_score == data.team2_score:
        raise ValueError("tied_score")
    expected_winner = 1 if data.team1_score > data.team2_score else 2
    if data.winning_team != expected_winner:
        raise ValueError("winning_team_mismatch")


async def _check_references(db: AsyncSession, data: MatchWrite) -> None:
    if await db.get(Season, data.season_id) is None:
        raise ValueError("season_not_found")
    player_ids = {
        pid
        for pid in (data.player1_id, data.player2_id, data.player3_id, data.player4_id)
        if pid is not None
    }
    found = await db.execute(select(Player.id).where(Player.id.in_(player_ids)))  # type: ignore[call-overload,union-attr]
    if len(found.all()) != len(player_ids):
        raise ValueError("player_not_found")


def _apply(match: Match, data: MatchWrite) -> None:
    match.season_id = data.season_id
    match.play_date = data.play_date
    match.match_type = data.match_type
    match.player1_id = data.player1_id
    match.player2_id = data.player2_id
    match.player3_id = data.player3_id
    match.player4_id = data.player4_id
    match.team1_score = data.team1_score
    match.team2_score = data.team2_score
    match.winning_team = data.winning_team


async def add_match(db: AsyncSession, data: MatchWrite) -> Match:
    validate_match(data)
    await _check_references(db, data)
    match = Match(
        season_id=data.season_id,
        play_date=data.play_date,
        player1_id=data.player1_id,
        player3_id=data.player3_id,
        team1_score=data.team1_score,
        team2_score=data.team2_score,
        winning_team=data.winning_team,
    )
    _apply(match, data)
    db.add(match)
    await db.flush()
    return match


async def get_match(db: AsyncSession, match_id: int) -> Match:
    match = await db.get(Match, match_id)
    if match is None:
        raise ValueError("match_not_found")
    return match


async def update_match(db: AsyncSession, match_id: int, data: MatchWrite) -> Match:
    match = await get_match(db, match_id)
    validate_match(data)
    await _check_references(db, data)
    _apply(match, data)
    await db.flush()
    return match


async def delete_match(db: AsyncSession, match_id: int) -> None:
    match = await get_match(db, match_id)
    await db.delete(match)
    await db.flush()


async def list_matches(
    db: AsyncSession,
    *,
    season_id: Optional[int] = None,
    play_date: Optional[date] = None,
    limit: Optional[int] = None,
) -> list[Match]:
    """Matches newest first (play date, then recording order)."""
    stmt = select(Match)
    if season_id is not None:
        stmt = stmt.where(Match.season_id == season_id)  # type: ignore[arg-type]
    if play_date is not None:
        stmt = stmt.where(Match.play_date == play_date)  # type: ignore[arg-type]
    stmt = stmt.order_by(
        Match.play_date.desc(),  # type: ignore[attr-defined]
        Match.created_at.desc(),  # type: ignore[attr-defined]
        Match.id.desc(),  # type: ignore[union-attr]
    )
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_play_dates(db: AsyncSession) -> list[date]:
    """Distinct play dates, most recent first."""
    result = await db.execute(
        select(distinct(Match.play_date)).order_by(Match.play_date.desc())  # type: ignore[attr-defined]
    )
    return [row[0] for row in result.all()]
