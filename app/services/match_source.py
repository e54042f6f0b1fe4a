"""Read-side data source for the ranking core.

The ranking computation only needs two queries: the player roster and the
matches that fall inside a scope. ``MatchSource`` is that contract;
``SqlMatchSource`` fulfils it from the league database, pushing the scope
filter down into SQL.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.matches import Match
from app.schemas.players import Player


@dataclass(frozen=True)
class PlayerRecord:
    id: int
    name: str


@dataclass(frozen=True)
class MatchRecord:
    """A recorded match as seen by the ranking core."""

    id: int
    season_id: int
    play_date: date
    player1_id: int
    player2_id: Optional[int]
    player3_id: int
    player4_id: Optional[int]
    team1_score: int
    team2_score: int
    winning_team: int
    created_at: datetime

    @property
    def team1(self) -> tuple[int, ...]:
        return tuple(pid for pid in (self.player1_id, self.player2_id) if pid is not None)

    @property
    def team2(self) -> tuple[int, ...]:
        return tuple(pid for pid in (self.player3_id, self.player4_id) if pid is not None)

    @property
    def player_ids(self) -> frozenset[int]:
        return frozenset(self.team1 + self.team2)


@dataclass(frozen=True)
class MatchFilter:
    """Scope of a ranking query.

    At most one of the fields is set. ``on_date`` selects a single play day,
    ``through_date`` selects everything played on or before a day (an "as of"
    view), ``season_id`` selects one season and no field means lifetime.
    """

    season_id: Optional[int] = None
    on_date: Optional[date] = None
    through_date: Optional[date] = None

    def __post_init__(self) -> None:
        chosen = [v for v in (self.season_id, self.on_date, self.through_date) if v is not None]
        if len(chosen) > 1:
            raise ValueError("match_filter_ambiguous")

    @classmethod
    def lifetime(cls) -> "MatchFilter":
        return cls()

    @classmethod
    def season(cls, season_id: int) -> "MatchFilter":
        return cls(season_id=season_id)

    @classmethod
    def specific_date(cls, play_date: date) -> "MatchFilter":
        return cls(on_date=play_date)

    @classmethod
    def as_of(cls, play_date: date) -> "MatchFilter":
        return cls(through_date=play_date)

    def includes(self, match: MatchRecord) -> bool:
        """Return True when ``match`` falls inside this scope."""
        if self.season_id is not None:
            return match.season_id == self.season_id
        if self.on_date is not None:
            return match.play_date == self.on_date
        if self.through_date is not None:
            return match.play_date <= self.through_date
        return True


class MatchSource(Protocol):
    """Data the ranking core reads; implementations own all I/O."""

    async def list_players(self) -> list[PlayerRecord]: ...

    async def list_matches(self, match_filter: MatchFilter) -> list[MatchRecord]: ...


def match_record_from_row(match: Match) -> MatchRecord:
    """Convert a ``Match`` row into the immutable record used for ranking."""
    return MatchRecord(
        id=match.id,  # type: ignore[arg-type]
        season_id=match.season_id,
        play_date=match.play_date,
        player1_id=match.player1_id,
        player2_id=match.player2_id,
        player3_id=match.player3_id,
        player4_id=match.player4_id,
        team1_score=match.team1_score,
        team2_score=match.team2_score,
        winning_team=match.winning_team,
        created_at=match.created_at,
    )


class SqlMatchSource:
    """``MatchSource`` backed by the league tables."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_players(self) -> list[PlayerRecord]:
        result = await self._db.execute(
            select(Player.id, Player.name).order_by(Player.name)  # type: ignore[call-overload]
        )
        return [PlayerRecord(id=row.id, name=row.name) for row in result.all()]

    async def list_matches(self, match_filter: MatchFilter) -> list[MatchRecord]:
        stmt = select(Match)
        if match_filter.season_id is not None:
            stmt = stmt.where(Match.season_id == match_filter.season_id)  # type: ignore[arg-type]
        elif match_filter.on_date is not None:
            stmt = stmt.where(Match.play_date == match_filter.on_date)  # type: ignore[arg-type]
        elif match_filter.through_date is not None:
            stmt = stmt.where(Match.play_date <= match_filter.through_date)  # type: ignore[arg-type,operator]
        stmt = stmt.order_by(
            Match.play_date.desc(),  # type: ignore[attr-defined]
            Match.created_at.desc(),  # type: ignore[attr-defined]
            Match.id.desc(),  # type: ignore[union-attr]
        )
        result = await self._db.execute(stmt)
        return [match_record_from_row(match) for match in result.scalars().all()]
