"""League rankings: assembly of stats + form, served through a scoped cache.

Each query follows the same read-through template: build the scope's cache
key, return the cached list on a hit, otherwise load the roster and the
scoped matches, aggregate, attach recent form, store with the scope's TTL.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Mapping, Optional, Sequence

from app.config import settings
from app.services.form_service import DEFAULT_FORM_LIMIT, FormEntry, compute_form_by_player
from app.services.match_source import MatchFilter, MatchSource
from app.services.rankings_cache import RankingsCache
from app.services.stats_service import PlayerStat, compute_player_stats

logger = logging.getLogger(__name__)

LIFETIME_CACHE_KEY = "rankings:lifetime"


def season_cache_key(season_id: int) -> str:
    return f"rankings:season:{season_id}"


def date_cache_key(play_date: date) -> str:
    return f"rankings:date:{play_date.isoformat()}"


@dataclass(frozen=True)
class RankingTTLs:
    """Freshness window per scope, in seconds."""

    lifetime: float = 10 * 60
    season: float = 3 * 60
    specific_date: float = 15 * 60

    @classmethod
    def from_settings(cls) -> "RankingTTLs":
        return cls(
            lifetime=settings.rankings_lifetime_ttl_seconds,
            season=settings.rankings_season_ttl_seconds,
            specific_date=settings.rankings_date_ttl_seconds,
        )


@dataclass(frozen=True)
class RankingEntry:
    id: int
    name: str
    wins: int
    losses: int
    total_matches: int
    points: int
    win_percentage: float
    money_lost: int
    form: tuple[FormEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RankingsResult:
    entries: list[RankingEntry]
    cache_key: str
    cache_hit: bool


def assemble_rankings(
    stats: Sequence[PlayerStat],
    form_by_player: Mapping[int, Sequence[FormEntry]],
) -> list[RankingEntry]:
    """Attach form to each stat row, keeping the stats ordering untouched."""
    return [
        RankingEntry(**asdict(stat), form=tuple(form_by_player.get(stat.id, ())))
        for stat in stats
    ]


async def build_rankings(
    source: MatchSource,
    match_filter: MatchFilter,
    form_limit: int = DEFAULT_FORM_LIMIT,
) -> list[RankingEntry]:
    """Compute rankings for one scope straight from the data source."""
    players = await source.list_players()
    matches = await source.list_matches(match_filter)
    stats = compute_player_stats(players, matches)
    form = compute_form_by_player((p.id for p in players), matches, limit=form_limit)
    return assemble_rankings(stats, form)


class RankingsService:
    """Entry points for lifetime, season and single-day rankings."""

    def __init__(
        self,
        source: MatchSource,
        cache: RankingsCache,
        ttls: Optional[RankingTTLs] = None,
        form_limit: int = DEFAULT_FORM_LIMIT,
    ) -> None:
        self._source = source
        self._cache = cache
        self._ttls = ttls or RankingTTLs()
        self._form_limit = form_limit

    async def rankings_lifetime(self) -> RankingsResult:
        return await self._read_through(
            LIFETIME_CACHE_KEY, MatchFilter.lifetime(), self._ttls.lifetime
        )

    async def rankings_by_season(self, season_id: int) -> RankingsResult:
        return await self._read_through(
            season_cache_key(season_id), MatchFilter.season(season_id), self._ttls.season
        )

    async def rankings_by_date(self, play_date: date) -> RankingsResult:
        return await self._read_through(
            date_cache_key(play_date),
            MatchFilter.specific_date(play_date),
            self._ttls.specific_date,
        )

    async def _read_through(
        self, cache_key: str, match_filter: MatchFilter, ttl_seconds: float
    ) -> RankingsResult:
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Rankings cache hit for {cache_key}")
            return RankingsResult(entries=cached, cache_key=cache_key, cache_hit=True)

        logger.debug(f"Rankings cache miss for {cache_key}")
        entries = await build_rankings(self._source, match_filter, self._form_limit)
        try:
            self._cache.set(cache_key, entries, ttl_seconds)
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"Could not cache rankings for {cache_key}: {exc}")
        return RankingsResult(entries=entries, cache_key=cache_key, cache_hit=False)
