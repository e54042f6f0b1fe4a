"""Recent form (last N results) for league players."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from app.models.fields import FormResult
from app.services.match_source import MatchFilter, MatchRecord
from app.services.stats_service import classify_outcome

DEFAULT_FORM_LIMIT = 5


@dataclass(frozen=True)
class FormEntry:
    result: FormResult
    play_date: date


def recency_key(match: MatchRecord) -> tuple[date, datetime, int]:
    """Sort key for "most recent": play day, then recording time, then id."""
    return (match.play_date, match.created_at, match.id)


def compute_player_form(
    player_id: int,
    matches: Iterable[MatchRecord],
    limit: int = DEFAULT_FORM_LIMIT,
    match_filter: Optional[MatchFilter] = None,
) -> list[FormEntry]:
    """Return the ``limit`` most recent results for a player, newest first.

    Args:
        player_id: Player to report on
        matches: Candidate matches (any order)
        limit: Maximum number of entries
        match_filter: Optional scope applied on top of ``matches``

    Returns:
        Up to ``limit`` FormEntry items ordered by play date then recording
        order, both descending
    """
    if limit < 0:
        raise ValueError("form_limit_negative")

    played = [
        m
        for m in matches
        if player_id in m.player_ids and (match_filter is None or match_filter.includes(m))
    ]
    played.sort(key=recency_key, reverse=True)
    return [
        FormEntry(result=classify_outcome(m, player_id), play_date=m.play_date)  # type: ignore[arg-type]
        for m in played[:limit]
    ]


def compute_form_by_player(
    player_ids: Iterable[int],
    matches: Iterable[MatchRecord],
    limit: int = DEFAULT_FORM_LIMIT,
) -> dict[int, list[FormEntry]]:
    """Compute form for many players in one pass over ``matches``."""
    if limit < 0:
        raise ValueError("form_limit_negative")

    wanted = set(player_ids)
    by_player: dict[int, list[MatchRecord]] = defaultdict(list)
    for match in sorted(matches, key=recency_key, reverse=True):
        for player_id in match.player_ids & wanted:
            if len(by_player[player_id]) < limit:
                by_player[player_id].append(match)

    return {
        player_id: [
            FormEntry(result=classify_outcome(m, player_id), play_date=m.play_date)  # type: ignore[arg-type]
            for m in by_player.get(player_id, [])
        ]
        for player_id in wanted
    }
