"""Per-player win/loss aggregation for league rankings.

Everything here is pure: the caller supplies the roster and the matches that
are already restricted to the ranking scope.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from app.models.fields import FormResult
from app.services.match_source import MatchRecord, PlayerRecord

POINTS_PER_WIN = 4
POINTS_PER_LOSS = 1
# Flat penalty unit per lost match; not tied to any currency
MONEY_LOST_PER_LOSS = 20000

_ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class PlayerStat:
    """Aggregated results for one player within a scope."""

    id: int
    name: str
    wins: int = 0
    losses: int = 0
    total_matches: int = 0
    points: int = 0
    win_percentage: float = 0.0
    money_lost: int = 0


def classify_outcome(match: MatchRecord, player_id: int) -> Optional[FormResult]:
    """Return win/loss for ``player_id`` in ``match``, or None if absent."""
    if player_id in match.team1:
        return FormResult.win if match.winning_team == 1 else FormResult.loss
    if player_id in match.team2:
        return FormResult.win if match.winning_team == 2 else FormResult.loss
    return None


def win_percentage(wins: int, losses: int) -> float:
    """Win share of decided matches as a percentage, rounded half-up to 0.1.

    Returns 0 when the player has no decided matches.
    """
    decided = wins + losses
    if decided == 0:
        return 0.0
    pct = (Decimal(wins) * 100 / Decimal(decided)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return float(pct)


def build_player_stat(player: PlayerRecord, wins: int, losses: int, total_matches: int) -> PlayerStat:
    return PlayerStat(
        id=player.id,
        name=player.name,
        wins=wins,
        losses=losses,
        total_matches=total_matches,
        points=wins * POINTS_PER_WIN + losses * POINTS_PER_LOSS,
        win_percentage=win_percentage(wins, losses),
        money_lost=losses * MONEY_LOST_PER_LOSS,
    )


def ranking_sort_key(stat: PlayerStat) -> tuple[int, float, str]:
    """Points desc, then win percentage desc, then name asc."""
    return (-stat.points, -stat.win_percentage, stat.name)


def compute_player_stats(
    players: Iterable[PlayerRecord],
    matches: Iterable[MatchRecord],
) -> list[PlayerStat]:
    """Aggregate ``matches`` into one ranked ``PlayerStat`` per roster player.

    Players without matches are included with zeroed stats. Appearances by
    ids that are not on the roster are ignored.
    """
    roster = list(players)
    wins = {p.id: 0 for p in roster}
    losses = {p.id: 0 for p in roster}
    appearances = {p.id: 0 for p in roster}

    for match in matches:
        for player_id in match.player_ids:
            if player_id not in appearances:
                continue
            appearances[player_id] += 1
            outcome = classify_outcome(match, player_id)
            if outcome is FormResult.win:
                wins[player_id] += 1
            elif outcome is FormResult.loss:
                losses[player_id] += 1

    stats = [
        build_player_stat(p, wins[p.id], losses[p.id], appearances[p.id])
        for p in roster
    ]
    stats.sort(key=ranking_sort_key)
    return stats
