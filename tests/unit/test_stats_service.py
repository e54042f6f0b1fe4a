"""Unit tests for per-player ranking aggregation."""

from __future__ import annotations

from datetime import date

import pytest

from app.models.fields import FormResult
from app.services.match_source import MatchFilter, PlayerRecord
from app.services.stats_service import (
    MONEY_LOST_PER_LOSS,
    classify_outcome,
    compute_player_stats,
    win_percentage,
)
from tests.unit.fakes import MatchFactory

ALICE = PlayerRecord(id=1, name="Alice")
BOB = PlayerRecord(id=2, name="Bob")
CARA = PlayerRecord(id=3, name="Cara")
DEV = PlayerRecord(id=4, name="Dev")


@pytest.fixture
def make_match() -> MatchFactory:
    return MatchFactory()


def _by_name(stats):
    return {s.name: s for s in stats}


class TestWinPercentage:
    def test_zero_when_no_decided_matches(self) -> None:
        assert win_percentage(0, 0) == 0.0

    @pytest.mark.parametrize(
        "wins,losses,expected",
        [
            (1, 0, 100.0),
            (0, 3, 0.0),
            (1, 2, 33.3),
            (2, 1, 66.7),
            (1, 7, 12.5),
            # 1/16 = 6.25 rounds half-up, not to even
            (1, 15, 6.3),
        ],
    )
    def test_rounds_half_up_to_one_decimal(self, wins: int, losses: int, expected: float) -> None:
        assert win_percentage(wins, losses) == expected


class TestComputePlayerStats:
    def test_three_player_solo_scenario(self, make_match: MatchFactory) -> None:
        """A beats C in singles; B sits out."""
        stats = _by_name(
            compute_player_stats([ALICE, BOB, CARA], [make_match((1,), (3,), winning_team=1)])
        )

        alice, bob, cara = stats["Alice"], stats["Bob"], stats["Cara"]
        assert (alice.wins, alice.losses, alice.points) == (1, 0, 4)
        assert alice.win_percentage == 100.0
        assert alice.money_lost == 0
        assert (cara.wins, cara.losses, cara.points) == (0, 1, 1)
        assert cara.win_percentage == 0.0
        assert cara.money_lost == 20000
        assert (bob.wins, bob.losses, bob.total_matches, bob.points) == (0, 0, 0, 0)

    def test_players_without_matches_are_zeroed(self) -> None:
        stats = compute_player_stats([ALICE, BOB], [])

        for stat in stats:
            assert stat.wins == stat.losses == stat.total_matches == 0
            assert stat.points == 0
            assert stat.win_percentage == 0.0
            assert stat.money_lost == 0

    def test_doubles_credit_both_partners(self, make_match: MatchFactory) -> None:
        stats = _by_name(
            compute_player_stats(
                [ALICE, BOB, CARA, DEV],
                [make_match((1, 2), (3, 4), winning_team=2)],
            )
        )

        assert stats["Alice"].losses == stats["Bob"].losses == 1
        assert stats["Cara"].wins == stats["Dev"].wins == 1

    def test_points_and_money_follow_fixed_rules(self, make_match: MatchFactory) -> None:
        matches = [
            make_match((1,), (2,), winning_team=1),
            make_match((1,), (2,), winning_team=2),
            make_match((1, 3), (2, 4), winning_team=1),
            make_match((3,), (1,), winning_team=1),
            make_match((4,), (2,), winning_team=2),
        ]

        for stat in compute_player_stats([ALICE, BOB, CARA, DEV], matches):
            assert stat.points == stat.wins * 4 + stat.losses
            assert stat.money_lost == stat.losses * MONEY_LOST_PER_LOSS
            assert stat.total_matches == stat.wins + stat.losses
            assert 0.0 <= stat.win_percentage <= 100.0

    def test_ordering_points_then_win_pct_then_name(self, make_match: MatchFactory) -> None:
        matches = [
            # Alice: 1 win -> 4 points, 100%
            make_match((1,), (4,), winning_team=1),
            # Bob: 4 losses -> 4 points, 0%
            make_match((2,), (4,), winning_team=2),
            make_match((2,), (4,), winning_team=2),
            make_match((2,), (4,), winning_team=2),
            make_match((2,), (4,), winning_team=2),
        ]
        aaron = PlayerRecord(id=5, name="Aaron")

        stats = compute_player_stats([ALICE, BOB, CARA, DEV, aaron], matches)
        names = [s.name for s in stats]

        # Dev: 4 wins 1 loss = 17 points; Alice and Bob tie on 4 points
        assert names[0] == "Dev"
        assert names[1:3] == ["Alice", "Bob"]
        # zero-point players fall back to name order
        assert names[3:] == ["Aaron", "Cara"]

    def test_ordering_is_stable_for_identical_input(self, make_match: MatchFactory) -> None:
        matches = [make_match((1,), (2,)), make_match((3,), (4,))]
        first = compute_player_stats([DEV, CARA, BOB, ALICE], matches)
        second = compute_player_stats([ALICE, BOB, CARA, DEV], list(reversed(matches)))

        assert first == second

    def test_ignores_players_missing_from_roster(self, make_match: MatchFactory) -> None:
        stats = compute_player_stats([ALICE], [make_match((1,), (99,), winning_team=2)])

        assert [s.id for s in stats] == [1]
        assert stats[0].losses == 1

    def test_season_scope_hides_other_seasons(self, make_match: MatchFactory) -> None:
        lifetime = [make_match((1,), (2,), winning_team=1, season_id=2) for _ in range(5)]
        scope = MatchFilter.season(1)

        stats = _by_name(
            compute_player_stats([ALICE, BOB], [m for m in lifetime if scope.includes(m)])
        )

        assert (stats["Alice"].wins, stats["Alice"].losses, stats["Alice"].total_matches) == (0, 0, 0)


class TestClassifyOutcome:
    def test_reports_side_of_the_result(self, make_match: MatchFactory) -> None:
        match = make_match((1, 2), (3, 4), winning_team=1, play_date=date(2024, 5, 1))

        assert classify_outcome(match, 2) is FormResult.win
        assert classify_outcome(match, 4) is FormResult.loss
        assert classify_outcome(match, 9) is None
