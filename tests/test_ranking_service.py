"""Tests for period leaderboards."""

from datetime import date

import pytest

from domain.models import ranking
from domain.models.game import GameResult
from domain.services.ranking_service import RankingService, in_period
from domain.services.stats_aggregator import StatsAggregator
from tests.conftest import NOW, make_stats


def _stats(player_id, games):
    """games: list of (date, profit)."""
    results = [
        GameResult(player_id=player_id, game_id=f"g{d.isoformat()}", date=d, profit=p)
        for d, p in games
    ]
    return StatsAggregator().aggregate(player_id, results, NOW, player_name=player_id.title())


class TestInPeriod:
    """Tests for period membership."""

    def test_periods(self):
        """Year, half and month windows are relative to today."""
        today = date(2025, 6, 15)
        assert in_period(date(2020, 1, 1), ranking.ALL_TIME, today)
        assert in_period(date(2025, 1, 1), ranking.YEAR, today)
        assert not in_period(date(2024, 6, 1), ranking.YEAR, today)
        assert in_period(date(2025, 2, 1), ranking.HALF, today)
        assert not in_period(date(2025, 7, 1), ranking.HALF, today)
        assert in_period(date(2025, 6, 1), ranking.MONTH, today)
        assert not in_period(date(2025, 5, 31), ranking.MONTH, today)


class TestBuildRankings:
    """Tests for RankingService.build_rankings()."""

    def test_all_time_order_and_gaps(self):
        """Rows are ordered by profit with the gap to the row above."""
        players = [
            make_stats("a", [100, 50]),
            make_stats("b", [300, 20]),
            make_stats("c", [-40, -10]),
        ]
        entries = RankingService().build_rankings(players, ranking.ALL_TIME, NOW)

        assert [e.player_id for e in entries] == ["b", "a", "c"]
        assert [e.rank for e in entries] == [1, 2, 3]
        assert [e.gap_to_above for e in entries] == [0, 170, 200]
        assert entries[0].profit == 320
        assert entries[0].games == 2

    def test_ties_share_a_rank(self):
        """Equal profits share a rank; the next rank skips."""
        players = [make_stats("a", [100]), make_stats("b", [100]), make_stats("c", [50])]
        entries = RankingService().build_rankings(players, ranking.ALL_TIME, NOW)
        assert [e.rank for e in entries] == [1, 1, 3]

    def test_active_share_filter(self):
        """Players below a third of the period's games are not ranked."""
        regular = _stats("reg", [(date(2025, 1, d), 10) for d in range(1, 10)])
        rare = _stats("rare", [(date(2025, 1, 1), 500), (date(2025, 1, 2), 500)])
        entries = RankingService().build_rankings([regular, rare], ranking.YEAR, NOW)
        # 9 games in the year, 3 needed
        assert [e.player_id for e in entries] == ["reg"]

    def test_month_uses_month_bucket(self):
        """Monthly rankings use only this month's games."""
        a = _stats("a", [(date(2025, 5, 1), 500), (date(2025, 6, 1), -20)])
        b = _stats("b", [(date(2025, 5, 1), -500), (date(2025, 6, 1), 20)])
        entries = RankingService().build_rankings([a, b], ranking.MONTH, NOW)
        assert [(e.player_id, e.profit) for e in entries] == [("b", 20), ("a", -20)]

    def test_empty_period(self):
        """No games in the period means an empty leaderboard."""
        a = _stats("a", [(date(2024, 5, 1), 500)])
        assert RankingService().build_rankings([a], ranking.YEAR, NOW) == []

    def test_unknown_period_raises(self):
        """Only all_time, year, half and month are valid."""
        with pytest.raises(ValueError, match="Unknown ranking period"):
            RankingService().build_rankings([], "decade", NOW)
