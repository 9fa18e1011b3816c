"""Tests for the analytics application service."""

import logging
from datetime import date
from unittest.mock import MagicMock

from domain.models import ranking
from services import error_codes
from services.analytics_service import AnalyticsService
from services.interfaces import IAnalyticsService
from tests.conftest import NOW

REGULARS = ["ann", "ben", "cat", "dan"]


class TestPlayerStats:
    """Tests for get_player_stats / get_all_player_stats."""

    def test_known_player(self, analytics_service):
        """Stats are aggregated from the stored history."""
        result = analytics_service.get_player_stats("ann", NOW)
        assert result.success
        stats = result.value
        assert stats.player_name == "Ann"
        assert stats.games_played == 6
        assert stats.total_profit == 480
        assert stats.current_streak == 3
        assert stats.month_games == 2

    def test_player_without_games(self, analytics_service):
        """A registered player who never played gets zeroed stats."""
        result = analytics_service.get_player_stats("guest", NOW)
        assert result.success
        assert result.value.games_played == 0
        assert result.value.current_streak == 0

    def test_unknown_player(self, analytics_service):
        """An unknown id is reported, not raised."""
        result = analytics_service.get_player_stats("zzz", NOW)
        assert not result.success
        assert result.error_code == error_codes.PLAYER_NOT_FOUND

    def test_unknown_player_is_logged(self, analytics_service, caplog):
        """Rejected input is logged as a warning."""
        with caplog.at_level(logging.WARNING, logger="poker_night.services.analytics"):
            analytics_service.get_player_stats("zzz", NOW)
        assert "zzz" in caplog.text

    def test_all_player_stats(self, analytics_service):
        """Only players with games, best total first."""
        stats = analytics_service.get_all_player_stats(NOW)
        assert [s.player_id for s in stats] == REGULARS
        assert sum(s.total_profit for s in stats) == 0

    def test_active_only(self, analytics_service):
        """Players who have not played for a long time are filtered out."""
        assert len(analytics_service.get_all_player_stats(NOW, active_only=True)) == 4
        assert analytics_service.get_all_player_stats(date(2025, 12, 31), active_only=True) == []

    def test_now_defaults_to_current_time(self, analytics_service):
        """Without an explicit now, the service still answers."""
        assert len(analytics_service.get_all_player_stats()) == 4


class TestMilestones:
    """Tests for get_milestones."""

    def test_milestones_for_roster(self, analytics_service):
        """Dan's six straight losses lead tonight's storylines."""
        result = analytics_service.get_milestones(REGULARS, NOW)
        assert result.success
        milestones = result.value
        assert 0 < len(milestones) <= 10
        assert milestones[0].kind == "loss_streak"
        assert milestones[0].player_ids == ("dan",)

    def test_empty_roster(self, analytics_service):
        """No players, no milestones."""
        result = analytics_service.get_milestones([], NOW)
        assert result.success
        assert result.value == []

    def test_unknown_player(self, analytics_service):
        """Unknown ids fail the whole request."""
        result = analytics_service.get_milestones(["ann", "zzz"], NOW)
        assert result.error_code == error_codes.PLAYER_NOT_FOUND

    def test_duplicate_players(self, analytics_service):
        """A repeated id fails instead of doubling the player in every storyline."""
        result = analytics_service.get_milestones(["dan", "dan", "ann"], NOW)
        assert not result.success
        assert result.error_code == error_codes.DUPLICATE_PLAYERS


class TestForecast:
    """Tests for get_forecast."""

    def test_zero_sum(self, analytics_service):
        """The roster forecast balances to zero."""
        result = analytics_service.get_forecast(REGULARS, NOW)
        assert result.success
        assert sum(e.expected_profit for e in result.value) == 0
        assert {e.player_name for e in result.value} == {"Ann", "Ben", "Cat", "Dan"}

    def test_new_player_flagged(self, analytics_service):
        """A guest without games is flagged as new."""
        result = analytics_service.get_forecast(["ann", "guest"], NOW)
        entries = {e.player_id: e for e in result.value}
        assert entries["guest"].is_new_player
        assert not entries["ann"].is_new_player

    def test_too_few_players(self, analytics_service):
        """A single player cannot be forecast."""
        result = analytics_service.get_forecast(["ann"], NOW)
        assert not result.success
        assert result.error_code == error_codes.INSUFFICIENT_PLAYERS

    def test_duplicate_players(self, analytics_service):
        """The same player twice is rejected."""
        result = analytics_service.get_forecast(["ann", "ann"], NOW)
        assert result.error_code == error_codes.DUPLICATE_PLAYERS

    def test_unknown_player(self, analytics_service):
        """Unknown ids are reported before calibration."""
        result = analytics_service.get_forecast(["ann", "zzz"], NOW)
        assert result.error_code == error_codes.PLAYER_NOT_FOUND


class TestDynamics:
    """Tests for get_player_dynamics."""

    def test_head_to_head(self, analytics_service):
        """Ann outscored Dan in every shared game."""
        result = analytics_service.get_player_dynamics(["ann", "dan"], NOW)
        assert result.success
        (dynamic,) = result.value
        assert dynamic.shared_games == 6
        assert (dynamic.wins_a, dynamic.wins_b) == (6, 0)
        assert dynamic.leader == "ann"

    def test_duplicate_players(self, analytics_service):
        """A player cannot be paired with themselves."""
        result = analytics_service.get_player_dynamics(["ann", "ann", "dan"], NOW)
        assert not result.success
        assert result.error_code == error_codes.DUPLICATE_PLAYERS


class TestRankings:
    """Tests for get_rankings."""

    def test_all_time(self, analytics_service):
        """All four regulars are ranked by total profit."""
        result = analytics_service.get_rankings(ranking.ALL_TIME, NOW)
        assert [e.player_id for e in result.value] == REGULARS
        assert [e.rank for e in result.value] == [1, 2, 3, 4]

    def test_month(self, analytics_service):
        """June only counts the two June games."""
        entries = analytics_service.get_rankings(ranking.MONTH, NOW).value
        assert [(e.player_id, e.profit) for e in entries] == [
            ("ann", 150),
            ("ben", 30),
            ("cat", -10),
            ("dan", -170),
        ]

    def test_invalid_period(self, analytics_service):
        """Unknown periods are reported as failures."""
        result = analytics_service.get_rankings("weekly", NOW)
        assert not result.success
        assert result.error_code == error_codes.INVALID_PERIOD


class TestWiring:
    """Tests for collaborator injection."""

    def test_implements_interface(self, analytics_service):
        """AnalyticsService satisfies IAnalyticsService."""
        assert isinstance(analytics_service, IAnalyticsService)

    def test_detector_receives_explicit_now(self, game_history_repo):
        """The domain services get the caller's now, not the wall clock."""
        detector = MagicMock()
        detector.detect.return_value = []
        service = AnalyticsService(game_history_repo, detector=detector)

        service.get_milestones(["ann", "ben"], NOW)

        players, now = detector.detect.call_args.args
        assert now == NOW
        assert [p.player_id for p in players] == ["ann", "ben"]
