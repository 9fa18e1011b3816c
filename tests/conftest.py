"""
Pytest fixtures for tests.

This module provides centralized constants and builders to reduce duplication
across the test suite. Import NOW and the builders from here instead of
defining them locally.
"""

import random
from datetime import date, datetime, timedelta

import pytest

from domain.models.game import Game, GameResult
from domain.models.player import Player
from domain.models.player_stats import PlayerStats
from domain.services.forecast_calibrator import ForecastCalibrator
from domain.services.stats_aggregator import StatsAggregator
from repositories.game_history_repository import InMemoryGameHistoryRepository
from services.analytics_service import AnalyticsService


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

NOW = datetime(2025, 6, 15, 21, 0)
"""Fixed evaluation time. Mid-June: first half of the year, month of June."""

LAST_GAME_DATE = date(2025, 6, 14)
"""Date of the most recent game produced by make_results()."""


def make_results(
    player_id: str,
    profits: list[float],
    end: date = LAST_GAME_DATE,
    step_days: int = 7,
) -> list[GameResult]:
    """
    Build completed results for one player, one game per ``step_days``.

    ``profits`` are oldest first; the last one is played on ``end``. Game ids
    are derived from the date, so players built with the same ``end`` share
    games.
    """
    n = len(profits)
    results = []
    for i, profit in enumerate(profits):
        day = end - timedelta(days=(n - 1 - i) * step_days)
        results.append(GameResult(player_id=player_id, game_id=f"g{day.isoformat()}", date=day, profit=profit))
    return results


def make_stats(player_id: str, profits: list[float], now=NOW, name: str | None = None, **kwargs) -> PlayerStats:
    """Aggregate stats for a player from an oldest-first list of profits."""
    results = make_results(player_id, profits, **kwargs)
    return StatsAggregator().aggregate(player_id, results, now, player_name=name or player_id.upper())


def flat_stats(player_id: str, total: float, games: int = 10, **fields) -> PlayerStats:
    """Hand-built stats without history, for rules that only look at totals."""
    defaults = dict(
        player_id=player_id,
        player_name=player_id.upper(),
        games_played=games,
        total_profit=total,
        avg_profit=total / games if games else 0,
    )
    defaults.update(fields)
    return PlayerStats(**defaults)


@pytest.fixture
def aggregator():
    return StatsAggregator()


@pytest.fixture
def seeded_calibrator():
    """Forecast calibrator with a fixed random source."""
    return ForecastCalibrator(rng=random.Random(42))


@pytest.fixture
def game_history_repo():
    """
    In-memory history with four regulars and one guest who never played.

    Six weekly games in 2025; ann wins most, dan loses most.
    """
    repo = InMemoryGameHistoryRepository()
    for player_id, name in [("ann", "Ann"), ("ben", "Ben"), ("cat", "Cat"), ("dan", "Dan")]:
        repo.add_player(Player(player_id=player_id, name=name))
    repo.add_player(Player(player_id="guest", name="Guest", player_type="guest"))

    nights = [
        (date(2025, 5, 3), {"ann": 120, "ben": -40, "cat": 10, "dan": -90}),
        (date(2025, 5, 10), {"ann": 80, "ben": 30, "cat": -50, "dan": -60}),
        (date(2025, 5, 17), {"ann": -20, "ben": 60, "cat": 40, "dan": -80}),
        (date(2025, 5, 24), {"ann": 150, "ben": -70, "cat": 0, "dan": -80}),
        (date(2025, 6, 7), {"ann": 90, "ben": 20, "cat": -30, "dan": -80}),
        (date(2025, 6, 14), {"ann": 60, "ben": 10, "cat": 20, "dan": -90}),
    ]
    for day, profits in nights:
        game_id = f"g{day.isoformat()}"
        results = [
            GameResult(player_id=pid, game_id=game_id, date=day, profit=profit)
            for pid, profit in profits.items()
        ]
        repo.add_game(Game(game_id=game_id, date=day), results)
    return repo


@pytest.fixture
def analytics_service(game_history_repo, seeded_calibrator):
    return AnalyticsService(game_history_repo, calibrator=seeded_calibrator)
