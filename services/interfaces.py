"""
Service layer interfaces (ABCs).

These abstract base classes define the contracts for the application
services, and make them easy to mock in tests.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.models import ForecastEntry, Milestone, PlayerDynamic, PlayerStats, RankingEntry
    from services.result import Result


class IAnalyticsService(ABC):
    """Interface for player statistics, milestones, forecasts and rankings."""

    @abstractmethod
    def get_player_stats(
        self, player_id: str, now: date | datetime | None = None
    ) -> "Result[PlayerStats]":
        """Get aggregated stats for one player."""
        ...

    @abstractmethod
    def get_all_player_stats(
        self, now: date | datetime | None = None, active_only: bool = False
    ) -> "list[PlayerStats]":
        """Get stats for every player with at least one completed game."""
        ...

    @abstractmethod
    def get_milestones(
        self, player_ids: list[str], now: date | datetime | None = None
    ) -> "Result[list[Milestone]]":
        """Detect storylines for tonight's players."""
        ...

    @abstractmethod
    def get_forecast(
        self, player_ids: list[str], now: date | datetime | None = None
    ) -> "Result[list[ForecastEntry]]":
        """Calibrate a zero-sum forecast for tonight's roster."""
        ...

    @abstractmethod
    def get_player_dynamics(
        self, player_ids: list[str], now: date | datetime | None = None
    ) -> "Result[list[PlayerDynamic]]":
        """Head-to-head records within tonight's roster."""
        ...

    @abstractmethod
    def get_rankings(
        self, period: str, now: date | datetime | None = None
    ) -> "Result[list[RankingEntry]]":
        """Leaderboard for all_time, year, half or month."""
        ...
