"""
Analytics application service.

Wires the game history store to the pure domain services and reports
caller errors as Result failures.
"""

import logging
from datetime import date, datetime

from config import ACTIVE_PLAYER_DAYS
from domain.models import ForecastEntry, Milestone, PlayerDynamic, PlayerStats, RankingEntry
from domain.services.forecast_calibrator import ForecastCalibrator
from domain.services.milestone_detector import MilestoneDetector
from domain.services.ranking_service import RankingService
from domain.services.stats_aggregator import StatsAggregator
from repositories.interfaces import IGameHistoryRepository
from services import error_codes
from services.interfaces import IAnalyticsService
from services.result import Result

logger = logging.getLogger("poker_night.services.analytics")


class AnalyticsService(IAnalyticsService):
    """Stats, milestones, forecasts and rankings over the recorded game history."""

    def __init__(
        self,
        game_history_repo: IGameHistoryRepository,
        *,
        aggregator: StatsAggregator | None = None,
        detector: MilestoneDetector | None = None,
        calibrator: ForecastCalibrator | None = None,
        ranking_service: RankingService | None = None,
    ):
        self.game_history_repo = game_history_repo
        self.aggregator = aggregator or StatsAggregator()
        self.detector = detector or MilestoneDetector()
        self.calibrator = calibrator or ForecastCalibrator()
        self.ranking_service = ranking_service or RankingService()

    def _load_stats(self, player_ids: list[str], now: date | datetime) -> Result[list[PlayerStats]]:
        duplicates = sorted({pid for pid in player_ids if player_ids.count(pid) > 1})
        if duplicates:
            logger.warning(f"Duplicate player ids requested: {duplicates}")
            return Result.fail(
                f"Duplicate players in roster: {', '.join(duplicates)}",
                code=error_codes.DUPLICATE_PLAYERS,
            )

        stats = []
        for player_id in player_ids:
            player = self.game_history_repo.get_player(player_id)
            if player is None:
                logger.warning(f"Unknown player id requested: {player_id}")
                return Result.fail(f"Player {player_id} not found", code=error_codes.PLAYER_NOT_FOUND)
            results = self.game_history_repo.get_player_results(player_id)
            stats.append(self.aggregator.aggregate(player_id, results, now, player_name=player.name))
        return Result.ok(stats)

    def get_player_stats(self, player_id: str, now: date | datetime | None = None) -> Result[PlayerStats]:
        now = now or datetime.now()
        return self._load_stats([player_id], now).map(lambda stats: Result.ok(stats[0]))

    def get_all_player_stats(
        self, now: date | datetime | None = None, active_only: bool = False
    ) -> list[PlayerStats]:
        """Players with at least one game, best all-time total first."""
        now = now or datetime.now()
        stats = self.aggregator.aggregate_all(
            self.game_history_repo.list_players(),
            self.game_history_repo.list_completed_games(),
            now,
        )
        played = [s for s in stats if s.games_played > 0]
        if active_only:
            played = [s for s in played if s.is_active(now, ACTIVE_PLAYER_DAYS)]
        played.sort(key=lambda s: s.total_profit, reverse=True)
        return played

    def get_milestones(
        self, player_ids: list[str], now: date | datetime | None = None
    ) -> Result[list[Milestone]]:
        now = now or datetime.now()
        loaded = self._load_stats(player_ids, now)
        if not loaded:
            return loaded

        milestones = self.detector.detect(loaded.value, now)
        logger.info(f"Detected {len(milestones)} milestones for {len(player_ids)} players")
        return Result.ok(milestones)

    def get_forecast(
        self, player_ids: list[str], now: date | datetime | None = None
    ) -> Result[list[ForecastEntry]]:
        now = now or datetime.now()
        loaded = self._load_stats(player_ids, now)
        if not loaded:
            return loaded

        try:
            return Result.ok(self.calibrator.calibrate(loaded.value))
        except ValueError as e:
            error_msg = str(e)
            logger.warning(f"Forecast rejected: {error_msg}")
            if "at least" in error_msg.lower():
                return Result.fail(error_msg, code=error_codes.INSUFFICIENT_PLAYERS)
            elif "duplicate" in error_msg.lower():
                return Result.fail(error_msg, code=error_codes.DUPLICATE_PLAYERS)
            return Result.fail(error_msg, code=error_codes.VALIDATION_ERROR)

    def get_player_dynamics(
        self, player_ids: list[str], now: date | datetime | None = None
    ) -> Result[list[PlayerDynamic]]:
        now = now or datetime.now()
        loaded = self._load_stats(player_ids, now)
        if not loaded:
            return loaded
        return Result.ok(self.calibrator.find_player_dynamics(loaded.value))

    def get_rankings(self, period: str, now: date | datetime | None = None) -> Result[list[RankingEntry]]:
        now = now or datetime.now()
        stats = self.get_all_player_stats(now)
        try:
            return Result.ok(self.ranking_service.build_rankings(stats, period, now))
        except ValueError as e:
            logger.warning(f"Rankings rejected: {e}")
            return Result.fail(str(e), code=error_codes.INVALID_PERIOD)
