"""
Domain services - pure analytics logic with no I/O.
"""

from domain.services.forecast_calibrator import ForecastCalibrator
from domain.services.milestone_detector import MilestoneDetector
from domain.services.ranking_service import RankingService
from domain.services.stats_aggregator import StatsAggregator

__all__ = [
    "ForecastCalibrator",
    "MilestoneDetector",
    "RankingService",
    "StatsAggregator",
]
