"""
Domain models - pure data structures representing business entities.
"""

from domain.models.forecast import ForecastEntry, PlayerDynamic
from domain.models.game import Game, GameResult, GameStatus
from domain.models.milestone import Milestone
from domain.models.player import Player
from domain.models.player_stats import PlayerStats
from domain.models.ranking import RankingEntry

__all__ = [
    "ForecastEntry",
    "Game",
    "GameResult",
    "GameStatus",
    "Milestone",
    "Player",
    "PlayerDynamic",
    "PlayerStats",
    "RankingEntry",
]
