"""
Repository layer for data access abstraction.
"""

from repositories.game_history_repository import InMemoryGameHistoryRepository
from repositories.interfaces import IGameHistoryRepository

__all__ = [
    "InMemoryGameHistoryRepository",
    "IGameHistoryRepository",
]
