"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod

from domain.models.game import Game, GameResult
from domain.models.player import Player


class IGameHistoryRepository(ABC):
    """Read access to the append-only log of games and results."""

    @abstractmethod
    def list_players(self) -> list[Player]: ...

    @abstractmethod
    def get_player(self, player_id: str) -> Player | None: ...

    @abstractmethod
    def list_games(self) -> list[Game]: ...

    @abstractmethod
    def list_completed_games(self) -> list[GameResult]:
        """All results of completed games, oldest game first."""
        ...

    @abstractmethod
    def get_player_results(self, player_id: str) -> list[GameResult]:
        """Completed-game results for one player, oldest game first."""
        ...
