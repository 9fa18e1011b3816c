"""
In-memory game history store.
"""

import logging
import threading

from domain.models.game import Game, GameResult, GameStatus
from domain.models.player import Player
from repositories.interfaces import IGameHistoryRepository

logger = logging.getLogger("poker_night.repositories.game_history")


class InMemoryGameHistoryRepository(IGameHistoryRepository):
    """
    Game history kept in process memory.

    Games and their results are recorded together and never mutated
    afterwards, except for a status change when a game is finalized.
    Readers always get copies, so one call sees a consistent snapshot.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._players: dict[str, Player] = {}
        self._games: dict[str, Game] = {}
        self._results: dict[str, list[GameResult]] = {}

    def add_player(self, player: Player) -> None:
        with self._lock:
            if player.player_id in self._players:
                raise ValueError(f"Player {player.player_id} already exists")
            self._players[player.player_id] = player

    def add_game(self, game: Game, results: list[GameResult]) -> None:
        """
        Record a game with one result per participating player.

        Raises:
            ValueError: On a duplicate game id, a result for another game,
                an unknown player, or two results for the same player
        """
        with self._lock:
            if game.game_id in self._games:
                raise ValueError(f"Game {game.game_id} already exists")
            seen: set[str] = set()
            for r in results:
                if r.game_id != game.game_id:
                    raise ValueError(f"Result for game {r.game_id} passed with game {game.game_id}")
                if r.player_id not in self._players:
                    raise ValueError(f"Unknown player {r.player_id} in game {game.game_id}")
                if r.player_id in seen:
                    raise ValueError(f"Player {r.player_id} has two results in game {game.game_id}")
                seen.add(r.player_id)

            self._games[game.game_id] = game
            self._results[game.game_id] = list(results)
        logger.debug(f"Recorded game {game.game_id} ({game.status.value}) with {len(results)} results")

    def complete_game(self, game_id: str) -> None:
        """Mark a live or chip-entry game as completed."""
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                raise ValueError(f"Game {game_id} not found")
            self._games[game_id] = Game(game_id=game.game_id, date=game.date, status=GameStatus.COMPLETED)

    def list_players(self) -> list[Player]:
        with self._lock:
            return list(self._players.values())

    def get_player(self, player_id: str) -> Player | None:
        with self._lock:
            return self._players.get(player_id)

    def list_games(self) -> list[Game]:
        with self._lock:
            return sorted(self._games.values(), key=lambda g: g.date)

    def list_completed_games(self) -> list[GameResult]:
        with self._lock:
            completed = [g for g in self._games.values() if g.is_completed]
            completed.sort(key=lambda g: g.date)
            return [r for g in completed for r in self._results[g.game_id]]

    def get_player_results(self, player_id: str) -> list[GameResult]:
        return [r for r in self.list_completed_games() if r.player_id == player_id]
