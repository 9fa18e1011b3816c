"""
Game and per-player game result domain models.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class GameStatus(Enum):
    """Lifecycle of a poker night. Only completed games feed analytics."""

    LIVE = "live"
    CHIP_ENTRY = "chip_entry"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Game:
    """A single poker night."""

    game_id: str
    date: date
    status: GameStatus = GameStatus.COMPLETED

    @property
    def is_completed(self) -> bool:
        return self.status == GameStatus.COMPLETED


@dataclass(frozen=True)
class GameResult:
    """
    One player's outcome in one game.

    Produced once when a game is finalized and never mutated afterward.
    """

    player_id: str
    game_id: str
    date: date
    profit: float  # Signed: final chip value minus buy-ins
    rebuys: float = 0  # Half rebuys are allowed
    completed: bool = True
