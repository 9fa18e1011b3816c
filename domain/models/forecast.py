"""
Forecast domain models.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ForecastEntry:
    """
    Expected profit for one player in tonight's game.

    Entries for a roster always sum to exactly zero.
    """

    player_id: str
    expected_profit: int
    is_surprise: bool = False
    player_name: str = ""
    is_new_player: bool = False
    baseline: float = 0  # Weighted, streak-adjusted value before randomization


@dataclass(frozen=True)
class PlayerDynamic:
    """Head-to-head record of two players over the games they both played."""

    player_a: str
    player_b: str
    shared_games: int
    avg_profit_a: float
    avg_profit_b: float
    wins_a: int
    wins_b: int

    @property
    def leader(self) -> str:
        """Player with the better average in shared games."""
        return self.player_a if self.avg_profit_a >= self.avg_profit_b else self.player_b

    @property
    def avg_gap(self) -> float:
        return abs(self.avg_profit_a - self.avg_profit_b)
