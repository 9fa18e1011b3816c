"""
Derived per-player statistics.
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from domain.models.game import GameResult


def as_date(value: date | datetime) -> date:
    """Normalize a date-or-datetime "now" to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass
class PlayerStats:
    """
    Aggregated statistics for one player, recomputed on demand.

    Period buckets (year/half/month) are relative to the "now" the stats were
    computed for. ``game_history`` is ordered most recent first.
    """

    player_id: str
    player_name: str = ""
    games_played: int = 0
    total_profit: float = 0
    avg_profit: float = 0
    win_count: int = 0
    loss_count: int = 0
    win_percentage: float = 0
    biggest_win: float = 0
    biggest_loss: float = 0
    current_streak: int = 0  # Positive = wins, negative = losses
    longest_win_streak: int = 0
    longest_loss_streak: int = 0
    total_gains: float = 0  # Sum of winning nights
    total_losses: float = 0  # Sum of losing nights, as a positive number
    avg_win: float = 0
    avg_loss: float = 0  # Positive number
    total_rebuys: float = 0
    avg_rebuys_per_game: float = 0
    game_history: list[GameResult] = field(default_factory=list)
    # Period buckets
    year_profit: float = 0
    year_games: int = 0
    half_profit: float = 0
    half_games: int = 0
    month_profit: float = 0
    month_games: int = 0

    @property
    def is_new(self) -> bool:
        """True if the player has never finished a game."""
        return self.games_played == 0

    @property
    def last_game_profit(self) -> float:
        return self.game_history[0].profit if self.game_history else 0

    @property
    def last_game_date(self) -> date | None:
        return self.game_history[0].date if self.game_history else None

    def recent_average(self, n: int) -> float:
        """Average profit over the last ``n`` games (fewer if not available)."""
        recent = self.game_history[:n]
        if not recent:
            return 0
        return sum(r.profit for r in recent) / len(recent)

    def days_since_last_game(self, now: date | datetime) -> int | None:
        last = self.last_game_date
        if last is None:
            return None
        return (as_date(now) - last).days

    def is_active(self, now: date | datetime, within_days: int) -> bool:
        days = self.days_since_last_game(now)
        return days is not None and days <= within_days
