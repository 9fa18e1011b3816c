"""
Leaderboard ranking domain model.
"""

from dataclasses import dataclass

ALL_TIME = "all_time"
YEAR = "year"
HALF = "half"
MONTH = "month"

PERIODS = (ALL_TIME, YEAR, HALF, MONTH)


@dataclass(frozen=True)
class RankingEntry:
    """One row of a period leaderboard."""

    rank: int
    player_id: str
    player_name: str
    profit: float
    games: int
    gap_to_above: float = 0
