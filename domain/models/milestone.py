"""
Milestone domain model.
"""

from dataclasses import dataclass

# Categories
STREAK = "streak"
BATTLE = "battle"
MILESTONE = "milestone"
FORM = "form"
DRAMA = "drama"
RECORD = "record"
SEASON = "season"


@dataclass(frozen=True)
class Milestone:
    """A storyline worth mentioning before tonight's game."""

    emoji: str
    title: str
    description: str
    priority: int  # Higher = more interesting
    category: str
    kind: str  # Rule that produced it, e.g. "leaderboard_pass"
    player_ids: tuple[str, ...] = ()
    value: float | None = None  # The exact numeric fact (gap, distance, streak length...)
    record_key: str | None = None  # Set only for singular group records
