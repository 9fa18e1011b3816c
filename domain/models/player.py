"""
Player domain model.
"""

from dataclasses import dataclass

PERMANENT = "permanent"
GUEST = "guest"


@dataclass(frozen=True)
class Player:
    """
    Represents a member of the poker group.

    This is a pure domain model with no infrastructure dependencies.
    """

    player_id: str
    name: str
    player_type: str = PERMANENT  # "permanent" or "guest"

    @property
    def is_guest(self) -> bool:
        return self.player_type == GUEST

    def __str__(self) -> str:
        suffix = " (guest)" if self.is_guest else ""
        return f"{self.name}{suffix}"
