"""
Basic game types shared by every layer.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class Player(IntEnum):
    """Player identifiers."""
    PLAYER_1 = 0
    PLAYER_2 = 1

    @property
    def opponent(self) -> 'Player':
        """The other player."""
        return Player(1 - self.value)


@dataclass(frozen=True)
class Action:
    """
    An action in the global action ordering.

    Bids carry the claimed (count, rank); the challenge action has neither.
    """
    id: int
    name: str
    count: Optional[int] = None
    rank: Optional[int] = None

    @property
    def is_bid(self) -> bool:
        return self.count is not None
