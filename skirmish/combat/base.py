"""
Base combat definitions.
"""

from enum import Enum

from ..map import Position


class GameResult(Enum):
    PLAYING = "playing"
    WIN = "win"
    LOSE = "lose"


def is_adjacent(a: Position, b: Position) -> bool:
    """Orthogonal neighbors only; diagonal tiles are two steps apart."""
    return a.manhattan(b) == 1
