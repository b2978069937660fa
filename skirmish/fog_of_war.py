"""
Fog of war for the skirmish simulation.

Handles:
- Visible tile computation (square window + line of sight)
- Explored-tile memory per observer session
- Per-tile visibility state (visible / explored / unexplored)
"""

import math
from enum import Enum

from .map import GridWorld, Position, TerrainType

DEFAULT_VISIBILITY_SIZE = 10

BLOCKING_TERRAIN = TerrainType.WALL

TileKey = tuple[int, int]


class Visibility(Enum):
    VISIBLE = "visible"
    EXPLORED = "explored"  # Seen before, not currently visible
    UNEXPLORED = "unexplored"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def has_line_of_sight(world: GridWorld, start: Position, end: Position) -> bool:
    """Check if end can be seen from start.

    Walks interpolated steps from start toward end. Walls block sight past
    them but a wall at the end point is itself visible.
    """
    row_delta = end.row - start.row
    col_delta = end.col - start.col
    steps = max(abs(row_delta), abs(col_delta))

    if steps == 0:
        return True

    for step in range(1, steps + 1):
        row = _round_half_up(start.row + row_delta * step / steps)
        col = _round_half_up(start.col + col_delta * step / steps)

        if row == end.row and col == end.col:
            return True

        tile = world.get_tile(row, col)
        if not tile or tile.terrain == BLOCKING_TERRAIN:
            return False

    return True


def compute_visible(
    world: GridWorld,
    origin: Position,
    size: int = DEFAULT_VISIBILITY_SIZE,
) -> set[TileKey]:
    """Visible tiles in a size x size window centred on origin."""
    visible: set[TileKey] = set()
    half = size // 2
    min_row = origin.row - half
    min_col = origin.col - half

    for row in range(min_row, min_row + size):
        for col in range(min_col, min_col + size):
            if world.get_tile(row, col) is None:
                continue
            if has_line_of_sight(world, origin, Position(row, col)):
                visible.add((row, col))

    visible.add((origin.row, origin.col))
    return visible


class FogOfWar:
    """Visibility tracking for one observer session.

    The explored set is the union of every visible set computed through
    this session and never shrinks.
    """

    def __init__(self, size: int = DEFAULT_VISIBILITY_SIZE):
        self.size = size
        self.visible: set[TileKey] = set()
        self.explored: set[TileKey] = set()

    def update(self, world: GridWorld, origin: Position, size: int | None = None) -> set[TileKey]:
        """Recompute visibility from a new origin and grow the explored set."""
        self.visible = compute_visible(world, origin, self.size if size is None else size)
        self.explored |= self.visible
        return self.visible

    def is_visible(self, row: int, col: int) -> bool:
        return (row, col) in self.visible

    def is_explored(self, row: int, col: int) -> bool:
        return (row, col) in self.explored

    def tile_state(self, row: int, col: int) -> Visibility:
        if (row, col) in self.visible:
            return Visibility.VISIBLE
        if (row, col) in self.explored:
            return Visibility.EXPLORED
        return Visibility.UNEXPLORED

    def reset(self):
        """Forget everything, e.g. when a new map is generated."""
        self.visible = set()
        self.explored = set()

    def get_summary(self, world: GridWorld) -> dict:
        """Get coverage summary for a world."""
        return {
            "visible": len(self.visible),
            "explored": len(self.explored),
            "unexplored": world.area - len(self.explored),
            "explored_ratio": len(self.explored) / max(1, world.area),
        }
