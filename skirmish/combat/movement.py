"""
One-step greedy movement toward a target.

Steps along the axis with the larger gap first and falls back to the other
axis only when that tile is impassable. An occupied tile means holding
position. There is no lookahead.
"""

from typing import Optional

from ..map import GridWorld, Position
from ..units import EntityArena


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def greedy_step_candidates(start: Position, target: Position) -> list[Position]:
    """Primary-axis step first, then the secondary axis if it has any gap."""
    row_delta = target.row - start.row
    col_delta = target.col - start.col
    row_step = Position(start.row + _sign(row_delta), start.col)
    col_step = Position(start.row, start.col + _sign(col_delta))

    if abs(row_delta) >= abs(col_delta):
        candidates = [row_step] if row_delta != 0 else []
        if col_delta != 0:
            candidates.append(col_step)
    else:
        candidates = [col_step]
        if row_delta != 0:
            candidates.append(row_step)

    return candidates


def choose_greedy_step(
    start: Position,
    target: Position,
    world: GridWorld,
    entities: EntityArena,
) -> Optional[Position]:
    """First passable candidate tile, or None to hold if there is none or it is occupied."""
    for candidate in greedy_step_candidates(start, target):
        if not world.is_passable(candidate.row, candidate.col):
            continue
        if entities.is_occupied(candidate):
            return None
        return candidate
    return None
