"""
Connected-region analysis over passable tiles.

A region is a maximal 4-connected set of passable tiles, stored as the list
of positions in flood-fill order.
"""

from collections import deque
from typing import Optional

from .map import DIRECTIONS, GridWorld, Position

Region = list[Position]


def find_regions(world: GridWorld) -> list[Region]:
    """Flood-fill every passable component, largest first."""
    visited: set[tuple[int, int]] = set()
    regions: list[Region] = []

    for tile in world.iter_tiles():
        if not tile.passable or (tile.row, tile.col) in visited:
            continue
        regions.append(_flood_fill(world, tile.row, tile.col, visited))

    # sort is stable, so equal-size regions keep discovery order
    regions.sort(key=len, reverse=True)
    return regions


def _flood_fill(
    world: GridWorld,
    start_row: int,
    start_col: int,
    visited: set[tuple[int, int]],
) -> Region:
    """Breadth-first fill from one passable tile."""
    region: Region = []
    queue = deque([(start_row, start_col)])
    visited.add((start_row, start_col))

    while queue:
        row, col = queue.popleft()
        region.append(Position(row, col))

        for dr, dc in DIRECTIONS:
            nr, nc = row + dr, col + dc
            if (nr, nc) in visited or not world.is_passable(nr, nc):
                continue
            visited.add((nr, nc))
            queue.append((nr, nc))

    return region


def largest_region(world: GridWorld) -> Optional[Region]:
    """Largest passable region, or None on a fully blocked map."""
    regions = find_regions(world)
    return regions[0] if regions else None


def passable_tile_count(world: GridWorld) -> int:
    return sum(1 for tile in world.iter_tiles() if tile.passable)


def region_share(region: Region, regions: list[Region]) -> float:
    """Fraction of all passable tiles, summed over regions, that one region holds."""
    total = sum(len(r) for r in regions)
    return len(region) / total if total else 0.0
