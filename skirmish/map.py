"""
Square grid map for the skirmish simulation.

Tiles are addressed by (row, col) with row 0 at the top. Movement and
adjacency are 4-connected (no diagonals).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


class TerrainType(Enum):
    GRASS = "grass"
    DIRT = "dirt"
    SAND = "sand"
    WATER = "water"
    WALL = "wall"


# Passability is a pure function of terrain.
PASSABLE_TERRAIN = {
    TerrainType.GRASS: True,
    TerrainType.DIRT: True,
    TerrainType.SAND: True,
    TerrainType.WATER: False,
    TerrainType.WALL: False,
}

DEFAULT_TERRAIN = TerrainType.GRASS

# Cardinal offsets: up, down, left, right
DIRECTIONS = [(-1, 0), (1, 0), (0, -1), (0, 1)]


@dataclass(frozen=True)
class Position:
    """Grid coordinate."""
    row: int
    col: int

    def manhattan(self, other: "Position") -> int:
        return abs(self.row - other.row) + abs(self.col - other.col)

    def to_dict(self) -> dict:
        return {"row": self.row, "col": self.col}

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        """Decode a position. Raises ValueError on missing or non-integer fields."""
        try:
            return cls(row=int(data["row"]), col=int(data["col"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed position: {data!r}") from e


@dataclass(frozen=True)
class Tile:
    """Individual grid tile."""
    row: int
    col: int
    terrain: TerrainType

    @property
    def passable(self) -> bool:
        return PASSABLE_TERRAIN[self.terrain]

    @property
    def position(self) -> Position:
        return Position(self.row, self.col)


class GridWorld:
    """
    Fixed-size tile store with bounds-checked queries.

    The shape never changes after construction; terrain can be overwritten
    per tile. Out-of-bounds lookups return None rather than raising.
    """

    def __init__(self, rows: int, cols: int):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.tiles: list[list[Tile]] = self._create_tiles()

    def _create_tiles(self) -> list[list[Tile]]:
        """Fill the grid with default terrain."""
        return [
            [Tile(row, col, DEFAULT_TERRAIN) for col in range(self.cols)]
            for row in range(self.rows)
        ]

    @classmethod
    def from_terrain(cls, terrain_map: list[list[TerrainType]]) -> "GridWorld":
        """Build a world sized exactly to a terrain grid."""
        rows = len(terrain_map)
        cols = max((len(row) for row in terrain_map), default=0)
        world = cls(rows, cols)
        world.load_map(terrain_map)
        return world

    @property
    def area(self) -> int:
        return self.rows * self.cols

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    # Tile queries
    def get_tile(self, row: int, col: int) -> Optional[Tile]:
        """Get tile at coordinates, or None when out of bounds."""
        if not self.in_bounds(row, col):
            return None
        return self.tiles[row][col]

    def is_passable(self, row: int, col: int) -> bool:
        tile = self.get_tile(row, col)
        return tile is not None and tile.passable

    def get_adjacent_tiles(self, row: int, col: int) -> list[Tile]:
        """Get the in-bounds cardinal neighbors."""
        neighbors = []
        for dr, dc in DIRECTIONS:
            tile = self.get_tile(row + dr, col + dc)
            if tile:
                neighbors.append(tile)
        return neighbors

    def count_passable_neighbors(self, row: int, col: int) -> int:
        return sum(1 for tile in self.get_adjacent_tiles(row, col) if tile.passable)

    def get_tiles_in_range(self, row: int, col: int, radius: int) -> list[Tile]:
        """Get all tiles within Manhattan distance of a centre."""
        tiles = []
        for r in range(row - radius, row + radius + 1):
            for c in range(col - radius, col + radius + 1):
                if abs(row - r) + abs(col - c) > radius:
                    continue
                tile = self.get_tile(r, c)
                if tile:
                    tiles.append(tile)
        return tiles

    def iter_tiles(self) -> Iterator[Tile]:
        """Iterate tiles in row-major order."""
        for row in self.tiles:
            yield from row

    # Mutation
    def set_terrain(self, row: int, col: int, terrain: TerrainType):
        """Overwrite a tile's terrain. Out-of-bounds writes are ignored."""
        if not self.in_bounds(row, col):
            return
        self.tiles[row][col] = Tile(row, col, terrain)

    def load_map(self, terrain_map: list[list[TerrainType]]):
        """Reset the grid and load a terrain map, clamped to the world size."""
        self.tiles = self._create_tiles()
        for row, row_data in enumerate(terrain_map[:self.rows]):
            for col, terrain in enumerate(row_data[:self.cols]):
                self.set_terrain(row, col, TerrainType(terrain))

    def terrain_grid(self) -> list[list[TerrainType]]:
        """Copy of the terrain layout, suitable for load_map."""
        return [[tile.terrain for tile in row] for row in self.tiles]

    # Utility
    def get_stats(self) -> dict:
        """Get map statistics."""
        terrain_counts = {t.value: 0 for t in TerrainType}
        passable = 0

        for tile in self.iter_tiles():
            terrain_counts[tile.terrain.value] += 1
            if tile.passable:
                passable += 1

        return {
            "rows": self.rows,
            "cols": self.cols,
            "total_tiles": self.area,
            "passable_tiles": passable,
            "terrain_distribution": terrain_counts,
        }
