"""
Procedural terrain generation for the skirmish simulation.

Each attempt builds a biome-driven map:
seeds → Voronoi biomes → base terrain → patches → rivers/lakes → island ring → walls

An attempt is kept only when its largest passable region is big enough and
can host the player plus enough enemies. When every attempt fails, a fixed
10x10 map goes through the same spawn pipeline and is accepted as is.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .config import GameConfig
from .map import DIRECTIONS, GridWorld, Position, TerrainType
from .regions import find_regions, largest_region, region_share
from .spawns import SpawnPlan, SpawnPlanner
from .units import Entity

logger = logging.getLogger(__name__)


class Biome(Enum):
    FOREST = "forest"
    DESERT = "desert"
    BEACH = "beach"
    ISLAND = "island"


class Edge(Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


OPPOSITE_EDGE = {
    Edge.TOP: Edge.BOTTOM,
    Edge.BOTTOM: Edge.TOP,
    Edge.LEFT: Edge.RIGHT,
    Edge.RIGHT: Edge.LEFT,
}


# Fixed fallback map: a passable staircase with water and walls in one corner
FALLBACK_LAYOUT = [
    "grass grass grass grass grass grass dirt  dirt  sand  sand",
    "grass grass grass grass grass dirt  dirt  sand  sand  sand",
    "grass grass grass grass dirt  dirt  sand  sand  water water",
    "grass grass grass dirt  dirt  sand  sand  water water water",
    "grass grass dirt  dirt  sand  sand  sand  water wall  wall",
    "grass dirt  dirt  sand  sand  sand  water water wall  wall",
    "dirt  dirt  sand  sand  sand  water water wall  wall  wall",
    "dirt  sand  sand  sand  water water wall  wall  wall  wall",
    "sand  sand  sand  water water wall  wall  wall  wall  wall",
    "sand  sand  water water wall  wall  wall  wall  wall  wall",
]


def build_fallback_world() -> GridWorld:
    """The guaranteed-valid 10x10 map."""
    return GridWorld.from_terrain(
        [[TerrainType(name) for name in line.split()] for line in FALLBACK_LAYOUT]
    )


@dataclass
class BiomeSeed:
    biome: Biome
    position: Position


@dataclass
class GeneratedMap:
    """Accepted map plus its initial entities."""
    world: GridWorld
    entities: list[Entity]
    attempts: int
    used_fallback: bool
    biomes: list[Biome] = field(default_factory=list)

    def get_stats(self) -> dict:
        stats = self.world.get_stats()
        stats.update({
            "attempts": self.attempts,
            "used_fallback": self.used_fallback,
            "biomes": [b.value for b in self.biomes],
            "entities": len(self.entities),
        })
        return stats


class TerrainGenerator:
    """Builds maps and retries until one is playable."""

    # Base terrain painted over each biome
    BASE_TERRAIN = {
        Biome.FOREST: TerrainType.GRASS,
        Biome.ISLAND: TerrainType.GRASS,
        Biome.DESERT: TerrainType.SAND,
        Biome.BEACH: TerrainType.SAND,
    }

    # Alternate terrain used by patches inside each biome
    PATCH_TERRAIN = {
        Biome.FOREST: (TerrainType.DIRT, TerrainType.SAND),
        Biome.DESERT: (TerrainType.DIRT, TerrainType.GRASS),
        Biome.BEACH: (TerrainType.GRASS, TerrainType.DIRT),
        Biome.ISLAND: (TerrainType.DIRT, TerrainType.SAND),
    }

    WALL_KEEP_HEADING = 0.7

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng_seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or GameConfig()
        self.gen = self.config.generation
        self.rng = rng or random.Random(rng_seed)
        self.spawn_planner = SpawnPlanner(self.config.spawn, self.rng)

    # ------------------------------------------------------------------
    # Retry loop
    # ------------------------------------------------------------------

    def generate(self) -> GeneratedMap:
        """Generate a playable map, falling back to the fixed map if needed."""
        for attempt in range(1, self.gen.max_attempts + 1):
            rows = self.rng.randint(self.gen.min_size, self.gen.max_size)
            cols = self.rng.randint(self.gen.min_size, self.gen.max_size)

            world, seeds = self.generate_terrain(rows, cols)
            plan = self.validate(world)
            if plan is None:
                logger.info(f"Attempt {attempt}: rejected {rows}x{cols} map")
                continue

            logger.info(
                f"Attempt {attempt}: accepted {rows}x{cols} map, "
                f"{len(plan.enemies)} enemies, biomes={[s.biome.value for s in seeds]}"
            )
            return GeneratedMap(
                world=world,
                entities=self.spawn_planner.build_entities(plan),
                attempts=attempt,
                used_fallback=False,
                biomes=[s.biome for s in seeds],
            )

        logger.warning(
            f"No playable map after {self.gen.max_attempts} attempts, using fallback map"
        )
        return self.generate_fallback(attempts=self.gen.max_attempts)

    def generate_fallback(self, attempts: int = 0) -> GeneratedMap:
        """Fixed map through the regular spawn pipeline, accepted unconditionally."""
        world = build_fallback_world()
        region = largest_region(world) or []
        plan = self.spawn_planner.plan(region, world)
        return GeneratedMap(
            world=world,
            entities=self.spawn_planner.build_entities(plan),
            attempts=attempts,
            used_fallback=True,
        )

    def validate(self, world: GridWorld) -> Optional[SpawnPlan]:
        """Spawn plan for an acceptable map, or None if the map is rejected."""
        regions = find_regions(world)
        if not regions:
            return None

        largest = regions[0]
        if len(largest) < self.gen.min_region_tiles:
            return None
        if region_share(largest, regions) < self.gen.min_region_share:
            return None

        plan = self.spawn_planner.plan(largest, world)
        if not plan.is_viable(self.config.spawn.min_enemies):
            return None
        return plan

    # ------------------------------------------------------------------
    # Single attempt
    # ------------------------------------------------------------------

    def generate_terrain(self, rows: int, cols: int) -> tuple[GridWorld, list[BiomeSeed]]:
        """Run every terrain pass once on a fresh world."""
        world = GridWorld(rows, cols)
        seeds = self.pick_seeds(rows, cols)
        biome_map = self.assign_biomes(rows, cols, seeds)

        self._paint_base_terrain(world, biome_map)
        self._scatter_patches(world, biome_map)
        self._carve_rivers(world)
        self._carve_lakes(world)
        if any(seed.biome == Biome.ISLAND for seed in seeds):
            self.build_island_ring(world)
        self._scatter_walls(world)

        return world, seeds

    def pick_seeds(self, rows: int, cols: int) -> list[BiomeSeed]:
        count = self.rng.randint(self.gen.min_seeds, self.gen.max_seeds)
        biomes = list(Biome)
        return [
            BiomeSeed(
                biome=self.rng.choice(biomes),
                position=Position(self.rng.randrange(rows), self.rng.randrange(cols)),
            )
            for _ in range(count)
        ]

    def assign_biomes(self, rows: int, cols: int, seeds: list[BiomeSeed]) -> list[list[Biome]]:
        """Discrete Voronoi partition by Manhattan distance; ties go to the earlier seed."""
        biome_map = []
        for row in range(rows):
            here = [
                min(seeds, key=lambda s: abs(s.position.row - row) + abs(s.position.col - col)).biome
                for col in range(cols)
            ]
            biome_map.append(here)
        return biome_map

    def _paint_base_terrain(self, world: GridWorld, biome_map: list[list[Biome]]):
        for row, biomes in enumerate(biome_map):
            for col, biome in enumerate(biomes):
                world.set_terrain(row, col, self.BASE_TERRAIN[biome])

    def _scatter_patches(self, world: GridWorld, biome_map: list[list[Biome]]):
        """Random-walk patches of alternate terrain that stay inside their biome."""
        tiles_by_biome: dict[Biome, list[tuple[int, int]]] = {}
        for row, biomes in enumerate(biome_map):
            for col, biome in enumerate(biomes):
                tiles_by_biome.setdefault(biome, []).append((row, col))

        for biome, tiles in tiles_by_biome.items():
            patch_count = max(1, round(len(tiles) / self.gen.patch_area))
            for _ in range(patch_count):
                row, col = self.rng.choice(tiles)
                terrain = self.rng.choice(self.PATCH_TERRAIN[biome])
                steps = self.rng.randint(self.gen.patch_min_steps, self.gen.patch_max_steps)

                world.set_terrain(row, col, terrain)
                for _ in range(steps):
                    options = [
                        (row + dr, col + dc) for dr, dc in DIRECTIONS
                        if world.in_bounds(row + dr, col + dc) and biome_map[row + dr][col + dc] == biome
                    ]
                    if not options:
                        break
                    row, col = self.rng.choice(options)
                    world.set_terrain(row, col, terrain)

    # Water
    def _carve_rivers(self, world: GridWorld):
        for _ in range(self.rng.randint(0, self.gen.max_rivers)):
            self.carve_river(world)

    def carve_river(self, world: GridWorld) -> list[Position]:
        """Weighted random walk of water from one edge toward the opposite edge."""
        start_edge = self.rng.choice(list(Edge))
        target = OPPOSITE_EDGE[start_edge]
        row, col = self._random_edge_tile(world, start_edge)
        max_steps = min(self.gen.river_max_steps, world.area)

        path = [Position(row, col)]
        world.set_terrain(row, col, TerrainType.WATER)

        for _ in range(max_steps):
            if self._edge_distance(world, row, col, target) == 0:
                break

            moves = [(dr, dc) for dr, dc in DIRECTIONS if world.in_bounds(row + dr, col + dc)]
            distances = [self._edge_distance(world, row + dr, col + dc, target) for dr, dc in moves]

            if self.rng.random() < self.gen.river_bias:
                best = min(distances)
                dr, dc = self.rng.choice([m for m, d in zip(moves, distances) if d == best])
            else:
                weights = [1.0 / (d + 1) for d in distances]
                dr, dc = self.rng.choices(moves, weights=weights)[0]

            row, col = row + dr, col + dc
            world.set_terrain(row, col, TerrainType.WATER)
            path.append(Position(row, col))
            self._splash(world, row, col, dr, dc)

        return path

    def _splash(self, world: GridWorld, row: int, col: int, dr: int, dc: int):
        """Widen the river sideways, relative to the step direction."""
        if dr != 0:
            sides = [(row, col - 1), (row, col + 1)]
        else:
            sides = [(row - 1, col), (row + 1, col)]

        for (side_row, side_col), chance in zip(sides, self.gen.splash_chances):
            if self.rng.random() < chance:
                world.set_terrain(side_row, side_col, TerrainType.WATER)

    def _random_edge_tile(self, world: GridWorld, edge: Edge) -> tuple[int, int]:
        if edge == Edge.TOP:
            return 0, self.rng.randrange(world.cols)
        if edge == Edge.BOTTOM:
            return world.rows - 1, self.rng.randrange(world.cols)
        if edge == Edge.LEFT:
            return self.rng.randrange(world.rows), 0
        return self.rng.randrange(world.rows), world.cols - 1

    @staticmethod
    def _edge_distance(world: GridWorld, row: int, col: int, edge: Edge) -> int:
        if edge == Edge.TOP:
            return row
        if edge == Edge.BOTTOM:
            return world.rows - 1 - row
        if edge == Edge.LEFT:
            return col
        return world.cols - 1 - col

    def _carve_lakes(self, world: GridWorld):
        lake_count = math.ceil(world.area / self.gen.lake_area)
        for _ in range(lake_count):
            center_row = self.rng.randrange(world.rows)
            center_col = self.rng.randrange(world.cols)
            radius = self.rng.randint(self.gen.lake_min_radius, self.gen.lake_max_radius)
            for tile in world.get_tiles_in_range(center_row, center_col, radius):
                world.set_terrain(tile.row, tile.col, TerrainType.WATER)

    def build_island_ring(self, world: GridWorld) -> int:
        """Flood the border and add a sand shoreline. Returns ring thickness."""
        thickness = self.rng.randint(self.gen.island_min_ring, self.gen.island_max_ring)
        for tile in list(world.iter_tiles()):
            depth = min(tile.row, tile.col, world.rows - 1 - tile.row, world.cols - 1 - tile.col)
            if depth < thickness:
                world.set_terrain(tile.row, tile.col, TerrainType.WATER)
            elif depth == thickness:
                world.set_terrain(tile.row, tile.col, TerrainType.SAND)
        return thickness

    # Walls
    def _scatter_walls(self, world: GridWorld) -> int:
        """Short directed walks of wall over passable tiles. Returns walls placed."""
        budget = int(world.area * self.gen.wall_budget)
        clusters = self.rng.randint(self.gen.wall_min_clusters, self.gen.wall_max_clusters)
        placed = 0

        for _ in range(clusters):
            if placed >= budget:
                break
            row = self.rng.randrange(world.rows)
            col = self.rng.randrange(world.cols)
            dr, dc = self.rng.choice(DIRECTIONS)
            length = self.rng.randint(2, 6)

            for _ in range(length):
                if placed >= budget or not world.in_bounds(row, col):
                    break
                if world.is_passable(row, col):
                    world.set_terrain(row, col, TerrainType.WALL)
                    placed += 1
                if self.rng.random() >= self.WALL_KEEP_HEADING:
                    dr, dc = self.rng.choice(DIRECTIONS)
                row, col = row + dr, col + dc

        return placed
