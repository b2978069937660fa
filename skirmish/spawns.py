"""
Spawn planning for player and enemies.

The player starts near the map centre on a tile with room to move; enemies
are scattered through the same region, preferring tiles away from the
player.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from .config import SpawnConfig
from .map import GridWorld, Position
from .regions import Region
from .units import ENEMY_TYPE, PLAYER_TYPE, Combatant, Entity

logger = logging.getLogger(__name__)


@dataclass
class SpawnPlan:
    """Chosen start positions."""
    player: Optional[Position] = None
    enemies: list[Position] = field(default_factory=list)

    def is_viable(self, min_enemies: int) -> bool:
        return self.player is not None and len(self.enemies) >= min_enemies


class SpawnPlanner:
    """Picks start tiles inside a region under spacing constraints."""

    def __init__(self, config: Optional[SpawnConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or SpawnConfig()
        self.rng = rng or random.Random()

    def enemy_count(self, world: GridWorld, region_size: int) -> int:
        """Enemies scale with map area, clamped, and never exceed free region tiles."""
        count = world.area // self.config.tiles_per_enemy
        count = max(self.config.min_enemies, min(self.config.max_enemies, count))
        return max(0, min(count, region_size - 1))

    def choose_player_spawn(self, region: Region, world: GridWorld) -> Optional[Position]:
        """Region tile closest to the grid centre with at least two open neighbors."""
        if not region:
            return None

        candidates = [
            pos for pos in region
            if world.count_passable_neighbors(pos.row, pos.col) >= 2
        ]
        if not candidates:
            candidates = list(region)

        center_row = (world.rows - 1) / 2
        center_col = (world.cols - 1) / 2
        return min(
            candidates,
            key=lambda pos: abs(pos.row - center_row) + abs(pos.col - center_col),
        )

    def choose_enemy_spawns(
        self,
        region: Region,
        world: GridWorld,
        player: Position,
        count: int,
    ) -> list[Position]:
        """Random region tiles, kept at distance from the player where possible."""
        remaining = [
            pos for pos in region
            if pos != player and world.count_passable_neighbors(pos.row, pos.col) >= 1
        ]
        chosen: list[Position] = []

        while len(chosen) < count and remaining:
            pick = None
            threshold = self.config.min_enemy_distance
            while threshold >= 1:
                far_enough = [pos for pos in remaining if pos.manhattan(player) >= threshold]
                if far_enough:
                    pick = self.rng.choice(far_enough)
                    break
                threshold -= 1

            if pick is None:
                pick = self.rng.choice(remaining)

            remaining.remove(pick)
            chosen.append(pick)

        return chosen

    def plan(self, region: Region, world: GridWorld) -> SpawnPlan:
        """Choose the player spawn and all enemy spawns for a region."""
        player = self.choose_player_spawn(region, world)
        if player is None:
            return SpawnPlan()

        count = self.enemy_count(world, len(region))
        enemies = self.choose_enemy_spawns(region, world, player, count)
        logger.debug(f"Spawn plan: player at {player}, {len(enemies)}/{count} enemies placed")
        return SpawnPlan(player=player, enemies=enemies)

    def build_entities(self, plan: SpawnPlan) -> list[Entity]:
        """Turn a plan into live entities, player first."""
        entities = []
        if plan.player is not None:
            health = self.config.player_health
            entities.append(Entity(
                "player-1", PLAYER_TYPE, plan.player,
                Combatant(health=health, max_health=health),
            ))

        for index, position in enumerate(plan.enemies, start=1):
            health = self.rng.randint(self.config.enemy_min_health, self.config.enemy_max_health)
            entities.append(Entity(
                f"enemy-{index}", ENEMY_TYPE, position,
                Combatant(health=health, max_health=health),
            ))

        return entities
