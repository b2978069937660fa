"""Shared fixtures for the skirmish test suite."""

from random import Random

import pytest

from skirmish.intents import IntentQueue
from skirmish.map import GridWorld, Position, TerrainType
from skirmish.simulator import CombatSimulator
from skirmish.terrain import build_fallback_world
from skirmish.units import ENEMY_TYPE, PLAYER_TYPE, Combatant, Entity


def make_player(row: int, col: int, health: int = 5) -> Entity:
    return Entity("player-1", PLAYER_TYPE, Position(row, col), Combatant(health, max(health, 5)))


def make_enemy(entity_id: str, row: int, col: int, health: int = 2) -> Entity:
    return Entity(entity_id, ENEMY_TYPE, Position(row, col), Combatant(health, health))


@pytest.fixture
def rng() -> Random:
    return Random(1234)


@pytest.fixture
def open_world() -> GridWorld:
    """20x20 all-grass world."""
    return GridWorld(20, 20)


@pytest.fixture
def fallback_world() -> GridWorld:
    return build_fallback_world()


@pytest.fixture
def walled_world() -> GridWorld:
    """10x10 grass world with a vertical wall in column 5, rows 0-8."""
    world = GridWorld(10, 10)
    for row in range(9):
        world.set_terrain(row, 5, TerrainType.WALL)
    return world


@pytest.fixture
def start_match():
    """Initialize a simulator on a world with the given entities."""

    def _start(world: GridWorld, entities: list[Entity]):
        intents = IntentQueue()
        sim = CombatSimulator()
        sim.initialize(world, intents, entities)
        return sim, intents

    return _start
