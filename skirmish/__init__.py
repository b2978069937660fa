"""
Turn-based tactical skirmish on a square grid.

Core modules:
- map: Grid tiles and terrain
- terrain: Procedural map generation with validation and fallback
- regions: Connected passable regions
- spawns: Player and enemy start positions
- fog_of_war: Line-of-sight visibility and explored memory
- units: Entities and the entity arena
- actions: Action vocabulary and the canonical mutation
- turn: Player/enemy phase machine
- simulator: Intent validation, enemy phase, outcome, snapshots
- snapshot: Serializable state and deterministic replay
"""

from .config import GameConfig, GenerationConfig, SpawnConfig, CombatConfig, VisibilityConfig, load_config
from .map import GridWorld, Tile, TerrainType, Position
from .regions import Region, find_regions, largest_region, passable_tile_count, region_share
from .spawns import SpawnPlan, SpawnPlanner
from .terrain import TerrainGenerator, GeneratedMap, Biome, build_fallback_world
from .fog_of_war import FogOfWar, Visibility, compute_visible, has_line_of_sight
from .units import Entity, Combatant, EntityArena, EntitySnapshot, PLAYER_TYPE, ENEMY_TYPE, NPC_TYPE
from .actions import GameAction, MoveAction, AttackAction, RemoveAction, apply_action, action_from_dict
from .intents import IntentQueue, TileSelected, EntityTapped
from .turn import TurnManager, Phase
from .combat import GameResult
from .snapshot import GameSnapshot, replay
from .simulator import CombatSimulator

__all__ = [
    # Config
    "GameConfig", "GenerationConfig", "SpawnConfig", "CombatConfig", "VisibilityConfig", "load_config",
    # Map
    "GridWorld", "Tile", "TerrainType", "Position",
    # Generation
    "Region", "find_regions", "largest_region", "passable_tile_count", "region_share",
    "SpawnPlan", "SpawnPlanner",
    "TerrainGenerator", "GeneratedMap", "Biome", "build_fallback_world",
    # Fog of War
    "FogOfWar", "Visibility", "compute_visible", "has_line_of_sight",
    # Entities and actions
    "Entity", "Combatant", "EntityArena", "EntitySnapshot", "PLAYER_TYPE", "ENEMY_TYPE", "NPC_TYPE",
    "GameAction", "MoveAction", "AttackAction", "RemoveAction", "apply_action", "action_from_dict",
    # Turn Management
    "IntentQueue", "TileSelected", "EntityTapped",
    "TurnManager", "Phase", "GameResult",
    "GameSnapshot", "replay", "CombatSimulator",
]
