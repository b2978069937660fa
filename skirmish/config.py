"""
Tunable configuration for map generation, spawning, combat and visibility.

Values are read from data/schema/game.yaml when present; every key is
optional and falls back to the defaults below.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass
class GenerationConfig:
    """Terrain generator tunables."""
    max_attempts: int = 8
    min_size: int = 10
    max_size: int = 50
    min_region_tiles: int = 25
    min_region_share: float = 0.45
    min_seeds: int = 2
    max_seeds: int = 4
    patch_area: int = 30
    patch_min_steps: int = 6
    patch_max_steps: int = 18
    max_rivers: int = 2
    river_bias: float = 0.65
    river_max_steps: int = 120
    splash_chances: tuple[float, float] = (0.30, 0.35)
    lake_area: int = 350
    lake_min_radius: int = 1
    lake_max_radius: int = 3
    island_min_ring: int = 2
    island_max_ring: int = 4
    wall_min_clusters: int = 3
    wall_max_clusters: int = 5
    wall_budget: float = 0.04


@dataclass
class SpawnConfig:
    """Spawn planner tunables."""
    min_enemies: int = 3
    max_enemies: int = 8
    tiles_per_enemy: int = 140
    min_enemy_distance: int = 4
    player_health: int = 5
    enemy_min_health: int = 2
    enemy_max_health: int = 4


@dataclass
class CombatConfig:
    """Combat rule tunables."""
    damage_per_hit: int = 1
    default_player_health: int = 5
    default_enemy_health: int = 2


@dataclass
class VisibilityConfig:
    """Fog-of-war tunables."""
    window_size: int = 10


@dataclass
class GameConfig:
    """Complete configuration."""
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    spawn: SpawnConfig = field(default_factory=SpawnConfig)
    combat: CombatConfig = field(default_factory=CombatConfig)
    visibility: VisibilityConfig = field(default_factory=VisibilityConfig)

    def validate(self) -> "GameConfig":
        """Reject values the generator and simulator cannot work with."""
        gen = self.generation
        if gen.max_attempts < 0:
            raise ValueError("generation.max_attempts must be >= 0")
        if not 1 <= gen.min_size <= gen.max_size:
            raise ValueError("generation sizes must satisfy 1 <= min_size <= max_size")
        if not 0.0 <= gen.min_region_share <= 1.0:
            raise ValueError("generation.min_region_share must be within [0, 1]")
        if not 1 <= gen.min_seeds <= gen.max_seeds:
            raise ValueError("generation seed counts must satisfy 1 <= min_seeds <= max_seeds")
        if gen.patch_area <= 0 or gen.lake_area <= 0:
            raise ValueError("generation patch_area and lake_area must be positive")
        if not 0 <= gen.patch_min_steps <= gen.patch_max_steps:
            raise ValueError("generation patch steps must satisfy 0 <= patch_min_steps <= patch_max_steps")
        if not 0 <= gen.lake_min_radius <= gen.lake_max_radius:
            raise ValueError("generation lake radii must satisfy 0 <= lake_min_radius <= lake_max_radius")
        if not 0 <= gen.island_min_ring <= gen.island_max_ring:
            raise ValueError("generation island rings must satisfy 0 <= island_min_ring <= island_max_ring")
        if not 0 <= gen.wall_min_clusters <= gen.wall_max_clusters:
            raise ValueError(
                "generation wall clusters must satisfy 0 <= wall_min_clusters <= wall_max_clusters"
            )
        if len(gen.splash_chances) != 2:
            raise ValueError("generation.splash_chances needs exactly two values")

        spawn = self.spawn
        if not 0 <= spawn.min_enemies <= spawn.max_enemies:
            raise ValueError("spawn enemy counts must satisfy 0 <= min_enemies <= max_enemies")
        if spawn.tiles_per_enemy <= 0:
            raise ValueError("spawn.tiles_per_enemy must be positive")
        if not 1 <= spawn.enemy_min_health <= spawn.enemy_max_health:
            raise ValueError("spawn enemy health must satisfy 1 <= min <= max")
        if spawn.player_health <= 0:
            raise ValueError("spawn.player_health must be positive")

        if self.combat.damage_per_hit < 0:
            raise ValueError("combat.damage_per_hit must be >= 0")
        if self.visibility.window_size <= 0:
            raise ValueError("visibility.window_size must be positive")
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "GameConfig":
        """Build a config from a (possibly partial) nested dict."""
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Game config must be a mapping, got {type(data).__name__}")
        config = cls(
            generation=_section(GenerationConfig, data.get("generation")),
            spawn=_section(SpawnConfig, data.get("spawn")),
            combat=_section(CombatConfig, data.get("combat")),
            visibility=_section(VisibilityConfig, data.get("visibility")),
        )
        return config.validate()


def _section(section_cls, values: dict | None):
    """Instantiate one config section, ignoring unknown keys."""
    if values is None:
        return section_cls()
    if not isinstance(values, dict):
        raise ValueError(f"{section_cls.__name__} section must be a mapping, got {values!r}")

    known = {f.name for f in fields(section_cls)}
    kwargs = {}
    for key, value in values.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key: {section_cls.__name__}.{key}")
            continue
        if key == "splash_chances":
            try:
                value = tuple(float(v) for v in value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid splash_chances: {value!r}") from e
        kwargs[key] = value
    return section_cls(**kwargs)


def load_config(data_path: Path | str = "data") -> GameConfig:
    """Load game configuration from the schema directory."""
    config_path = Path(data_path) / "schema" / "game.yaml"
    if not config_path.exists():
        logger.warning(f"Game config not found: {config_path}, using defaults")
        return GameConfig()

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    config = GameConfig.from_dict(data)
    logger.info(f"Loaded game config from {config_path}")
    return config
