"""Tests for skirmish.config."""

from pathlib import Path

import pytest

from skirmish.config import GameConfig, GenerationConfig, load_config

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def _write_config(tmp_path: Path, text: str) -> Path:
    schema = tmp_path / "schema"
    schema.mkdir()
    (schema / "game.yaml").write_text(text)
    return tmp_path


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        assert load_config(tmp_path) == GameConfig()

    def test_shipped_config_matches_defaults(self) -> None:
        assert load_config(DATA_DIR) == GameConfig()

    def test_partial_file_keeps_other_defaults(self, tmp_path) -> None:
        path = _write_config(tmp_path, "spawn:\n  min_enemies: 1\ncombat:\n  damage_per_hit: 2\n")
        config = load_config(path)
        assert config.spawn.min_enemies == 1
        assert config.spawn.max_enemies == 8
        assert config.combat.damage_per_hit == 2
        assert config.generation == GenerationConfig()

    def test_empty_file(self, tmp_path) -> None:
        assert load_config(_write_config(tmp_path, "")) == GameConfig()

    def test_splash_chances_become_tuple(self, tmp_path) -> None:
        path = _write_config(tmp_path, "generation:\n  splash_chances: [0.1, 0.2]\n")
        assert load_config(path).generation.splash_chances == (0.1, 0.2)

    def test_unknown_keys_ignored(self, tmp_path) -> None:
        path = _write_config(tmp_path, "visibility:\n  window_size: 6\n  radius: 3\n")
        assert load_config(path).visibility.window_size == 6

    def test_scalar_section_raises(self, tmp_path) -> None:
        path = _write_config(tmp_path, "generation: 5\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_invalid_values_raise(self, tmp_path) -> None:
        path = _write_config(tmp_path, "generation:\n  min_size: 30\n  max_size: 20\n")
        with pytest.raises(ValueError):
            load_config(path)


class TestValidate:
    @pytest.mark.parametrize(
        "data",
        [
            {"generation": {"min_region_share": 1.5}},
            {"generation": {"min_seeds": 0}},
            {"generation": {"splash_chances": [0.1]}},
            {"spawn": {"min_enemies": 5, "max_enemies": 2}},
            {"spawn": {"tiles_per_enemy": 0}},
            {"spawn": {"enemy_min_health": 0}},
            {"combat": {"damage_per_hit": -1}},
            {"visibility": {"window_size": 0}},
            {"generation": {"patch_min_steps": 10, "patch_max_steps": 5}},
            {"generation": {"lake_min_radius": 4, "lake_max_radius": 2}},
            {"generation": {"island_min_ring": 5, "island_max_ring": 3}},
            {"generation": {"wall_min_clusters": 6, "wall_max_clusters": 2}},
            {"generation": {"splash_chances": 0.3}},
            {"generation": 5},
            {"spawn": [1, 2]},
            ["generation"],
        ],
    )
    def test_rejects(self, data) -> None:
        with pytest.raises(ValueError):
            GameConfig.from_dict(data)

    def test_defaults_are_valid(self) -> None:
        assert GameConfig().validate() == GameConfig()
