"""Tests for skirmish.spawns."""

from random import Random

from skirmish.config import SpawnConfig
from skirmish.map import GridWorld, Position, TerrainType
from skirmish.regions import find_regions, largest_region
from skirmish.spawns import SpawnPlan, SpawnPlanner
from skirmish.units import ENEMY_TYPE, PLAYER_TYPE


def _row_major(world: GridWorld) -> list[Position]:
    return [tile.position for tile in world.iter_tiles() if tile.passable]


class TestEnemyCount:
    def test_small_map_uses_minimum(self) -> None:
        planner = SpawnPlanner(rng=Random(0))
        assert planner.enemy_count(GridWorld(20, 20), 400) == 3

    def test_large_map_is_capped(self) -> None:
        planner = SpawnPlanner(rng=Random(0))
        assert planner.enemy_count(GridWorld(50, 50), 2500) == 8

    def test_scales_with_area(self) -> None:
        planner = SpawnPlanner(rng=Random(0))
        # 30 * 30 // 140 == 6
        assert planner.enemy_count(GridWorld(30, 30), 900) == 6

    def test_never_exceeds_free_region_tiles(self) -> None:
        planner = SpawnPlanner(rng=Random(0))
        assert planner.enemy_count(GridWorld(20, 20), 3) == 2


class TestPlayerSpawn:
    def test_exact_centre_on_odd_grid(self) -> None:
        world = GridWorld(9, 9)
        player = SpawnPlanner(rng=Random(0)).choose_player_spawn(_row_major(world), world)
        assert player == Position(4, 4)

    def test_tie_goes_to_earliest_region_tile(self) -> None:
        world = GridWorld(10, 10)
        player = SpawnPlanner(rng=Random(0)).choose_player_spawn(_row_major(world), world)
        assert player == Position(4, 4)

    def test_skips_dead_end_tiles(self) -> None:
        world = GridWorld(5, 5)
        for row, col in [(1, 2), (2, 1), (2, 3)]:
            world.set_terrain(row, col, TerrainType.WALL)
        assert world.count_passable_neighbors(2, 2) == 1

        player = SpawnPlanner(rng=Random(0)).choose_player_spawn(largest_region(world), world)
        assert player == Position(3, 2)

    def test_falls_back_to_any_tile(self) -> None:
        world = GridWorld(1, 1)
        player = SpawnPlanner(rng=Random(0)).choose_player_spawn([Position(0, 0)], world)
        assert player == Position(0, 0)

    def test_empty_region(self) -> None:
        assert SpawnPlanner(rng=Random(0)).choose_player_spawn([], GridWorld(3, 3)) is None


class TestEnemySpawns:
    def test_distinct_region_tiles_away_from_player(self) -> None:
        world = GridWorld(20, 20)
        region = largest_region(world)
        player = Position(10, 10)
        enemies = SpawnPlanner(rng=Random(7)).choose_enemy_spawns(region, world, player, 6)

        assert len(enemies) == 6
        assert len(set(enemies)) == 6
        assert player not in enemies
        assert all(pos in region for pos in enemies)
        assert all(pos.manhattan(player) >= 4 for pos in enemies)

    def test_cramped_region_relaxes_distance(self) -> None:
        world = GridWorld(1, 5)
        region = largest_region(world)
        player = Position(0, 2)
        enemies = SpawnPlanner(rng=Random(3)).choose_enemy_spawns(region, world, player, 4)
        assert sorted(enemies, key=lambda p: p.col) == [
            Position(0, 0), Position(0, 1), Position(0, 3), Position(0, 4),
        ]

    def test_stops_when_region_runs_out(self) -> None:
        world = GridWorld(1, 3)
        region = largest_region(world)
        enemies = SpawnPlanner(rng=Random(0)).choose_enemy_spawns(region, world, Position(0, 0), 5)
        assert len(enemies) == 2

    def test_same_seed_same_picks(self) -> None:
        world = GridWorld(15, 15)
        region = largest_region(world)
        first = SpawnPlanner(rng=Random(11)).choose_enemy_spawns(region, world, Position(7, 7), 5)
        second = SpawnPlanner(rng=Random(11)).choose_enemy_spawns(region, world, Position(7, 7), 5)
        assert first == second


class TestPlan:
    def test_plan_on_fallback_map(self, fallback_world) -> None:
        region = largest_region(fallback_world)
        plan = SpawnPlanner(rng=Random(0)).plan(region, fallback_world)

        assert plan.is_viable(3)
        assert len(plan.enemies) == 3
        assert plan.player in region
        assert abs(plan.player.row - 4.5) + abs(plan.player.col - 4.5) == 1.0

    def test_empty_region_is_not_viable(self) -> None:
        plan = SpawnPlanner(rng=Random(0)).plan([], GridWorld(3, 3))
        assert plan == SpawnPlan()
        assert not plan.is_viable(0)

    def test_build_entities(self) -> None:
        config = SpawnConfig(player_health=7, enemy_min_health=2, enemy_max_health=4)
        planner = SpawnPlanner(config, Random(5))
        plan = SpawnPlan(player=Position(0, 0), enemies=[Position(3, 3), Position(4, 4)])
        entities = planner.build_entities(plan)

        assert [e.id for e in entities] == ["player-1", "enemy-1", "enemy-2"]
        assert entities[0].type == PLAYER_TYPE
        assert entities[0].health == 7
        for enemy in entities[1:]:
            assert enemy.type == ENEMY_TYPE
            assert 2 <= enemy.health <= 4
            assert enemy.health == enemy.max_health

    def test_plan_uses_largest_region(self) -> None:
        world = GridWorld(5, 7)
        for row in range(5):
            world.set_terrain(row, 2, TerrainType.WALL)
        region = find_regions(world)[0]
        plan = SpawnPlanner(rng=Random(2)).plan(region, world)
        assert plan.player.col > 2
        assert all(pos.col > 2 for pos in plan.enemies)
