"""Tests for skirmish.units."""

import pytest

from skirmish.map import Position
from skirmish.units import (
    ENEMY_TYPE,
    NPC_TYPE,
    Combatant,
    Entity,
    EntityArena,
    EntitySnapshot,
)

from conftest import make_enemy, make_player


class TestCombatant:
    def test_negative_health_clamped(self) -> None:
        assert Combatant(health=-3, max_health=5).health == 0

    def test_max_raised_to_health(self) -> None:
        assert Combatant(health=7, max_health=5).max_health == 7

    def test_take_damage(self) -> None:
        combatant = Combatant(health=2, max_health=2)
        assert combatant.take_damage(1) == 1
        assert combatant.take_damage(4) == 0
        assert not combatant.is_alive()


class TestEntity:
    def test_id_is_read_only(self) -> None:
        entity = make_player(0, 0)
        with pytest.raises(AttributeError):
            entity.id = "other"  # type: ignore[misc]

    def test_snapshot_is_a_value_copy(self) -> None:
        entity = make_enemy("enemy-1", 2, 3, health=2)
        snap = entity.snapshot()
        entity.position = Position(9, 9)
        entity.combatant.take_damage(1)

        assert snap == EntitySnapshot("enemy-1", ENEMY_TYPE, Position(2, 3), 2, 2)

    def test_from_snapshot(self) -> None:
        entity = Entity.from_snapshot(EntitySnapshot("enemy-2", ENEMY_TYPE, Position(1, 1), 1, 3))
        assert entity.health == 1
        assert entity.max_health == 3

    def test_from_snapshot_without_health(self) -> None:
        entity = Entity.from_snapshot(EntitySnapshot("npc-1", NPC_TYPE, Position(1, 1)))
        assert entity.combatant is None
        assert entity.is_alive()

    def test_snapshot_dict_omits_missing_health(self) -> None:
        snap = EntitySnapshot("npc-1", NPC_TYPE, Position(1, 1))
        assert snap.to_dict() == {"id": "npc-1", "type": NPC_TYPE, "position": {"row": 1, "col": 1}}
        assert EntitySnapshot.from_dict(snap.to_dict()) == snap

    def test_destroy(self) -> None:
        entity = make_enemy("enemy-1", 0, 0)
        entity.destroy()
        assert entity.destroyed


class TestEntityArena:
    def test_keeps_insertion_order(self) -> None:
        arena = EntityArena([make_enemy("enemy-2", 0, 0), make_player(1, 1), make_enemy("enemy-1", 2, 2)])
        assert [e.id for e in arena] == ["enemy-2", "player-1", "enemy-1"]

    def test_duplicate_id_replaces(self) -> None:
        arena = EntityArena([make_enemy("enemy-1", 0, 0), make_enemy("enemy-1", 4, 4)])
        assert len(arena) == 1
        assert arena.get("enemy-1").position == Position(4, 4)

    def test_occupancy(self) -> None:
        arena = EntityArena([make_player(1, 1)])
        assert arena.is_occupied(Position(1, 1))
        assert arena.entity_at(Position(1, 1)).id == "player-1"
        assert not arena.is_occupied(Position(1, 2))

    def test_living_enemies(self) -> None:
        arena = EntityArena([
            make_player(0, 0),
            make_enemy("enemy-1", 1, 1, health=2),
            make_enemy("enemy-2", 2, 2, health=0),
            Entity("npc-1", NPC_TYPE, Position(3, 3)),
        ])
        assert [e.id for e in arena.get_living_enemies()] == ["enemy-1"]

    def test_iteration_tolerates_removal(self) -> None:
        arena = EntityArena([make_enemy("enemy-1", 0, 0), make_enemy("enemy-2", 1, 1)])
        for entity in arena:
            arena.remove(entity.id)
        assert len(arena) == 0

    def test_stats(self) -> None:
        arena = EntityArena([make_player(0, 0), make_enemy("enemy-1", 1, 1)])
        stats = arena.get_stats()
        assert stats["total_entities"] == 2
        assert stats["by_type"] == {"player": 1, "enemy": 1}
        assert stats["living_enemies"] == 1
