"""
Entity state for the skirmish simulation.

Entities are anything that lives on the grid. Health is an optional
Combatant capability: entities without one are ignored by combat rules.
The simulator owns all live entities through an EntityArena keyed by id.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .map import Position

logger = logging.getLogger(__name__)

PLAYER_TYPE = "player"
ENEMY_TYPE = "enemy"
NPC_TYPE = "npc"


@dataclass
class Combatant:
    """Health pool attached to entities that take part in combat."""
    health: int
    max_health: int

    def __post_init__(self):
        # Keep 0 <= health <= max_health
        self.health = max(0, self.health)
        if self.max_health < self.health:
            self.max_health = self.health

    def is_alive(self) -> bool:
        return self.health > 0

    def take_damage(self, amount: int) -> int:
        """Apply damage, floored at zero. Returns remaining health."""
        self.health = max(0, self.health - amount)
        return self.health


@dataclass(frozen=True)
class EntitySnapshot:
    """Value copy of an entity, independent of the live object."""
    id: str
    type: str
    position: Position
    health: Optional[int] = None
    max_health: Optional[int] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "type": self.type,
            "position": self.position.to_dict(),
        }
        if self.health is not None:
            data["health"] = self.health
        if self.max_health is not None:
            data["maxHealth"] = self.max_health
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "EntitySnapshot":
        """Decode an entity snapshot. Raises ValueError on missing fields."""
        try:
            return cls(
                id=str(data["id"]),
                type=str(data["type"]),
                position=Position.from_dict(data["position"]),
                health=data.get("health"),
                max_health=data.get("maxHealth"),
            )
        except KeyError as e:
            raise ValueError(f"Entity snapshot is missing field {e}") from e


class Entity:
    """Anything that occupies a tile: player, enemy, npc."""

    def __init__(
        self,
        entity_id: str,
        entity_type: str,
        position: Position,
        combatant: Optional[Combatant] = None,
    ):
        self._id = entity_id
        self.type = entity_type
        self.position = position
        self.combatant = combatant
        self.destroyed = False

    @property
    def id(self) -> str:
        return self._id

    @property
    def health(self) -> Optional[int]:
        return self.combatant.health if self.combatant else None

    @property
    def max_health(self) -> Optional[int]:
        return self.combatant.max_health if self.combatant else None

    def is_alive(self) -> bool:
        """Non-combatants count as alive; combatants need health left."""
        return self.combatant is None or self.combatant.is_alive()

    def update(self, delta: float):
        """Per-tick hook for embedding applications. No engine behavior."""

    def destroy(self):
        """Teardown notification, called once the entity leaves play."""
        self.destroyed = True
        logger.debug(f"Entity {self.id} destroyed")

    def snapshot(self) -> EntitySnapshot:
        return EntitySnapshot(
            id=self.id,
            type=self.type,
            position=self.position,
            health=self.health,
            max_health=self.max_health,
        )

    @classmethod
    def from_snapshot(cls, snap: EntitySnapshot) -> "Entity":
        """Default entity factory used by restore and replay."""
        combatant = None
        if snap.health is not None or snap.max_health is not None:
            health = snap.health if snap.health is not None else snap.max_health
            max_health = snap.max_health if snap.max_health is not None else health
            combatant = Combatant(health=health, max_health=max_health)
        return cls(snap.id, snap.type, snap.position, combatant)

    def __repr__(self) -> str:
        return (
            f"Entity(id={self.id!r}, type={self.type!r}, "
            f"position=({self.position.row}, {self.position.col}), health={self.health})"
        )


EntityFactory = Callable[[EntitySnapshot], Entity]


class EntityArena:
    """Insertion-ordered store of live entities keyed by id."""

    def __init__(self, entities: Optional[list[Entity]] = None):
        self._entities: dict[str, Entity] = {}
        for entity in entities or []:
            self.add(entity)

    def add(self, entity: Entity):
        """Add an entity. A duplicate id replaces the earlier entry in place."""
        if entity.id in self._entities:
            logger.warning(f"Duplicate entity id {entity.id}, replacing")
        self._entities[entity.id] = entity

    def get(self, entity_id: str) -> Optional[Entity]:
        return self._entities.get(entity_id)

    def remove(self, entity_id: str) -> Optional[Entity]:
        return self._entities.pop(entity_id, None)

    def entity_at(self, position: Position) -> Optional[Entity]:
        for entity in self._entities.values():
            if entity.position == position:
                return entity
        return None

    def is_occupied(self, position: Position) -> bool:
        return self.entity_at(position) is not None

    def get_by_type(self, entity_type: str) -> list[Entity]:
        return [e for e in self._entities.values() if e.type == entity_type]

    def first_of_type(self, entity_type: str) -> Optional[Entity]:
        for entity in self._entities.values():
            if entity.type == entity_type:
                return entity
        return None

    def get_living_enemies(self) -> list[Entity]:
        """Enemies with health left, in arena order."""
        return [
            e for e in self._entities.values()
            if e.type == ENEMY_TYPE and e.combatant is not None and e.combatant.is_alive()
        ]

    def snapshots(self) -> list[EntitySnapshot]:
        return [e.snapshot() for e in self._entities.values()]

    @classmethod
    def from_snapshots(
        cls,
        snapshots: list[EntitySnapshot],
        factory: EntityFactory = Entity.from_snapshot,
    ) -> "EntityArena":
        return cls([factory(snap) for snap in snapshots])

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._entities

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    def __len__(self) -> int:
        return len(self._entities)

    def get_stats(self) -> dict:
        """Get entity statistics."""
        by_type: dict[str, int] = {}
        for entity in self._entities.values():
            by_type[entity.type] = by_type.get(entity.type, 0) + 1
        return {
            "total_entities": len(self._entities),
            "by_type": by_type,
            "living_enemies": len(self.get_living_enemies()),
        }
