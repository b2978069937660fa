"""
Game actions: the only vocabulary for mutating entity state.

Every accepted player or enemy action is applied through apply_action and
recorded in the action log, which makes any match replayable from a
snapshot. Actions serialize to plain dicts tagged by "kind", with camelCase
keys (entityId, attackerId, targetId) as in the wire format.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from .map import Position
from .units import Entity, EntityArena

logger = logging.getLogger(__name__)

DAMAGE_PER_HIT = 1


@dataclass(frozen=True)
class MoveAction:
    """Move an entity to a tile."""
    kind: ClassVar[str] = "move"
    entity_id: str
    to: Position

    def to_dict(self) -> dict:
        return {"kind": self.kind, "entityId": self.entity_id, "to": self.to.to_dict()}


@dataclass(frozen=True)
class AttackAction:
    """One hit from attacker to target."""
    kind: ClassVar[str] = "attack"
    attacker_id: str
    target_id: str

    def to_dict(self) -> dict:
        return {"kind": self.kind, "attackerId": self.attacker_id, "targetId": self.target_id}


@dataclass(frozen=True)
class RemoveAction:
    """Take an entity out of play."""
    kind: ClassVar[str] = "remove"
    entity_id: str

    def to_dict(self) -> dict:
        return {"kind": self.kind, "entityId": self.entity_id}


GameAction = Union[MoveAction, AttackAction, RemoveAction]


def action_from_dict(data: dict) -> GameAction:
    """Decode a serialized action. Raises ValueError on unknown kinds or missing fields."""
    kind = data.get("kind")
    try:
        if kind == MoveAction.kind:
            return MoveAction(entity_id=str(data["entityId"]), to=Position.from_dict(data["to"]))
        if kind == AttackAction.kind:
            return AttackAction(attacker_id=str(data["attackerId"]), target_id=str(data["targetId"]))
        if kind == RemoveAction.kind:
            return RemoveAction(entity_id=str(data["entityId"]))
    except KeyError as e:
        raise ValueError(f"Action {kind!r} is missing field {e}") from e
    raise ValueError(f"Unknown action kind: {kind!r}")


def apply_action(
    action: GameAction,
    entities: EntityArena,
    damage: int = DAMAGE_PER_HIT,
) -> Optional[Entity]:
    """
    Execute exactly one action against the entity arena.

    No passability, adjacency or turn checks happen here; those belong to
    intent validation. References to unknown entity ids are no-ops.

    Returns the removed entity for a RemoveAction that found its target,
    otherwise None.
    """
    if isinstance(action, MoveAction):
        entity = entities.get(action.entity_id)
        if entity is None:
            logger.debug(f"Move ignored, unknown entity {action.entity_id}")
            return None
        entity.position = action.to

    elif isinstance(action, AttackAction):
        attacker = entities.get(action.attacker_id)
        target = entities.get(action.target_id)
        if attacker is None or target is None:
            logger.debug(f"Attack ignored, unknown entity in {action}")
            return None
        # Non-combatants are exempt from damage
        if target.combatant is None:
            return None
        target.combatant.take_damage(damage)

    elif isinstance(action, RemoveAction):
        removed = entities.remove(action.entity_id)
        if removed is None:
            logger.debug(f"Remove ignored, unknown entity {action.entity_id}")
        return removed

    return None
