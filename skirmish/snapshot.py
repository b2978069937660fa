"""
Snapshots and deterministic replay.

A GameSnapshot is a value copy of simulator state with no references to
live entities. Replaying an ordered action list on top of a snapshot always
yields the same entities and log.
"""

import json
from dataclasses import dataclass, field

from .actions import DAMAGE_PER_HIT, GameAction, action_from_dict, apply_action
from .combat.base import GameResult
from .turn import Phase
from .units import Entity, EntityArena, EntityFactory, EntitySnapshot


@dataclass(frozen=True)
class GameSnapshot:
    """Serializable simulator state."""
    entities: tuple[EntitySnapshot, ...] = ()
    turn: Phase = Phase.PLAYER
    result: GameResult = GameResult.PLAYING
    action_log: tuple[GameAction, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "entities": [e.to_dict() for e in self.entities],
            "turn": self.turn.value,
            "result": self.result.value,
            "actionLog": [a.to_dict() for a in self.action_log],
        }

    def to_json(self) -> str:
        """Canonical JSON: identical states give identical strings."""
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_dict(cls, data: dict) -> "GameSnapshot":
        """Decode a snapshot. Raises ValueError on unknown turn/result values or malformed entries."""
        return cls(
            entities=tuple(EntitySnapshot.from_dict(e) for e in data.get("entities", [])),
            turn=Phase(data.get("turn", Phase.PLAYER.value)),
            result=GameResult(data.get("result", GameResult.PLAYING.value)),
            action_log=tuple(action_from_dict(a) for a in data.get("actionLog", [])),
        )


def capture(
    entities: EntityArena,
    turn: Phase,
    result: GameResult,
    action_log: list[GameAction],
) -> GameSnapshot:
    return GameSnapshot(
        entities=tuple(entities.snapshots()),
        turn=turn,
        result=result,
        action_log=tuple(action_log),
    )


def rebuild_arena(snapshot: GameSnapshot, factory: EntityFactory = Entity.from_snapshot) -> EntityArena:
    """Fresh arena of entities built through the factory."""
    return EntityArena.from_snapshots(list(snapshot.entities), factory)


def replay(
    snapshot: GameSnapshot,
    actions: list[GameAction],
    factory: EntityFactory = Entity.from_snapshot,
    damage: int = DAMAGE_PER_HIT,
) -> GameSnapshot:
    """
    Apply actions on top of a snapshot and return the resulting snapshot.

    Actions are applied without validation and without teardown callbacks.
    The returned log is the snapshot's log followed by the replayed actions.
    """
    entities = rebuild_arena(snapshot, factory)
    for action in actions:
        apply_action(action, entities, damage)

    return GameSnapshot(
        entities=tuple(entities.snapshots()),
        turn=snapshot.turn,
        result=snapshot.result,
        action_log=tuple(snapshot.action_log) + tuple(actions),
    )
