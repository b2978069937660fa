"""
Combat simulator for the skirmish simulation.

Owns the live entities during a match and is their only writer. Player
intents are validated here, turned into actions, and followed synchronously
by a complete enemy phase:

player action → end player turn → enemy phase → start player turn

Every accepted action goes through apply_action and is appended to the
action log.
"""

import logging
from typing import Callable, Optional

from .actions import AttackAction, GameAction, MoveAction, RemoveAction, apply_action
from .combat import GameResult, choose_greedy_step, is_adjacent
from .config import CombatConfig
from .intents import EntityTapped, IntentQueue, TileSelected
from .map import GridWorld, Position
from .snapshot import GameSnapshot, capture, rebuild_arena, replay
from .turn import Phase, TurnManager
from .units import (
    ENEMY_TYPE, PLAYER_TYPE, Combatant, Entity, EntityArena, EntityFactory, EntitySnapshot,
)

logger = logging.getLogger(__name__)


class CombatSimulator:
    """Turn-based combat over a grid world."""

    def __init__(
        self,
        config: Optional[CombatConfig] = None,
        entity_factory: EntityFactory = Entity.from_snapshot,
    ):
        self.config = config or CombatConfig()
        self.entity_factory = entity_factory

        self.world: Optional[GridWorld] = None
        self.intents: Optional[IntentQueue] = None
        self.entities = EntityArena()
        self.turn_manager = TurnManager()
        self.result = GameResult.PLAYING
        self._action_log: list[GameAction] = []
        self._player_id: Optional[str] = None

        # Observers for the embedding application
        self.on_action: Optional[Callable[[GameAction], None]] = None
        self.on_turn_end: Optional[Callable[[], None]] = None

    def initialize(self, world: GridWorld, intents: IntentQueue, entities: list[Entity]):
        """Take ownership of the starting entities and reset match state."""
        self.world = world
        self.intents = intents
        self.entities = EntityArena(entities)
        self.turn_manager = TurnManager()
        self.result = GameResult.PLAYING
        self._action_log = []

        for entity in self.entities:
            self._ensure_health(entity)
        self._locate_player()

        logger.info(
            f"Match initialized on {world.rows}x{world.cols} map: "
            f"{len(self.entities.get_living_enemies())} enemies"
        )

    def _ensure_health(self, entity: Entity):
        """Give players and enemies a default health pool if they lack one."""
        if entity.combatant is not None:
            return
        if entity.type == PLAYER_TYPE:
            health = self.config.default_player_health
        elif entity.type == ENEMY_TYPE:
            health = self.config.default_enemy_health
        else:
            return
        entity.combatant = Combatant(health=health, max_health=health)

    def _locate_player(self):
        player = self.entities.first_of_type(PLAYER_TYPE)
        self._player_id = player.id if player else None

    @property
    def player(self) -> Optional[Entity]:
        if self._player_id is None:
            return None
        return self.entities.get(self._player_id)

    # ------------------------------------------------------------------
    # Scene contract
    # ------------------------------------------------------------------

    def update(self, delta: float):
        """Drain queued intents, then evaluate the outcome."""
        if self.intents is not None:
            for intent in self.intents.drain():
                if self.result != GameResult.PLAYING:
                    logger.debug(f"Match over, discarding {intent}")
                    continue
                if isinstance(intent, TileSelected):
                    self.handle_tile_selected(intent.row, intent.col)
                elif isinstance(intent, EntityTapped):
                    self.handle_entity_tapped(intent.entity_id)

        for entity in self.entities:
            entity.update(delta)

        self._evaluate_outcome()

    def is_over(self) -> bool:
        return self.result != GameResult.PLAYING

    def get_result(self) -> GameResult:
        return self.result

    @property
    def turn(self) -> Phase:
        return self.turn_manager.current_phase

    @property
    def action_log(self) -> tuple[GameAction, ...]:
        return tuple(self._action_log)

    def get_entity(self, entity_id: str) -> Optional[EntitySnapshot]:
        """Read-only copy of one entity."""
        entity = self.entities.get(entity_id)
        return entity.snapshot() if entity else None

    def entity_snapshots(self) -> list[EntitySnapshot]:
        return self.entities.snapshots()

    def _evaluate_outcome(self):
        if self.result != GameResult.PLAYING:
            return

        player = self.player
        if player is not None and (player.health or 0) <= 0:
            self._end_match(GameResult.LOSE)
            return

        if not self.entities.get_living_enemies():
            self._end_match(GameResult.WIN)

    def _end_match(self, result: GameResult):
        self.result = result
        logger.info(f"Match over: {result.value} after {len(self._action_log)} actions")

    # ------------------------------------------------------------------
    # Player intents
    # ------------------------------------------------------------------

    def _can_accept_intent(self) -> bool:
        return (
            self.result == GameResult.PLAYING
            and self.turn_manager.is_player_turn()
            and self.player is not None
            and self.world is not None
        )

    def handle_tile_selected(self, row: int, col: int):
        """Move the player one tile. Invalid selections are dropped."""
        if not self._can_accept_intent():
            return

        player = self.player
        tile = self.world.get_tile(row, col)
        if tile is None or not tile.passable:
            logger.debug(f"Dropped move to ({row}, {col}): not walkable")
            return

        destination = Position(row, col)
        if not is_adjacent(player.position, destination):
            logger.debug(f"Dropped move to ({row}, {col}): not adjacent")
            return
        if self.entities.is_occupied(destination):
            logger.debug(f"Dropped move to ({row}, {col}): occupied")
            return

        self._apply(MoveAction(entity_id=player.id, to=destination))
        self._finish_player_turn()

    def handle_entity_tapped(self, entity_id: str):
        """Attack an adjacent enemy. Anything else is dropped."""
        if not self._can_accept_intent():
            return

        player = self.player
        target = self.entities.get(entity_id)
        if target is None or target.type != ENEMY_TYPE:
            logger.debug(f"Dropped tap on {entity_id}: not an enemy")
            return
        if not is_adjacent(player.position, target.position):
            logger.debug(f"Dropped tap on {entity_id}: not adjacent")
            return

        self._apply(AttackAction(attacker_id=player.id, target_id=target.id))
        if target.combatant is not None and target.combatant.health <= 0:
            removed = self._apply(RemoveAction(entity_id=target.id))
            if removed is not None:
                removed.destroy()

        self._finish_player_turn()

    def _finish_player_turn(self):
        self.turn_manager.end_player_turn()
        self.run_enemy_phase()
        self.turn_manager.start_player_turn()

        if self.on_turn_end:
            self.on_turn_end()

    # ------------------------------------------------------------------
    # Enemy phase
    # ------------------------------------------------------------------

    def run_enemy_phase(self):
        """Every living enemy attacks if adjacent, otherwise steps toward the player."""
        player = self.player
        if player is None or self.world is None:
            return

        for enemy in self.entities.get_living_enemies():
            if is_adjacent(enemy.position, player.position):
                self._apply(AttackAction(attacker_id=enemy.id, target_id=player.id))
                if (player.health or 0) <= 0:
                    self._end_match(GameResult.LOSE)
                    return
                continue

            step = choose_greedy_step(enemy.position, player.position, self.world, self.entities)
            if step is not None:
                self._apply(MoveAction(entity_id=enemy.id, to=step))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _apply(self, action: GameAction) -> Optional[Entity]:
        """Apply one action and record it."""
        removed = apply_action(action, self.entities, self.config.damage_per_hit)
        self._action_log.append(action)
        logger.debug(f"Applied {action}")

        if self.on_action:
            self.on_action(action)
        return removed

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def take_snapshot(self) -> GameSnapshot:
        return capture(self.entities, self.turn, self.result, self._action_log)

    def restore_snapshot(self, snapshot: GameSnapshot):
        """Replace all live state with the snapshot's."""
        self.entities = rebuild_arena(snapshot, self.entity_factory)
        self._locate_player()

        self.turn_manager = TurnManager()
        if snapshot.turn == Phase.ENEMY:
            self.turn_manager.start_enemy_turn()
        else:
            self.turn_manager.start_player_turn()

        self.result = snapshot.result
        self._action_log = list(snapshot.action_log)
        logger.info(f"Restored snapshot: {len(self.entities)} entities, {len(self._action_log)} actions")

    @staticmethod
    def replay_from_snapshot(
        snapshot: GameSnapshot,
        actions: list[GameAction],
        factory: EntityFactory = Entity.from_snapshot,
    ) -> GameSnapshot:
        """Rebuild from a snapshot and apply actions without validation."""
        return replay(snapshot, actions, factory)
