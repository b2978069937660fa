"""Tests for skirmish.turn and skirmish.intents."""

from skirmish.intents import EntityTapped, IntentQueue, TileSelected
from skirmish.turn import Phase, TurnManager


class TestTurnManager:
    def test_starts_in_player_phase(self) -> None:
        manager = TurnManager()
        assert manager.current_phase == Phase.PLAYER
        assert manager.is_player_turn()

    def test_end_player_turn(self) -> None:
        manager = TurnManager()
        manager.end_player_turn()
        assert manager.current_phase == Phase.ENEMY
        assert not manager.is_player_turn()

    def test_end_player_turn_outside_player_phase_is_noop(self) -> None:
        manager = TurnManager()
        manager.start_enemy_turn()
        manager.end_player_turn()
        assert manager.current_phase == Phase.ENEMY

    def test_start_player_turn_from_any_phase(self) -> None:
        manager = TurnManager()
        manager.start_player_turn()
        assert manager.is_player_turn()
        manager.end_player_turn()
        manager.start_player_turn()
        assert manager.is_player_turn()


class TestIntentQueue:
    def test_drain_is_fifo_and_empties(self) -> None:
        queue = IntentQueue()
        queue.select_tile(1, 2)
        queue.tap_entity("enemy-1")
        queue.push(TileSelected(3, 4))
        assert len(queue) == 3

        assert queue.drain() == [TileSelected(1, 2), EntityTapped("enemy-1"), TileSelected(3, 4)]
        assert len(queue) == 0
        assert queue.drain() == []
