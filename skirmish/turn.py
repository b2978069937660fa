"""
Turn sequencing for the skirmish simulation.

Two phases alternate for the life of a match: the player acts, then every
enemy acts. Transitions are caller-driven; there are no timers.
"""

from enum import Enum


class Phase(Enum):
    PLAYER = "player"
    ENEMY = "enemy"


class TurnManager:
    """Two-state turn machine, starting in the player phase."""

    def __init__(self):
        self.current_phase = Phase.PLAYER

    def is_player_turn(self) -> bool:
        return self.current_phase == Phase.PLAYER

    def end_player_turn(self):
        """Hand control to the enemies. No-op outside the player phase."""
        if self.current_phase != Phase.PLAYER:
            return
        self.current_phase = Phase.ENEMY

    def start_player_turn(self):
        self.current_phase = Phase.PLAYER

    def start_enemy_turn(self):
        """Force the enemy phase; only state restore needs this."""
        self.current_phase = Phase.ENEMY
