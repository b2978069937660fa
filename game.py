"""
Main match runner for the skirmish simulation.

Generates a map, then plays one match headlessly with an autopilot standing
in for the input layer.
"""

import os
import json
import logging
import random
from pathlib import Path
from datetime import datetime
from typing import Optional

from dotenv import load_dotenv

from skirmish import (
    CombatSimulator, FogOfWar, GameAction, GameConfig, IntentQueue,
    TerrainGenerator, Visibility, load_config,
)
from skirmish.combat import choose_greedy_step, is_adjacent
from skirmish.units import ENEMY_TYPE, PLAYER_TYPE

load_dotenv(Path(__file__).parent / ".env")

logger = logging.getLogger(__name__)

FRAME_MS = 16.0


class Autopilot:
    """Scripted player: attack if an enemy is adjacent, else close in greedily."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def choose_intent(self, sim: CombatSimulator, intents: IntentQueue):
        player = sim.player
        if player is None:
            return

        enemies = sim.entities.get_living_enemies()
        for enemy in enemies:
            if is_adjacent(player.position, enemy.position):
                intents.tap_entity(enemy.id)
                return

        if enemies:
            nearest = min(enemies, key=lambda e: player.position.manhattan(e.position))
            step = choose_greedy_step(player.position, nearest.position, sim.world, sim.entities)
            if step is not None:
                intents.select_tile(step.row, step.col)
                return

        # Blocked: wander to any free neighbor
        free = [
            tile for tile in sim.world.get_adjacent_tiles(player.position.row, player.position.col)
            if tile.passable and not sim.entities.is_occupied(tile.position)
        ]
        if free:
            tile = self.rng.choice(free)
            intents.select_tile(tile.row, tile.col)


class SkirmishSimulation:
    """Main simulation orchestrator."""

    def __init__(
        self,
        data_path: str = "data",
        seed: Optional[int] = None,
        log_dir: Optional[str] = None,
        config: Optional[GameConfig] = None,
    ):
        self.data_path = Path(data_path)
        self.seed = seed
        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir:
            self.log_dir.mkdir(exist_ok=True)

        logger.info("Loading config...")
        self.config = config or load_config(self.data_path)

        rng = random.Random(seed)

        logger.info("Initializing terrain generator...")
        self.generator = TerrainGenerator(self.config, rng=rng)

        logger.info("Initializing combat simulator...")
        self.simulator = CombatSimulator(self.config.combat)
        self.simulator.on_action = self._on_action
        self.intents = IntentQueue()

        logger.info("Initializing fog of war...")
        self.fog = FogOfWar(self.config.visibility.window_size)

        self.autopilot = Autopilot(rng)

        # Game log
        self.game_log: list[dict] = []
        self.start_time: Optional[datetime] = None
        self.generated = None
        self.turns_played = 0

    def initialize(self):
        """Generate the map and start the match."""
        self.generated = self.generator.generate()
        self.simulator.initialize(self.generated.world, self.intents, self.generated.entities)
        self._refresh_fog()
        self.start_time = datetime.now()

        self._log_event("game_start", {
            "seed": self.seed,
            "map": self.generated.get_stats(),
        })

        logger.info("Game initialized")
        logger.info(f"  Map: {self.generated.world.rows}x{self.generated.world.cols}"
                    f"{' (fallback)' if self.generated.used_fallback else ''}")
        logger.info(f"  Enemies: {len(self.simulator.entities.get_by_type(ENEMY_TYPE))}")

    def _refresh_fog(self):
        player = self.simulator.player
        if player is not None:
            self.fog.update(self.simulator.world, player.position)

    def _on_action(self, action: GameAction):
        self._log_event("action", action.to_dict())

    def run_turn(self):
        """Queue one autopilot intent and advance one tick."""
        self.autopilot.choose_intent(self.simulator, self.intents)
        log_size = len(self.simulator.action_log)
        self.simulator.update(FRAME_MS)
        if len(self.simulator.action_log) > log_size:
            self.turns_played += 1
        self._refresh_fog()

    def run_game(self, max_turns: int = 200) -> dict:
        """Run the full match."""
        self.initialize()

        ticks = 0
        while not self.simulator.is_over() and ticks < max_turns:
            self.run_turn()
            ticks += 1

        results = self._compile_results()
        self._log_event("game_end", results)
        if self.log_dir:
            self._save_game_log()
        return results

    def _compile_results(self) -> dict:
        """Compile final match results."""
        player = self.simulator.player
        return {
            "result": self.simulator.get_result().value,
            "turns_played": self.turns_played,
            "actions": len(self.simulator.action_log),
            "player_health": player.health if player else None,
            "enemies_left": len(self.simulator.entities.get_living_enemies()),
            "fog": self.fog.get_summary(self.simulator.world),
            "duration": str(datetime.now() - self.start_time) if self.start_time else None,
        }

    def render_fog_map(self) -> str:
        """Text map as the player knows it. Entities show only on visible tiles."""
        symbols = {"grass": ".", "dirt": ",", "sand": ":", "water": "~", "wall": "#"}
        occupants = {(e.position.row, e.position.col): e for e in self.simulator.entities}
        world = self.simulator.world

        lines = []
        for row in range(world.rows):
            chars = []
            for col in range(world.cols):
                state = self.fog.tile_state(row, col)
                if state == Visibility.UNEXPLORED:
                    chars.append("?")
                    continue
                entity = occupants.get((row, col))
                if entity is not None and state == Visibility.VISIBLE:
                    chars.append("@" if entity.type == PLAYER_TYPE else "E")
                else:
                    chars.append(symbols[world.get_tile(row, col).terrain.value])
            lines.append("".join(chars))
        return "\n".join(lines)

    def _log_event(self, event_type: str, data: dict):
        """Log a game event."""
        self.game_log.append({
            "timestamp": datetime.now().isoformat(),
            "event": event_type,
            "data": data,
        })

    def _save_game_log(self):
        """Save game log to file."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = self.log_dir / f"game_{timestamp}.json"

        with open(log_path, "w") as f:
            json.dump(self.game_log, f, indent=2, default=str)

        logger.info(f"Game log saved to: {log_path}")


def main():
    """Run a skirmish match."""
    import argparse

    env_seed = os.getenv("SKIRMISH_SEED")

    parser = argparse.ArgumentParser(description="Turn-based grid skirmish")
    parser.add_argument("--seed", type=int, default=int(env_seed) if env_seed else None, help="RNG seed")
    parser.add_argument("--turns", type=int, default=200, help="Max ticks before giving up")
    parser.add_argument("--data", default=os.getenv("SKIRMISH_DATA", "data"), help="Data directory path")
    parser.add_argument("--logs", default=None, help="Directory for the JSON event log")
    parser.add_argument("--show-map", action="store_true", help="Print the final fog-of-war map")
    parser.add_argument("--log-level", default=os.getenv("SKIRMISH_LOG_LEVEL", "INFO"))

    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    sim = SkirmishSimulation(
        data_path=args.data,
        seed=args.seed,
        log_dir=args.logs,
    )

    results = sim.run_game(max_turns=args.turns)

    print("\n" + "="*60)
    print("FINAL RESULTS")
    print("="*60)
    print(f"Result: {results['result']}")
    print(f"Turns played: {results['turns_played']} ({results['actions']} actions)")
    print(f"Player health: {results['player_health']}")
    print(f"Enemies left: {results['enemies_left']}")
    print(f"Explored: {results['fog']['explored_ratio']:.0%} of the map")
    print(f"Duration: {results['duration']}")

    if args.show_map:
        print()
        print(sim.render_fog_map())


if __name__ == "__main__":
    main()
