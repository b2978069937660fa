"""
Combat rules shared by the simulator and the match runner.

Outcome states, adjacency, and the one-step greedy movement heuristic.
"""

from .base import GameResult, is_adjacent
from .movement import choose_greedy_step, greedy_step_candidates

__all__ = [
    "GameResult",
    "is_adjacent",
    "choose_greedy_step",
    "greedy_step_candidates",
]
