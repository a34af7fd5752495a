"""Heuristic autoplayer.

- planner: board evaluation and greedy placement search
- driver: paces a planned placement into single rotate/shift/drop actions
"""

from .planner import BoardFeatures, HeuristicWeights, Move, board_features, evaluate, plan_best_move, resting_row
from .driver import AIDriver, DriverState

__all__ = [
    "AIDriver",
    "BoardFeatures",
    "DriverState",
    "HeuristicWeights",
    "Move",
    "board_features",
    "evaluate",
    "plan_best_move",
    "resting_row",
]
