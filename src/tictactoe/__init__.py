"""tictactoe package.

Two decision engines over the same board model: an exhaustive game-tree
search and a tabular self-play learner, plus a simple CLI.

Convenience imports are exposed for common workflows.
"""

from .game_basics import EMPTY, PLAYER_A, PLAYER_B, InvalidMoveError, Outcome, evaluate
from .learning import LearnerConfig, QLearner, TrainingStats
from .qtable import Direction, NoActionsError, ValueTable
from .solver import NO_MOVE, best_move
from .training import TrainArgs, run_training

__all__ = [
    "EMPTY",
    "PLAYER_A",
    "PLAYER_B",
    "Outcome",
    "InvalidMoveError",
    "evaluate",
    "best_move",
    "NO_MOVE",
    "ValueTable",
    "Direction",
    "NoActionsError",
    "QLearner",
    "LearnerConfig",
    "TrainingStats",
    "TrainArgs",
    "run_training",
]
