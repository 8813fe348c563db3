"""
Tabular action-value store keyed by (board, player-to-move).
Teaching notes:
- A state key is the board tuple with the player id appended; equality is exact.
- Rows are created lazily: the first lookup of a key seeds one slot per empty cell
  with a small random value. Rows and slots are never removed or re-seeded.
- Slots are inserted in ascending cell order, so scans break ties toward the lowest index.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .game_basics import Board, legal_moves

StateKey = Tuple[int, ...]

INIT_RANGE = 0.15


class Direction(Enum):
    MAX = "max"
    MIN = "min"


class NoActionsError(LookupError):
    """Raised when asking for a best action on a row without slots (terminal position)."""


def make_key(board: Board, player: int) -> StateKey:
    return tuple(board) + (player,)


class ValueTable:
    def __init__(self, rng: Optional[np.random.Generator] = None, init_range: float = INIT_RANGE) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()
        self._init_range = init_range
        self._rows: Dict[StateKey, Dict[int, float]] = {}

    def key_for(self, board: Board, player: int) -> StateKey:
        key = make_key(board, player)
        if key not in self._rows:
            lo, hi = -self._init_range, self._init_range
            self._rows[key] = {mv: float(self._rng.uniform(lo, hi)) for mv in legal_moves(board)}
        return key

    def get(self, key: StateKey, action: int) -> float:
        return self._rows[key][action]

    def set(self, key: StateKey, action: int, value: float) -> None:
        row = self._rows[key]
        if action not in row:
            raise KeyError(f"No slot for action {action} in state {key}")
        row[action] = value

    def actions(self, key: StateKey) -> List[int]:
        return list(self._rows[key])

    def best_action(self, key: StateKey, direction: Direction) -> int:
        return self._scan(key, direction)[0]

    def best_value(self, key: StateKey, direction: Direction) -> float:
        return self._scan(key, direction)[1]

    def _scan(self, key: StateKey, direction: Direction) -> Tuple[int, float]:
        row = self._rows[key]
        if not row:
            raise NoActionsError(f"No actions available in state {key}")
        best_act = -1
        if direction is Direction.MAX:
            best_val = -math.inf
            for act, val in row.items():
                if val > best_val:
                    best_act, best_val = act, val
        else:
            best_val = math.inf
            for act, val in row.items():
                if val < best_val:
                    best_act, best_val = act, val
        return best_act, best_val

    def __contains__(self, key: object) -> bool:
        return key in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[StateKey]:
        return iter(self._rows)
