"""Console rendering of boards and of the move-index grid."""
from typing import List

from .game_basics import PLAYER_A, PLAYER_B, Board

SYMBOLS = {PLAYER_A: "[X]", PLAYER_B: "[O]"}


def symbol(cell: int) -> str:
    return SYMBOLS.get(cell, "[ ]")


def _rows(cells: List[str]) -> str:
    return "\n".join("".join(cells[r * 3:r * 3 + 3]) for r in range(3)) + "\n"


def format_grid(board: Board) -> str:
    return _rows([symbol(v) for v in board])


def format_move_grid() -> str:
    return _rows([f"[{i}]" for i in range(9)])
