"""
Game basics: board representation, rules, outcome evaluation, checked moves.
Teaching notes:
- A board is a tuple of 9 cells in row-major order: 0=empty, 1=player A (X), 2=player B (O).
- Boards are immutable; applying a move returns a new tuple, so explored positions never alias.
- A "ply" is a half-move (one player's turn). Either player may start.
- Outcomes depend only on the board, never on who produced it.
"""
from enum import Enum
from typing import List, Tuple

EMPTY = 0
PLAYER_A = 1
PLAYER_B = 2
PLAYERS = (PLAYER_A, PLAYER_B)
NUM_CELLS = 9

WIN_PATTERNS = [
    [0, 1, 2], [3, 4, 5], [6, 7, 8],
    [0, 3, 6], [1, 4, 7], [2, 5, 8],
    [0, 4, 8], [2, 4, 6]
]

Board = Tuple[int, ...]


class Outcome(Enum):
    ONGOING = "ongoing"
    A_WINS = "a_wins"
    B_WINS = "b_wins"
    DRAW = "draw"


class InvalidMoveError(ValueError):
    """Raised when a move targets an occupied cell, an out-of-range index or an unknown player."""


def empty_board() -> Board:
    return (EMPTY,) * NUM_CELLS


def serialize_board(board: Board) -> str:
    return ''.join(str(cell) for cell in board)


def deserialize_board(board_str: str) -> Board:
    if len(board_str) != NUM_CELLS or any(c not in "012" for c in board_str):
        raise ValueError(f"Invalid board string {board_str!r}: must be 9 chars of 0/1/2")
    return tuple(int(cell) for cell in board_str)


def other_player(player: int) -> int:
    return PLAYER_B if player == PLAYER_A else PLAYER_A


def legal_moves(board: Board) -> List[int]:
    return [i for i, v in enumerate(board) if v == EMPTY]


def is_winner(board: Board, player: int) -> bool:
    return any(all(board[i] == player for i in pattern) for pattern in WIN_PATTERNS)


def get_winner(board: Board) -> int:
    if is_winner(board, PLAYER_A):
        return PLAYER_A
    if is_winner(board, PLAYER_B):
        return PLAYER_B
    return EMPTY


def reward(board: Board) -> int:
    """+1 if player A holds a line, -1 if player B does, 0 otherwise (ongoing or drawn)."""
    w = get_winner(board)
    if w == PLAYER_A:
        return 1
    if w == PLAYER_B:
        return -1
    return 0


def evaluate(board: Board) -> Outcome:
    w = get_winner(board)
    if w == PLAYER_A:
        return Outcome.A_WINS
    if w == PLAYER_B:
        return Outcome.B_WINS
    if EMPTY not in board:
        return Outcome.DRAW
    return Outcome.ONGOING


def is_terminal(board: Board) -> bool:
    return evaluate(board) is not Outcome.ONGOING


def apply_move(board: Board, idx: int, player: int) -> Board:
    if player not in PLAYERS:
        raise InvalidMoveError(f"Unknown player id: {player}")
    if not 0 <= idx < NUM_CELLS:
        raise InvalidMoveError(f"Move {idx} is out of range 0..8")
    if board[idx] != EMPTY:
        raise InvalidMoveError(f"Cell {idx} is already occupied by player {board[idx]}")
    lst = list(board)
    lst[idx] = player
    return tuple(lst)


def get_piece_counts(board: Board) -> Tuple[int, int]:
    return board.count(PLAYER_A), board.count(PLAYER_B)


def is_plausible_state(board: Board) -> bool:
    """Reachable by alternating play from the empty board, with either side starting."""
    if len(board) != NUM_CELLS or any(v not in (EMPTY, PLAYER_A, PLAYER_B) for v in board):
        return False
    a_count, b_count = get_piece_counts(board)
    if abs(a_count - b_count) > 1:
        return False
    # no double winners
    if is_winner(board, PLAYER_A) and is_winner(board, PLAYER_B):
        return False
    return True
