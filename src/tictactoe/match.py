"""
Human-versus-search game loop.

The computer is player A (X) and plays `best_move`; the human is player B (O).
Input and output are injected so the loop can run against a terminal or a script.
"""
from __future__ import annotations

from typing import Callable

from .game_basics import (
    PLAYER_A,
    PLAYER_B,
    Board,
    InvalidMoveError,
    Outcome,
    apply_move,
    empty_board,
    evaluate,
    is_terminal,
    other_player,
)
from .render import format_grid, format_move_grid, symbol
from .solver import NO_MOVE, best_move

ReadMove = Callable[[], str]
Emit = Callable[[str], None]

OUTCOME_MESSAGES = {
    Outcome.A_WINS: "Computer wins.",
    Outcome.B_WINS: "You win.",
    Outcome.DRAW: "Draw.",
}


def read_human_move(board: Board, read_move: ReadMove, emit: Emit) -> Board:
    while True:
        emit("enter move: ")
        line = read_move()
        if line == "":
            raise EOFError("input closed before the game ended")
        raw = line.strip()
        try:
            return apply_move(board, int(raw), PLAYER_B)
        except ValueError as exc:
            # InvalidMoveError is a ValueError, as is a non-numeric entry
            msg = str(exc) if isinstance(exc, InvalidMoveError) else f"Not a cell index: {raw!r}"
            emit(f"invalid move: {msg}\n")


def play_human_vs_search(read_move: ReadMove, emit: Emit, human_first: bool = True) -> Outcome:
    board = empty_board()
    emit(f"You are: {symbol(PLAYER_B)}\n")
    emit(f"Computer is: {symbol(PLAYER_A)}\n")
    emit("Moves:\n")
    emit(format_move_grid() + "\n")
    emit(format_grid(board) + "\n")
    player = PLAYER_B if human_first else PLAYER_A
    while not is_terminal(board):
        if player == PLAYER_B:
            board = read_human_move(board, read_move, emit)
        else:
            _, move = best_move(PLAYER_A, board)
            if move == NO_MOVE:
                emit(f"agent suggested invalid move: {move}\n")
                break
            board = apply_move(board, move, PLAYER_A)
        player = other_player(player)
        emit(format_grid(board) + "\n")
    outcome = evaluate(board)
    if outcome in OUTCOME_MESSAGES:
        emit(OUTCOME_MESSAGES[outcome] + "\n")
    return outcome
