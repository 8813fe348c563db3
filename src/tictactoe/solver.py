"""
Exact game-tree search (minimax) with player A as the fixed maximizer.
Tie-break policy:
- Player 1 keeps the strictly greatest child value, player 2 the strictly least.
- Among equal values the first move in ascending index order is kept.
Notes:
- The whole tree below the given position is enumerated on every call: no pruning,
  no memoization, no depth limit. Depth is bounded by the 9 cells.
"""
import math
from typing import Dict, Tuple

from .game_basics import PLAYER_A, Board, apply_move, legal_moves, other_player, reward

NO_MOVE = -1


def best_move(player: int, board: Board) -> Tuple[int, int]:
    """Return (value, move) for `player` to move on `board`.

    Value is +1 (A wins), 0 (draw) or -1 (B wins) under perfect play.
    On a terminal board the move is NO_MOVE and callers must not apply it.
    """
    moves = legal_moves(board)
    r = reward(board)
    if r != 0 or not moves:
        return r, NO_MOVE
    move = NO_MOVE
    if player == PLAYER_A:
        best_val = -math.inf
        for mv in moves:
            val, _ = best_move(other_player(player), apply_move(board, mv, player))
            if val > best_val:
                best_val = val
                move = mv
    else:
        best_val = math.inf
        for mv in moves:
            val, _ = best_move(other_player(player), apply_move(board, mv, player))
            if val < best_val:
                best_val = val
                move = mv
    return int(best_val), move


def move_values(player: int, board: Board) -> Dict[int, int]:
    """Game-theoretic value of each legal move for `player`; empty on terminal boards."""
    if reward(board) != 0:
        return {}
    return {
        mv: best_move(other_player(player), apply_move(board, mv, player))[0]
        for mv in legal_moves(board)
    }
