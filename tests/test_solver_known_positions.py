from tictactoe.game_basics import PLAYER_A, PLAYER_B
from tictactoe.solver import best_move


def test_immediate_win_taken():
    # X to move, two in a row on top with the third cell empty
    b = (1, 1, 0, 0, 2, 0, 0, 2, 0)
    assert best_move(PLAYER_A, b) == (1, 2)


def test_o_completes_its_own_line():
    b = (1, 1, 0, 2, 2, 0, 1, 0, 0)
    # O wins at 5; O is the minimizer so the value is -1
    assert best_move(PLAYER_B, b) == (-1, 5)


def test_forced_block():
    # O to move must block at 2, after which the game is a forced draw
    b = (1, 1, 0, 0, 2, 0, 0, 0, 0)
    assert best_move(PLAYER_B, b) == (0, 2)


def test_lost_position_keeps_first_move():
    # X threatens both 2 and 6; every O reply loses, so the lowest index is kept
    b = (1, 1, 0, 1, 2, 0, 0, 0, 2)
    assert best_move(PLAYER_B, b) == (1, 2)


def test_search_roles_are_fixed_by_player_id():
    # same position, X to move: X wins immediately at 2
    b = (1, 1, 0, 1, 2, 0, 0, 0, 2)
    assert best_move(PLAYER_A, b) == (1, 2)
