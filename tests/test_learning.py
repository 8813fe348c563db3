import logging

import pytest

from tictactoe.game_basics import PLAYER_A, PLAYER_B, empty_board, legal_moves
from tictactoe.learning import ALPHA, GAMMA, LearnerConfig, QLearner, TrainingStats
from tictactoe.qtable import Direction, make_key


def _learner(**kw) -> QLearner:
    return QLearner(LearnerConfig(seed=kw.pop("seed", 7), **kw))


def test_update_with_matching_target_is_a_no_op():
    ql = _learner()
    b = (1, 1, 0, 2, 2, 0, 0, 0, 0)
    key = ql.table.key_for(b, PLAYER_A)
    next_key = ql.table.key_for((1, 1, 1, 2, 2, 0, 0, 0, 0), PLAYER_B)
    ql.table.set(key, 2, 1.0)
    assert ql.update(key, 2, next_key, 1.0, True, PLAYER_A) == 1.0
    assert ql.table.get(key, 2) == 1.0


def test_player_a_bootstraps_off_min_of_next_state():
    ql = _learner()
    b = empty_board()
    key = ql.table.key_for(b, PLAYER_A)
    nb = (0, 0, 0, 0, 1, 0, 0, 0, 0)
    next_key = ql.table.key_for(nb, PLAYER_B)
    for a in legal_moves(nb):
        ql.table.set(next_key, a, 0.1 * a)
    ql.table.set(key, 4, 0.05)
    before = {a: ql.table.get(next_key, a) for a in ql.table.actions(next_key)}
    q_new = ql.update(key, 4, next_key, 0.0, False, PLAYER_A)
    expected = 0.0 + GAMMA * 0.0  # min over next slots is slot 0 = 0.0
    assert q_new == pytest.approx(0.05 + ALPHA * (expected - 0.05))
    # the opponent's row is never touched
    assert {a: ql.table.get(next_key, a) for a in ql.table.actions(next_key)} == before


def test_player_b_bootstraps_off_max_of_next_state():
    ql = _learner()
    b = (0, 0, 0, 0, 1, 0, 0, 0, 0)
    key = ql.table.key_for(b, PLAYER_B)
    nb = (2, 0, 0, 0, 1, 0, 0, 0, 0)
    next_key = ql.table.key_for(nb, PLAYER_A)
    for a in legal_moves(nb):
        ql.table.set(next_key, a, -0.1)
    ql.table.set(next_key, 8, 0.3)
    ql.table.set(key, 0, 0.0)
    q_new = ql.update(key, 0, next_key, 0.0, False, PLAYER_B)
    assert q_new == pytest.approx(ALPHA * GAMMA * 0.3)


def test_terminal_update_ignores_next_state():
    ql = _learner()
    b = (2, 2, 0, 1, 1, 0, 1, 0, 0)
    key = ql.table.key_for(b, PLAYER_B)
    next_key = ql.table.key_for((2, 2, 2, 1, 1, 0, 1, 0, 0), PLAYER_A)
    ql.table.set(key, 2, 0.0)
    assert ql.update(key, 2, next_key, -1.0, True, PLAYER_B) == pytest.approx(-ALPHA)


def test_evaluation_policy_uses_max_for_both_players():
    ql = _learner()
    key = ql.table.key_for(empty_board(), PLAYER_B)
    for a in range(9):
        ql.table.set(key, a, 0.0)
    ql.table.set(key, 6, 0.9)
    ql.table.set(key, 1, -0.9)
    ql.set_evaluating(True)
    assert ql.choose_action(key, PLAYER_B, empty_board()) == 6
    ql.config.adversarial_eval = True
    assert ql.choose_action(key, PLAYER_B, empty_board()) == 1
    key_a = ql.table.key_for(empty_board(), PLAYER_A)
    assert ql.choose_action(key_a, PLAYER_A, empty_board()) == ql.table.best_action(key_a, Direction.MAX)


def test_training_policy_extremes():
    b = (1, 0, 2, 0, 0, 0, 0, 0, 0)
    greedy = _learner(greedy_prob=1.0)
    key = greedy.table.key_for(b, PLAYER_B)
    assert greedy.choose_action(key, PLAYER_B, b) == greedy.table.best_action(key, Direction.MIN)
    rand = _learner(greedy_prob=0.0)
    key = rand.table.key_for(b, PLAYER_A)
    picks = {rand.choose_action(key, PLAYER_A, b) for _ in range(200)}
    assert picks <= set(legal_moves(b))
    assert len(picks) > 1


def test_episode_reaches_terminal_state_and_counts_once():
    ql = _learner()
    r = ql.play_episode()
    assert r in (-1.0, 0.0, 1.0)
    assert ql.stats.total == 1


def test_train_evaluation_tail_counts():
    ql = _learner(seed=0)
    stats = ql.train(200, 50)
    assert stats.played == 200
    assert stats.evaluating
    assert stats.wins + stats.losses + stats.ties == 50


def test_train_without_tail_counts_every_episode():
    ql = _learner(seed=1)
    stats = ql.train(120, 0)
    assert stats.total == 120
    assert not stats.evaluating


def test_progress_callback_windows():
    ql = _learner(seed=2)
    seen = []
    ql.train(100, 20, report_every=25, on_progress=seen.append)
    assert [s.played for s in seen] == [25, 50, 75, 100]
    assert [s.evaluating for s in seen] == [False, False, False, True]
    assert seen[-1].total == 20
    # snapshots are detached from the live counters
    assert seen[0] is not ql.stats


def test_same_seed_reproduces_training():
    a = _learner(seed=11)
    b = _learner(seed=11)
    assert a.train(150, 30) == b.train(150, 30)
    assert list(a.table) == list(b.table)
    key = next(iter(a.table))
    assert [a.table.get(key, x) for x in a.table.actions(key)] == [
        b.table.get(key, x) for x in b.table.actions(key)
    ]


def test_table_grows_monotonically():
    ql = _learner(seed=3)
    ql.train(50)
    n = len(ql.table)
    ql.train(50)
    assert len(ql.table) >= n > 0


@pytest.mark.parametrize("count,tail", [(-1, 0), (10, 11), (10, -1)])
def test_train_rejects_bad_arguments(count, tail):
    with pytest.raises(ValueError):
        _learner().train(count, tail)


def test_stats_record_classification():
    s = TrainingStats()
    for r in (1.0, -1.0, 0.0, 0.0):
        s.record(r)
    assert (s.wins, s.losses, s.ties, s.total) == (1, 1, 2, 4)
    s.reset_results()
    assert s.total == 0


def test_starting_player_is_drawn_at_random(monkeypatch):
    ql = _learner(seed=4)
    openers = []
    choose = ql.choose_action

    def _recording(key, player, board):
        if board == empty_board():
            openers.append(player)
        return choose(key, player, board)

    monkeypatch.setattr(ql, "choose_action", _recording)
    for _ in range(50):
        ql.play_episode()
    assert len(openers) == 50
    assert set(openers) == {PLAYER_A, PLAYER_B}
    assert make_key(empty_board(), PLAYER_A) in ql.table
    assert make_key(empty_board(), PLAYER_B) in ql.table


def test_episode_traces_board_at_debug_level(caplog):
    caplog.set_level(logging.DEBUG)
    _learner(seed=8).play_episode()
    grids = [r.getMessage() for r in caplog.records if r.getMessage().startswith("board after move:")]
    assert grids
    assert all(len(g.splitlines()) == 4 for g in grids)
    assert "[X]" in grids[-1] or "[O]" in grids[-1]
