"""
Self-play temporal-difference learning over a ValueTable.
Teaching notes:
- Values are always from player A's perspective: A prefers high values, B prefers low ones.
- Each ply updates only the mover's slot, bootstrapping off the opponent's best reply
  in the resulting position (minQ after an A move, maxQ after a B move).
- Training mode mixes greedy and uniformly random moves 50/50; the evaluation tail
  plays greedily with no randomness.
- In evaluation mode player B also takes player A's greedy (MAX) action unless
  `adversarial_eval` is set, in which case it plays its own greedy (MIN) action.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

import numpy as np

from .game_basics import (
    PLAYER_A,
    PLAYER_B,
    Board,
    apply_move,
    empty_board,
    legal_moves,
    other_player,
    reward as board_reward,
)
from .qtable import INIT_RANGE, Direction, StateKey, ValueTable
from .render import format_grid

ALPHA = 0.1  # learning rate
GAMMA = 0.9  # discount factor
GREEDY_PROB = 0.5


@dataclass
class LearnerConfig:
    alpha: float = ALPHA
    gamma: float = GAMMA
    greedy_prob: float = GREEDY_PROB
    init_range: float = INIT_RANGE
    seed: Optional[int] = None
    adversarial_eval: bool = False


@dataclass
class TrainingStats:
    played: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    evaluating: bool = False

    @property
    def total(self) -> int:
        return self.wins + self.losses + self.ties

    def record(self, r: float) -> None:
        if r == 1.0:
            self.wins += 1
        elif r == -1.0:
            self.losses += 1
        else:
            self.ties += 1

    def reset_results(self) -> None:
        self.wins = self.losses = self.ties = 0

    def snapshot(self) -> "TrainingStats":
        return replace(self)


ProgressCallback = Callable[[TrainingStats], None]


class QLearner:
    def __init__(
        self,
        config: Optional[LearnerConfig] = None,
        table: Optional[ValueTable] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config or LearnerConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.table = table if table is not None else ValueTable(self.rng, self.config.init_range)
        self.stats = TrainingStats()
        self.evaluating = False

    def random_move(self, board: Board) -> int:
        moves = legal_moves(board)
        return int(moves[self.rng.integers(len(moves))])

    def choose_action(self, key: StateKey, player: int, board: Board) -> int:
        if self.evaluating:
            if player == PLAYER_B and self.config.adversarial_eval:
                return self.table.best_action(key, Direction.MIN)
            return self.table.best_action(key, Direction.MAX)
        if self.rng.random() < self.config.greedy_prob:
            direction = Direction.MAX if player == PLAYER_A else Direction.MIN
            return self.table.best_action(key, direction)
        return self.random_move(board)

    def td_target(self, r: float, terminal: bool, player: int, next_key: StateKey) -> float:
        if terminal:
            return r
        # the opponent is assumed to answer with its best move
        if player == PLAYER_A:
            return r + self.config.gamma * self.table.best_value(next_key, Direction.MIN)
        return r + self.config.gamma * self.table.best_value(next_key, Direction.MAX)

    def update(
        self,
        key: StateKey,
        action: int,
        next_key: StateKey,
        r: float,
        terminal: bool,
        player: int,
    ) -> float:
        expected = self.td_target(r, terminal, player, next_key)
        q = self.table.get(key, action)
        q_new = q + self.config.alpha * (expected - q)
        logging.debug(
            "updating q: %.6f expected: %.6f immediate reward: %.6f to: %.6f", q, expected, r, q_new
        )
        self.table.set(key, action, q_new)
        return q_new

    def play_episode(self) -> float:
        board = empty_board()
        player = PLAYER_A if self.rng.random() < 0.5 else PLAYER_B
        moves_remaining = len(board)
        while True:
            key = self.table.key_for(board, player)
            action = self.choose_action(key, player, board)
            logging.debug("Player = %d action = %d", player, action)
            next_board = apply_move(board, action, player)
            logging.debug("board after move:\n%s", format_grid(next_board))
            moves_remaining -= 1
            r = float(board_reward(next_board))
            terminal = r != 0.0 or moves_remaining <= 0
            next_key = self.table.key_for(next_board, other_player(player))
            self.update(key, action, next_key, r, terminal, player)
            board = next_board
            player = other_player(player)
            if terminal:
                self.stats.record(r)
                return r

    def set_evaluating(self, evaluating: bool) -> None:
        self.evaluating = evaluating
        self.stats.evaluating = evaluating

    def train(
        self,
        episode_count: int,
        evaluation_tail_size: int = 0,
        report_every: int = 1000,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TrainingStats:
        """Run `episode_count` self-play episodes, the last `evaluation_tail_size` greedily.

        Win/loss/tie counters are reset when the evaluation tail starts, so the
        returned stats describe the tail alone when it is non-empty.
        """
        if episode_count < 0:
            raise ValueError(f"episode_count must be >= 0, got {episode_count}")
        if not 0 <= evaluation_tail_size <= episode_count:
            raise ValueError(
                f"evaluation_tail_size must be in [0, {episode_count}], got {evaluation_tail_size}"
            )
        switch_at = episode_count - evaluation_tail_size
        self.set_evaluating(False)
        logging.info("Learning...")
        for i in range(episode_count):
            if evaluation_tail_size and i == switch_at:
                logging.info("Testing...")
                self.stats.reset_results()
                self.set_evaluating(True)
            self.play_episode()
            self.stats.played += 1
            if on_progress is not None and report_every > 0 and self.stats.played % report_every == 0:
                on_progress(self.stats.snapshot())
        return self.stats.snapshot()
