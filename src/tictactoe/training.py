"""
Training-run orchestration for the self-play learner.

Builds a QLearner from TrainArgs, reports progress windows through logging in
the classic "Played: N, Wins: W, Losses: L, Ties: T" form, and mirrors the
same numbers to the optional tracking backend.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .learning import ALPHA, GAMMA, LearnerConfig, QLearner, TrainingStats
from .paths import get_git_commit, runs_dir
from .tracking import log_metrics, log_params, maybe_mlflow_run

DEFAULT_EPISODES = 71000
DEFAULT_EVAL_EPISODES = 1000
DEFAULT_REPORT_EVERY = 1000


@dataclass
class TrainArgs:
    episodes: int = DEFAULT_EPISODES
    eval_episodes: int = DEFAULT_EVAL_EPISODES
    report_every: int = DEFAULT_REPORT_EVERY
    alpha: float = ALPHA
    gamma: float = GAMMA
    seed: Optional[int] = None
    adversarial_eval: bool = False
    verbose: bool = False
    tracking: str = "none"  # one of: "none", "mlflow"
    log_dir: Optional[Path] = None


def format_progress(stats: TrainingStats) -> str:
    if stats.evaluating:
        return f"Wins: {stats.wins}, Losses: {stats.losses}, Ties: {stats.ties}"
    return f"Played: {stats.played}, Wins: {stats.wins}, Losses: {stats.losses}, Ties: {stats.ties}"


def run_training(args: TrainArgs) -> QLearner:
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="[%(levelname)s] %(message)s")
    learner = QLearner(LearnerConfig(
        alpha=args.alpha,
        gamma=args.gamma,
        seed=args.seed,
        adversarial_eval=args.adversarial_eval,
    ))
    history: List[TrainingStats] = []

    def _report(stats: TrainingStats) -> None:
        history.append(stats)
        logging.info(format_progress(stats))
        log_metrics({
            "wins": float(stats.wins),
            "losses": float(stats.losses),
            "ties": float(stats.ties),
            "table_size": float(len(learner.table)),
        }, step=stats.played)

    log_dir = args.log_dir if args.log_dir is not None else runs_dir()
    with maybe_mlflow_run(args.tracking == "mlflow", run_name="self_play_training", log_dir=log_dir):
        log_params({
            "episodes": args.episodes,
            "eval_episodes": args.eval_episodes,
            "alpha": args.alpha,
            "gamma": args.gamma,
            "seed": args.seed,
            "adversarial_eval": args.adversarial_eval,
            "git_commit": get_git_commit(),
        })
        final = learner.train(args.episodes, args.eval_episodes, args.report_every, _report)
        if not history or history[-1].played != final.played:
            _report(final)
    logging.info("Visited %d states", len(learner.table))
    return learner
