#!/usr/bin/env python3
from __future__ import annotations

import logging
import math
import statistics as stats
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import numpy as np

from tictactoe.game_basics import PLAYER_A, empty_board
from tictactoe.learning import LearnerConfig, QLearner
from tictactoe.solver import best_move
from tictactoe.tracking import log_metrics, log_params, maybe_mlflow_run


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    seeds: int = 5
    episodes: int = 10000
    eval_episodes: int = 1000
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


def main() -> int:
    logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")
    cfg = Config()
    with maybe_mlflow_run(cfg.tracking == "mlflow", run_name="benchmarks", log_dir=cfg.log_dir):
        log_params({"seeds": cfg.seeds, "episodes": cfg.episodes, "eval_episodes": cfg.eval_episodes})
        search_times: List[float] = []
        train_times: List[float] = []
        tie_rates: List[float] = []
        for s in range(cfg.seeds):
            t0 = time.perf_counter()
            value, _ = best_move(PLAYER_A, empty_board())
            t1 = time.perf_counter()
            if value != 0:
                logging.error("best_move on the empty board returned %d, expected a draw", value)
                return 1
            search_times.append(t1 - t0)
            t2 = time.perf_counter()
            result = QLearner(LearnerConfig(seed=s)).train(cfg.episodes, cfg.eval_episodes)
            t3 = time.perf_counter()
            train_times.append(t3 - t2)
            tie_rates.append(result.ties / max(1, result.total))
        m_search, h_search = ci95(search_times)
        m_train, h_train = ci95(train_times)
        metrics = {
            "search_mean_s": m_search,
            "search_ci95_half_s": h_search,
            "train_mean_s": m_train,
            "train_ci95_half_s": h_train,
            "eval_tie_rate_mean": float(np.mean(tie_rates)),
        }
        log_metrics(metrics)
        print(
            f"best_move(empty board): mean={m_search:.4f}s ± {h_search:.4f}s (95% CI)\n"
            f"train({cfg.episodes} episodes): mean={m_train:.4f}s ± {h_train:.4f}s (95% CI)\n"
            f"evaluation tie rate: {metrics['eval_tie_rate_mean']:.3f}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
