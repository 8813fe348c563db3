from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .game_basics import (
    PLAYER_A,
    PLAYER_B,
    Board,
    deserialize_board,
    get_piece_counts,
    is_plausible_state,
)
from .match import play_human_vs_search
from .solver import best_move, move_values
from .training import (
    DEFAULT_EPISODES,
    DEFAULT_EVAL_EPISODES,
    DEFAULT_REPORT_EVERY,
    TrainArgs,
    run_training,
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Tic-tac-toe search and self-play learning CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Global seed for reproducibility")
    p.add_argument(
        "--deterministic",
        action="store_true",
        help="Enable deterministic mode (sets PYTHONHASHSEED, seeds random and numpy)",
    )

    # self-play training
    p_train = sub.add_parser("train", help="Learn a policy by self-play Q-learning")
    p_train.add_argument(
        "--episodes", type=int, default=DEFAULT_EPISODES,
        help=f"Total self-play episodes (default: {DEFAULT_EPISODES})",
    )
    p_train.add_argument(
        "--eval-episodes", type=int, default=DEFAULT_EVAL_EPISODES,
        help=f"Final episodes played greedily to measure the policy (default: {DEFAULT_EVAL_EPISODES})",
    )
    p_train.add_argument(
        "--report-every", type=int, default=DEFAULT_REPORT_EVERY,
        help=f"Log counters every N episodes (default: {DEFAULT_REPORT_EVERY})",
    )
    p_train.add_argument(
        "--adversarial-eval",
        action="store_true",
        help="During evaluation let O play its own greedy move instead of X's",
    )
    p_train.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_train.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for tracking logs (default: $TTT_RUNS_DIR or <repo>/runs)",
    )

    # perfect-play search
    p_sol = sub.add_parser("solve", help="Search a board for the optimal move")
    p_sol.add_argument("--board", help="Board string, e.g., 110020000 (omit with --stdin)")
    p_sol.add_argument(
        "--player", type=int, choices=[PLAYER_A, PLAYER_B], default=None,
        help="Player to move (default: inferred from piece counts, X on ties)",
    )
    p_sol.add_argument(
        "--stdin", action="store_true", help="Read many boards from stdin and stream CSV output"
    )

    # interactive game
    p_play = sub.add_parser("play", help="Play against the search engine (you are O)")
    p_play.add_argument(
        "--computer-first", action="store_true", help="Let the computer (X) open the game"
    )

    return p


def _set_global_seed(seed: Optional[int]) -> None:
    if seed is None:
        return
    import random

    import numpy as np

    random.seed(seed)
    np.random.seed(seed)


def _set_deterministic_env(seed: Optional[int]) -> None:
    import os

    if seed is not None:
        os.environ.setdefault("PYTHONHASHSEED", str(seed))
    _set_global_seed(seed)


def _print_info() -> None:
    import importlib.util
    import platform
    import sys

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def infer_player(board: Board) -> int:
    a_count, b_count = get_piece_counts(board)
    return PLAYER_B if a_count > b_count else PLAYER_A


def _parse_board(raw: str) -> Board | None:
    try:
        board = deserialize_board(raw)
    except ValueError:
        return None
    return board if is_plausible_state(board) else None


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("tictactoe-engines"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if getattr(ns, "deterministic", False) or getattr(ns, "seed", None) is not None:
        _set_deterministic_env(getattr(ns, "seed", None))

    if ns.cmd == "train":
        if ns.episodes < 0 or not 0 <= ns.eval_episodes <= ns.episodes:
            logging.error("--eval-episodes must be between 0 and --episodes (%s)", ns.episodes)
            return 2
        if ns.report_every <= 0:
            logging.error("--report-every must be positive: %s", ns.report_every)
            return 2
        run_training(TrainArgs(
            episodes=ns.episodes,
            eval_episodes=ns.eval_episodes,
            report_every=ns.report_every,
            seed=ns.seed,
            adversarial_eval=ns.adversarial_eval,
            verbose=ns.verbose,
            tracking=ns.tracking,
            log_dir=ns.log_dir,
        ))
        return 0

    if ns.cmd == "solve":
        import sys as _sys
        if ns.stdin:
            import csv as _csv
            w = _csv.writer(_sys.stdout)
            w.writerow(["board", "player", "value", "move"])
            for line in _sys.stdin:
                raw = line.strip()
                if not raw:
                    continue
                b = _parse_board(raw)
                if b is None:
                    continue
                player = ns.player or infer_player(b)
                value, move = best_move(player, b)
                w.writerow([raw, player, value, move])
            return 0
        else:
            b = _parse_board((ns.board or "").strip())
            if b is None:
                logging.error("Invalid board string. Must be 9 chars of 0/1/2 forming a reachable state.")
                return 2
            player = ns.player or infer_player(b)
            value, move = best_move(player, b)
            logging.info("player=%d value=%d move=%d", player, value, move)
            logging.info("move_values=%s", move_values(player, b))
            return 0

    if ns.cmd == "play":
        import sys as _sys

        def _emit(text: str) -> None:
            _sys.stdout.write(text)
            _sys.stdout.flush()

        try:
            play_human_vs_search(_sys.stdin.readline, _emit, human_first=not ns.computer_first)
        except EOFError as exc:
            logging.error("Game aborted: %s", exc)
            return 1
        except KeyboardInterrupt:
            return 130
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
