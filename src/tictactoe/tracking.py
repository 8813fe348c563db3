"""
Experiment tracking helpers (optional MLflow backend).

MLflow is only imported when tracking is requested so training runs never
need it installed. All helpers soft-fail: a tracking problem is logged at
debug level and the run continues.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

_active = False


@contextmanager
def maybe_mlflow_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[bool]:
    global _active
    if not enabled:
        yield False
        return
    try:
        import mlflow  # type: ignore
    except ImportError:
        logging.warning("mlflow is not installed; continuing without tracking")
        yield False
        return
    try:
        if log_dir is not None:
            mlflow.set_tracking_uri((log_dir.resolve() / "mlruns").as_uri())
        run = mlflow.start_run(run_name=run_name)
    except Exception as exc:
        logging.warning("mlflow run could not be started (%s); continuing without tracking", exc)
        yield False
        return
    with run:
        _active = True
        try:
            yield True
        finally:
            _active = False


def log_params(params: Dict[str, object]) -> None:
    if not _active:
        return
    try:
        import mlflow  # type: ignore

        mlflow.log_params(params)
    except Exception as exc:
        logging.debug("mlflow.log_params failed: %s", exc)


def log_metrics(metrics: Dict[str, float], step: Optional[int] = None) -> None:
    if not _active:
        return
    try:
        import mlflow  # type: ignore

        mlflow.log_metrics(metrics, step=step)
    except Exception as exc:
        logging.debug("mlflow.log_metrics failed: %s", exc)
