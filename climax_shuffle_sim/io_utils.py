from __future__ import annotations

import logging
from pathlib import Path


LOGGER_NAME = "climax_shuffle_sim"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
FIGURE_STEM = "average_cx_distance"


def package_root() -> Path:
    """Return the package directory (repo-relative results live under this)."""
    return Path(__file__).resolve().parent


def results_root() -> Path:
    return package_root() / "results"


def figures_dir() -> Path:
    return results_root() / "figures"


def ensure_results_layout() -> None:
    figures_dir().mkdir(parents=True, exist_ok=True)


def mode_suffix(mode: str) -> str:
    return "" if mode == "full" else f"_{mode}"


def figure_path(mode: str, *, only: str | None = None) -> Path:
    """
    Histogram output for a run, e.g. figures/average_cx_distance_quick.png.

    Single-seed runs get their own file so they never overwrite the
    combined three-seed figure.
    """
    seed_part = f"_{only}" if only else ""
    return figures_dir() / f"{FIGURE_STEM}{seed_part}{mode_suffix(mode)}.png"


def log_path(mode: str) -> Path:
    return results_root() / f"diagnostics{mode_suffix(mode)}.log"


def _with_format(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    return handler


def get_logger(*, mode: str = "full", level: int = logging.INFO) -> logging.Logger:
    """
    Diagnostics logger for simulation runs: stderr plus results/diagnostics[_mode].log.

    Configured once per process; later calls only adjust the level.
    """
    ensure_results_layout()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if getattr(logger, "_configured", False):
        return logger

    logger.addHandler(_with_format(logging.FileHandler(log_path(mode), mode="a", encoding="utf-8"), level))
    logger.addHandler(_with_format(logging.StreamHandler(), level))
    logger.propagate = False
    logger._configured = True  # type: ignore[attr-defined]
    return logger
