from __future__ import annotations

import argparse
from typing import Optional, Sequence

from . import config
from .experiments import format_stats_block, run_all_seeds, stats_table, summarize_sample
from .io_utils import ensure_results_layout, figure_path, get_logger
from .model import ShuffleParams
from .viz_utils import plot_distance_histograms


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run climax-distribution riffle shuffle experiments.")
    p.add_argument(
        "--mode",
        choices=["full", "quick"],
        default="full",
        help="full: SIM_COUNT trials per seed; quick: SIM_COUNT_QUICK trials writing _quick outputs",
    )
    p.add_argument(
        "--only",
        choices=[name for name, _, _ in config.SEEDS] + ["all"],
        default="all",
        help="Run only one seed (or 'all').",
    )
    p.add_argument(
        "--workers",
        type=int,
        default=config.N_WORKERS,
        help="Worker processes for trial chunks (1 = in-process).",
    )
    p.add_argument("--no-plot", action="store_true", help="Skip the histogram figure.")
    p.add_argument("--show", action="store_true", help="Open the histogram window after saving.")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    mode = args.mode
    only = None if args.only == "all" else args.only

    ensure_results_layout()
    logger = get_logger(mode=mode)

    n_trials = config.SIM_COUNT_QUICK if mode == "quick" else config.SIM_COUNT
    params = ShuffleParams(
        repetitions=config.REPETITIONS,
        split_error=config.SPLIT_ERROR,
        packet_error=config.PACKET_ERROR,
    )

    logger.info(f"RUN START mode={mode} n_trials={n_trials} workers={args.workers} {params}")
    if only is not None:
        logger.info(f"RUN CONFIG only={only}")

    samples = run_all_seeds(
        n_trials=n_trials,
        params=params,
        only=only,
        n_workers=args.workers,
        logger_warn=logger.warning,
        logger_info=logger.info,
    )

    summaries = {name: summarize_sample(values) for name, values in samples.items()}
    for name, st in summaries.items():
        logger.info("\n" + format_stats_block(name, st))
    logger.info("\n" + stats_table(summaries).to_string(float_format=lambda v: f"{v:.6g}"))

    if not args.no_plot:
        out_path = figure_path(mode, only=only)
        plot_distance_histograms(samples, out_path=out_path, show=args.show)
        logger.info(f"[FIGURE] Saved histogram to {out_path}")

    logger.info("RUN END")


if __name__ == "__main__":
    main()
