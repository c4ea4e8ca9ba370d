from __future__ import annotations

"""
Sanity-check / validation script.

This script intentionally does NOT write into climax_shuffle_sim/results/.
It runs a small seeded simulation and prints key diagnostics to console.
"""

import argparse
from collections import Counter
from typing import Optional, Sequence

import numpy as np
from scipy.stats import ttest_ind

from . import config
from .experiments import format_stats_block, run_all_seeds, summarize_sample
from .model import ShuffleParams, average_distance, riffle_shuffle


DISTANCE_CASES = [
    ([1, 0, 0, 1, 0, 0, 1], 2.0),
    ([1, 1, 1], 0.0),
    ([0, 0, 0], 0.0),
    ([1, 0, 0, 0, 0, 1], 4.0),
]


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Quick console sanity check of the shuffle model.")
    p.add_argument("--trials", type=int, default=20_000)
    p.add_argument("--alpha", type=float, default=0.001)
    p.add_argument("--seed", type=int, default=123)
    args = p.parse_args(argv)

    ok = True
    params = ShuffleParams()
    rng = np.random.default_rng(args.seed)

    # ---- Distance metric literal cases
    print("[VALIDATION] distance metric")
    for deck, expected in DISTANCE_CASES:
        got = average_distance(deck)
        flag = "ok" if got == expected else "MISMATCH"
        ok &= got == expected
        print(f"{deck} -> {got} (expected {expected}) {flag}")
    print("")

    # ---- Permutation invariant on every template
    print("[VALIDATION] permutation invariant (200 shuffles per template)")
    for name, _, template in config.SEEDS:
        before = Counter(template)
        bad = 0
        for _ in range(200):
            out = riffle_shuffle(template, params, rng)
            if len(out) != len(template) or Counter(out) != before:
                bad += 1
        ok &= bad == 0
        print(f"{name}: violations={bad}")
    print("")

    # ---- Seed comparison (one-sided Welch t-test, stacked < unordered)
    print(f"[VALIDATION] seed comparison (n_trials={args.trials}, alpha={args.alpha}, {params})")
    seeds = [s for s in config.SEEDS if s[0] in ("unordered", "stacked")]
    samples = run_all_seeds(
        n_trials=args.trials, params=params, seeds=seeds, base_seed=args.seed, progress=False
    )
    for name, values in samples.items():
        print(format_stats_block(name, summarize_sample(values)))
    print("")

    test = ttest_ind(samples["stacked"], samples["unordered"], equal_var=False, alternative="less")
    residual = bool(test.pvalue < args.alpha)
    ok &= residual
    print(
        f"mean(stacked)={float(np.mean(samples['stacked'])):.6g} "
        f"mean(unordered)={float(np.mean(samples['unordered'])):.6g} "
        f"t={float(test.statistic):.4g} p={float(test.pvalue):.3g}: stacked lower={residual}"
    )
    print("")

    if ok:
        print("[VALIDATION COMPLETE] Model behaviour consistent with expectations.")
        return 0
    print("[VALIDATION FAILED] See mismatches above.")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
