from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm import tqdm

from . import config
from .model import (
    SEED_MODES,
    ShuffleParams,
    average_distance,
    riffle_shuffle,
    seed_deck,
    validate_template,
)


@dataclass(frozen=True)
class SampleStats:
    """Descriptive statistics for one seed's Sample Set."""

    n: int
    mean: float
    median: float
    mode: float
    range: float
    variance: float  # population
    std: float  # population
    iqr: float


def run_trials(
    *,
    mode: str,
    template: Sequence[int],
    n_trials: int,
    params: ShuffleParams,
    rng: np.random.Generator,
    warn_hook: Optional[Callable[[str], None]] = None,
    progress: bool = False,
    desc: str = "",
) -> np.ndarray:
    """
    Run `n_trials` independent seed -> shuffle -> measure trials.

    Each trial gets its own deck (a copy, or a fresh permutation in
    randomized mode), so the template is never mutated.
    """
    if n_trials < 0:
        raise ValueError("n_trials must be >= 0")
    if mode not in SEED_MODES:
        raise ValueError(f"unknown seed mode '{mode}'. Available: {list(SEED_MODES)}")

    out = np.empty(n_trials, dtype=np.float64)
    for t in tqdm(range(n_trials), desc=desc, leave=False, disable=not progress):
        deck = seed_deck(template, mode, rng)
        shuffled = riffle_shuffle(deck, params, rng, warn_hook=warn_hook, context=desc)
        out[t] = average_distance(shuffled)
    return out


def _chunk_sizes(n_trials: int, chunk_size: int) -> list[int]:
    n_chunks = max(1, math.ceil(n_trials / chunk_size))
    sizes = [chunk_size] * (n_chunks - 1)
    sizes.append(n_trials - chunk_size * (n_chunks - 1))
    return sizes


def _run_chunk(
    payload: tuple[str, tuple[int, ...], int, ShuffleParams, np.random.SeedSequence, str],
) -> tuple[np.ndarray, list[str]]:
    # Top-level so loky workers can unpickle it.
    mode, template, n_trials, params, seed_seq, desc = payload
    warnings: list[str] = []
    values = run_trials(
        mode=mode,
        template=template,
        n_trials=n_trials,
        params=params,
        rng=np.random.default_rng(seed_seq),
        warn_hook=warnings.append,
        desc=desc,
    )
    return values, warnings


def run_seed(
    *,
    name: str,
    mode: str,
    template: Sequence[int],
    n_trials: int,
    params: ShuffleParams,
    seed: int,
    n_workers: int = 1,
    chunk_size: int = config.CHUNK_SIZE,
    deck_length: int = config.DECK_LENGTH,
    logger_warn: Optional[Callable[[str], None]] = None,
    logger_info: Optional[Callable[[str], None]] = None,
    progress: bool = True,
) -> np.ndarray:
    """
    Build the Sample Set for one seed.

    Trials are split into chunks of `chunk_size`; chunk k draws from its own
    generator spawned from SeedSequence(seed). Chunks run in-process when
    n_workers == 1, else on joblib (loky) worker processes. Results are
    concatenated in chunk order, so a given (seed, chunk_size) reproduces
    the same Sample Set for any worker count.
    """
    validate_template(template, deck_length)
    if n_trials <= 0:
        raise ValueError("n_trials must be > 0")
    if n_workers <= 0:
        raise ValueError("n_workers must be > 0")
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")

    sizes = _chunk_sizes(n_trials, chunk_size)
    children = np.random.SeedSequence(seed).spawn(len(sizes))
    frozen = tuple(int(v) for v in template)
    payloads = [
        (mode, frozen, size, params, child, f"{name} chunk={k}")
        for k, (size, child) in enumerate(zip(sizes, children))
    ]

    if logger_info is not None:
        logger_info(
            f"{name}: running n_trials={n_trials} mode={mode} chunks={len(sizes)} "
            f"workers={n_workers} seed={seed} params={params}"
        )

    if n_workers == 1 or len(payloads) == 1:
        results = [_run_chunk(p) for p in tqdm(payloads, desc=name, leave=True, disable=not progress)]
    else:
        # Parallel returns results in submission order, i.e. chunk order.
        results = Parallel(n_jobs=n_workers, backend="loky")(
            delayed(_run_chunk)(p) for p in tqdm(payloads, desc=name, leave=True, disable=not progress)
        )

    n_warn = 0
    for _, warnings in results:
        for msg in warnings:
            n_warn += 1
            if logger_warn is not None:
                logger_warn(msg)
    if n_warn and logger_info is not None:
        logger_info(f"{name}: {n_warn} split boundary violation(s) clamped")

    return np.concatenate([values for values, _ in results])


def run_all_seeds(
    *,
    n_trials: int,
    params: Optional[ShuffleParams] = None,
    seeds: Optional[Sequence[tuple[str, str, Sequence[int]]]] = None,
    only: Optional[str] = None,
    base_seed: int = config.BASE_SEED,
    n_workers: int = config.N_WORKERS,
    chunk_size: int = config.CHUNK_SIZE,
    deck_length: int = config.DECK_LENGTH,
    logger_warn: Optional[Callable[[str], None]] = None,
    logger_info: Optional[Callable[[str], None]] = None,
    progress: bool = True,
) -> dict[str, np.ndarray]:
    """
    Run every (name, mode, template) seed and return {name: Sample Set}.

    Seed i uses RNG root base_seed + i, so filtering with `only` does not
    change the Sample Set a seed would get in a full run.
    """
    params = params or ShuffleParams()
    seeds = list(config.SEEDS if seeds is None else seeds)

    # Fail fast before any trial runs.
    for name, _, template in seeds:
        try:
            validate_template(template, deck_length)
        except ValueError as e:
            raise type(e)(f"seed '{name}': {e}") from e

    names = [name for name, _, _ in seeds]
    if only is not None and only not in names:
        raise ValueError(f"unknown seed '{only}'. Available: {names}")

    samples: dict[str, np.ndarray] = {}
    for i, (name, mode, template) in enumerate(seeds):
        if only is not None and name != only:
            continue
        samples[name] = run_seed(
            name=name,
            mode=mode,
            template=template,
            n_trials=n_trials,
            params=params,
            seed=int(base_seed + i),
            n_workers=n_workers,
            chunk_size=chunk_size,
            deck_length=deck_length,
            logger_warn=logger_warn,
            logger_info=logger_info,
            progress=progress,
        )
    return samples


# ------------------------------------------------------------
# Statistics
# ------------------------------------------------------------


def summarize_sample(values: Sequence[float]) -> SampleStats:
    """
    Mean, median, mode, range, population variance/std and IQR of a
    Sample Set. Ties for the mode resolve to the smallest value.
    """
    s = pd.Series(np.asarray(values, dtype=np.float64))
    if s.empty:
        raise ValueError("values must be non-empty")

    q1, q3 = s.quantile([0.25, 0.75]).tolist()
    return SampleStats(
        n=int(s.size),
        mean=float(s.mean()),
        median=float(s.median()),
        mode=float(s.mode().iloc[0]),
        range=float(s.max() - s.min()),
        variance=float(s.var(ddof=0)),
        std=float(s.std(ddof=0)),
        iqr=float(q3 - q1),
    )


def stats_table(summaries: dict[str, SampleStats]) -> pd.DataFrame:
    rows = [{"seed": name, **vars(st)} for name, st in summaries.items()]
    cols = ["seed", "n", "mean", "median", "mode", "range", "variance", "std", "iqr"]
    return pd.DataFrame(rows, columns=cols).set_index("seed")


def format_stats_block(name: str, st: SampleStats) -> str:
    lines = [
        f"======{name.upper()} SHUFFLE======",
        f"MEAN: {st.mean:.6g}",
        f"MEDIAN: {st.median:.6g}",
        f"MODE: {st.mode:.6g}",
        f"RANGE: {st.range:.6g}",
        f"VARIANCE: {st.variance:.6g}",
        f"STD_DEV: {st.std:.6g}",
        f"IQR: {st.iqr:.6g}",
    ]
    return "\n".join(lines)
