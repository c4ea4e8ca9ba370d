"""
Climax Distribution — Imperfect Riffle Shuffle Model

This package estimates, by Monte Carlo, how evenly the climax cards of a
50-card deck end up spread after a human-like riffle shuffle (imprecise
split, imprecise packet interleave) is repeated on a few common starting
arrangements ("seeds"): bottom-stacked, piled, and an unordered deck.
"""

from .config import (  # noqa: F401
    BASE_SEED,
    BOTTOM_STACKED,
    DECK_LENGTH,
    PACKET_ERROR,
    PILED,
    REPETITIONS,
    SEEDS,
    SIM_COUNT,
    SIM_COUNT_QUICK,
    SPLIT_ERROR,
    UNORDERED,
)
