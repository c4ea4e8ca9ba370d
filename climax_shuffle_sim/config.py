"""
Configuration for the climax-distribution shuffle experiments.

Only numpy/pandas/tqdm/matplotlib are assumed available in the environment.
"""

# Deck
DECK_LENGTH = 50

# Trials per seed
SIM_COUNT = 300_000

# Quick mode (dev / smoke test)
SIM_COUNT_QUICK = 2_000

# Human riffle model
REPETITIONS = 7
SPLIT_ERROR = 4
PACKET_ERROR = 4
CUT_OFFSET_VALUES = 9  # split offset drawn from {0, ..., 8}

# Seed templates (1 = climax)
BOTTOM_STACKED = (0,) * 42 + (1,) * 8
PILED = (
    0, 0, 0, 0, 0, 1, 0, 0, 0, 0,
    0, 1, 0, 0, 0, 0, 0, 1, 0, 0,
    0, 0, 0, 1, 0, 0, 0, 0, 0, 1,
    0, 0, 0, 0, 0, 1, 0, 0, 0, 0,
    0, 0, 1, 0, 0, 0, 0, 0, 0, 1,
)
UNORDERED = (
    0, 0, 0, 0, 0, 1, 0, 0, 0, 0,
    1, 0, 0, 0, 0, 1, 0, 1, 0, 1,
    0, 0, 0, 0, 1, 0, 0, 0, 0, 0,
    0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
    0, 1, 1, 0, 0, 0, 0, 0, 0, 0,
)

# (name, mode, template); "randomized" re-permutes the template every trial
SEEDS = [
    ("unordered", "randomized", UNORDERED),
    ("stacked", "fixed", BOTTOM_STACKED),
    ("piled", "fixed", PILED),
]

# Randomness
BASE_SEED = 12345

# Parallelism
N_WORKERS = 1
CHUNK_SIZE = 10_000

# Histogram canvas
PLOT_TITLE = "Average CX Distance"
PLOT_WIDTH_PX = 2000
PLOT_HEIGHT_PX = 1200
PLOT_FONT_SIZE = 18
