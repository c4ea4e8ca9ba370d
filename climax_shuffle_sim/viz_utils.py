"""
Visualisation utilities for climax_shuffle_sim.

This module is a pure sink: it receives finished Sample Sets and renders
them as overlapping histograms. It never changes the numbers it is given.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Union

import numpy as np

from . import config


COLOURS = {
    "unordered": "#0072B2",  # blue
    "stacked": "#D55E00",    # orange
    "piled": "#009E73",      # green
}

DPI = 100


def shared_bin_edges(samples: Mapping[str, np.ndarray], bins: int) -> np.ndarray:
    """Common bin edges across all Sample Sets so the histograms overlay cleanly."""
    finite = [np.asarray(v, dtype=float) for v in samples.values() if len(v)]
    if not finite:
        raise ValueError("no non-empty samples to plot")
    lo = min(float(np.min(v)) for v in finite)
    hi = max(float(np.max(v)) for v in finite)
    if hi <= lo:
        hi = lo + 1.0
    return np.linspace(lo, hi, bins + 1)


def plot_distance_histograms(
    samples: Mapping[str, np.ndarray],
    *,
    out_path: Optional[Union[str, Path]] = None,
    title: str = config.PLOT_TITLE,
    width_px: int = config.PLOT_WIDTH_PX,
    height_px: int = config.PLOT_HEIGHT_PX,
    font_size: int = config.PLOT_FONT_SIZE,
    bins: int = 80,
    show: bool = False,
) -> Optional[Path]:
    """
    Overlay one histogram per named Sample Set on a fixed-size canvas.

    Writes a PNG when `out_path` is given and returns its path.
    """
    import matplotlib.pyplot as plt

    if not samples:
        raise ValueError("samples must be non-empty")

    edges = shared_bin_edges(samples, bins)

    fig, ax = plt.subplots(figsize=(width_px / DPI, height_px / DPI), dpi=DPI)
    for name, values in samples.items():
        ax.hist(
            np.asarray(values, dtype=float),
            bins=edges,
            alpha=0.55,
            color=COLOURS.get(name),
            label=name,
        )

    ax.set_title(title, fontsize=font_size)
    ax.set_xlabel("Average distance between climaxes (cards)", fontsize=font_size)
    ax.set_ylabel("Trials", fontsize=font_size)
    ax.tick_params(labelsize=max(1, font_size - 4))
    ax.grid(True, axis="y", alpha=0.20)
    ax.legend(fontsize=font_size, frameon=False)
    fig.tight_layout()

    saved: Optional[Path] = None
    if out_path is not None:
        saved = Path(out_path)
        saved.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(saved, dpi=DPI)

    if show:
        plt.show()
    plt.close(fig)
    return saved
