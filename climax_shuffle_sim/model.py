from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from . import config


SEED_MODES = ("fixed", "randomized")


class InvalidDeckConfiguration(ValueError):
    """Deck length or seed template is unusable; raised before any trial runs."""


class SplitBoundaryViolation(ValueError):
    """A riffle split fell outside [0, len(deck)]."""


@dataclass(frozen=True)
class ShuffleParams:
    """Simulation-wide riffle parameters (not per-trial state)."""

    repetitions: int = config.REPETITIONS
    split_error: int = config.SPLIT_ERROR
    packet_error: int = config.PACKET_ERROR

    def __post_init__(self) -> None:
        if self.repetitions <= 0:
            raise ValueError("repetitions must be > 0")
        if self.split_error < 0:
            raise ValueError("split_error must be >= 0")
        if self.packet_error < 0:
            raise ValueError("packet_error must be >= 0")


def validate_template(template: Sequence[int], deck_length: int = config.DECK_LENGTH) -> None:
    if deck_length <= 0:
        raise InvalidDeckConfiguration(f"deck length must be > 0 (got {deck_length})")
    if len(template) != deck_length:
        raise InvalidDeckConfiguration(
            f"template length {len(template)} disagrees with deck length {deck_length}"
        )
    bad = sorted({v for v in template if v not in (0, 1)})
    if bad:
        raise InvalidDeckConfiguration(f"template markers must be 0/1 (found {bad})")


def count_markers(deck: Sequence[int]) -> int:
    return sum(1 for v in deck if v == 1)


def _draw(rng: np.random.Generator, bound: int) -> int:
    """Uniform integer in {0, ..., bound - 1}; a bound of 0 always yields 0."""
    if bound <= 0:
        return 0
    return int(rng.random() * bound)


def _clamp(x: int, lo: int, hi: int) -> int:
    return lo if x < lo else hi if x > hi else x


# ------------------------------------------------------------
# Seed generator
# ------------------------------------------------------------


def fisher_yates(deck: list[int], rng: np.random.Generator) -> list[int]:
    """
    Unbiased in-place permutation: walk i from the last index down to 1 and
    swap deck[i] with deck[j], j uniform in [0, i].
    """
    for i in range(len(deck) - 1, 0, -1):
        j = _draw(rng, i + 1)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def seed_deck(template: Sequence[int], mode: str, rng: Optional[np.random.Generator] = None) -> list[int]:
    """
    Produce the deck fed into one trial.

    - fixed: an independent copy of the template
    - randomized: a fresh uniform permutation of the template's markers
      (call once per trial, not once per seed)

    The template itself is never touched.
    """
    if mode == "fixed":
        return list(template)
    if mode == "randomized":
        if rng is None:
            raise ValueError("randomized seeding requires an rng")
        return fisher_yates(list(template), rng)
    raise ValueError(f"unknown seed mode '{mode}'. Available: {list(SEED_MODES)}")


# ------------------------------------------------------------
# Imperfect riffle shuffle
# ------------------------------------------------------------


def riffle_once(
    deck: list[int],
    params: ShuffleParams,
    rng: np.random.Generator,
    *,
    warn_hook: Optional[callable] = None,
    strict: bool = False,
    context: str = "",
) -> list[int]:
    """
    One human riffle, applied to `deck` in place and returned.

    Split:
      cut = n // 2 + U{0..8} - split_error, clamped to [0, n]
    Interleave:
      the cursor starts inside the right portion, fewer than split_error
      cards from its end. Packets of U{0..packet_error-1} cards come off the tail of
      the left half and are inserted at the cursor, which then moves to
      cursor - U{0..packet_error-1} + packet_size. At most len(left) packets
      are dealt; whatever the left hand still holds drops in one block at the
      final cursor.
    """
    n = len(deck)
    cut = n // 2 + _draw(rng, config.CUT_OFFSET_VALUES) - params.split_error
    if cut < 0 or cut > n:
        msg = (
            f"split {cut} outside [0, {n}]"
            + (f" [{context}]" if context else "")
            + f" (split_error={params.split_error})"
        )
        if strict:
            raise SplitBoundaryViolation(msg)
        if warn_hook is not None:
            warn_hook(msg + "; clamped")
        cut = _clamp(cut, 0, n)

    left = deck[:cut]
    del deck[:cut]

    cursor = max(0, len(deck) - _draw(rng, params.split_error))
    max_packets = len(left)
    dealt = 0
    while left and dealt < max_packets:
        take = min(_draw(rng, params.packet_error), len(left))
        if take:
            packet = left[-take:]
            del left[-take:]
            deck[cursor:cursor] = packet
        cursor = _clamp(cursor - _draw(rng, params.packet_error) + take, 0, len(deck))
        dealt += 1

    if left:
        deck[cursor:cursor] = left
    return deck


def riffle_shuffle(
    deck: Sequence[int],
    params: ShuffleParams,
    rng: np.random.Generator,
    *,
    warn_hook: Optional[callable] = None,
    strict: bool = False,
    context: str = "",
) -> list[int]:
    """
    Apply `params.repetitions` imperfect riffles to a copy of `deck`.

    The result is always a permutation of the input: same length, same
    multiset of markers.
    """
    out = list(deck)
    for _ in range(params.repetitions):
        riffle_once(out, params, rng, warn_hook=warn_hook, strict=strict, context=context)
    return out


# ------------------------------------------------------------
# Distance metric
# ------------------------------------------------------------


def average_distance(deck: Sequence[int]) -> float:
    """
    Mean number of non-climax cards strictly between consecutive climaxes.

    Cards before the first and after the last climax do not count. Returns
    0.0 when fewer than two climaxes are present.
    """
    total = 0
    gaps = 0
    last = -1
    for i, v in enumerate(deck):
        if v == 1:
            if last != -1:
                total += i - last - 1
                gaps += 1
            last = i
    return total / gaps if gaps > 0 else 0.0
