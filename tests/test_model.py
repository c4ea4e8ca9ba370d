from collections import Counter
from itertools import permutations

import numpy as np
import pytest
from scipy.stats import chisquare

from climax_shuffle_sim import config
from climax_shuffle_sim.model import (
    InvalidDeckConfiguration,
    ShuffleParams,
    SplitBoundaryViolation,
    average_distance,
    count_markers,
    fisher_yates,
    riffle_once,
    riffle_shuffle,
    seed_deck,
    validate_template,
)


@pytest.mark.parametrize(
    "deck, expected",
    [
        ([1, 0, 0, 1, 0, 0, 1], 2.0),
        ([1, 1, 1], 0.0),
        ([0, 0, 0], 0.0),
        ([1, 0, 0, 0, 0, 1], 4.0),
        ([0, 0, 1, 0, 0], 0.0),
        ([], 0.0),
        ([0, 1, 0, 1, 0, 0, 0, 1, 0], 2.0),
    ],
)
def test_average_distance_literal_cases(deck, expected):
    assert average_distance(deck) == expected


def test_average_distance_ignores_cards_outside_first_and_last_climax():
    assert average_distance([0, 0, 0, 1, 0, 1, 0, 0, 0, 0]) == 1.0


def test_average_distance_of_templates():
    assert average_distance(config.BOTTOM_STACKED) == 0.0
    # gaps 5,5,5,5,5,6,6 between climaxes at 5, 11, ..., 42, 49
    assert average_distance(config.PILED) == pytest.approx(37 / 7)


def test_shuffle_is_a_permutation_across_random_parameters():
    meta = np.random.default_rng(2024)
    for case in range(200):
        n = int(meta.integers(1, 61))
        deck = [int(v) for v in meta.integers(0, 2, size=n)]
        params = ShuffleParams(
            repetitions=int(meta.integers(1, 11)),
            split_error=int(meta.integers(0, 8)),
            packet_error=int(meta.integers(0, 8)),
        )
        rng = np.random.default_rng(case)
        out = riffle_shuffle(deck, params, rng)
        assert len(out) == len(deck)
        assert Counter(out) == Counter(deck)


def test_shuffle_preserves_climax_count_on_templates():
    rng = np.random.default_rng(7)
    params = ShuffleParams()
    for _, _, template in config.SEEDS:
        for _ in range(50):
            out = riffle_shuffle(template, params, rng)
            assert count_markers(out) == count_markers(template) == 8
            assert len(out) == config.DECK_LENGTH


def test_shuffle_keeps_card_identity_with_distinct_labels():
    rng = np.random.default_rng(11)
    deck = list(range(50))
    out = riffle_shuffle(deck, ShuffleParams(), rng)
    assert sorted(out) == deck
    assert out != deck


def test_shuffle_does_not_mutate_input():
    deck = list(config.PILED)
    before = list(deck)
    riffle_shuffle(deck, ShuffleParams(), np.random.default_rng(0))
    assert deck == before


def test_shuffle_is_reproducible_with_injected_rng():
    params = ShuffleParams()
    a = riffle_shuffle(config.BOTTOM_STACKED, params, np.random.default_rng(99))
    b = riffle_shuffle(config.BOTTOM_STACKED, params, np.random.default_rng(99))
    assert a == b


def test_zero_packet_error_degrades_to_a_cut():
    # every packet draw is 0, so the left hand drops in one block at the end
    deck = list(range(10))
    rng = np.random.default_rng(3)
    for _ in range(20):
        out = riffle_once(list(deck), ShuffleParams(1, 0, 0), rng)
        assert any(out == deck[c:] + deck[:c] for c in range(len(deck) + 1))


def test_packet_error_one_stalls_then_flushes():
    deck = list(range(12))
    rng = np.random.default_rng(5)
    out = riffle_once(list(deck), ShuffleParams(1, 0, 1), rng)
    assert sorted(out) == deck
    assert any(out == deck[c:] + deck[:c] for c in range(len(deck) + 1))


def test_split_violation_is_clamped_and_reported():
    warnings = []
    params = ShuffleParams(repetitions=3, split_error=20, packet_error=2)
    deck = [1, 0, 0, 1]
    out = riffle_shuffle(deck, params, np.random.default_rng(0), warn_hook=warnings.append, context="unit")
    assert Counter(out) == Counter(deck)
    assert len(warnings) == 3
    assert all("outside [0, 4]" in w and "[unit]" in w and "clamped" in w for w in warnings)


def test_split_above_deck_length_is_clamped():
    warnings = []
    # cut = 1 + U{0..8} exceeds 2 for most draws
    params = ShuffleParams(repetitions=50, split_error=0, packet_error=2)
    out = riffle_shuffle([1, 0], params, np.random.default_rng(1), warn_hook=warnings.append)
    assert sorted(out) == [0, 1]
    assert warnings


def test_split_violation_raises_in_strict_mode():
    params = ShuffleParams(repetitions=1, split_error=20, packet_error=2)
    with pytest.raises(SplitBoundaryViolation):
        riffle_shuffle([1, 0, 0, 1], params, np.random.default_rng(0), strict=True)


def test_reference_parameters_never_violate_the_split():
    warnings = []
    rng = np.random.default_rng(8)
    for _ in range(200):
        riffle_shuffle(config.UNORDERED, ShuffleParams(), rng, warn_hook=warnings.append)
    assert warnings == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"repetitions": 0},
        {"repetitions": -1},
        {"split_error": -1},
        {"packet_error": -2},
    ],
)
def test_shuffle_params_validation(kwargs):
    with pytest.raises(ValueError):
        ShuffleParams(**kwargs)


def test_shuffle_params_defaults_match_config():
    p = ShuffleParams()
    assert (p.repetitions, p.split_error, p.packet_error) == (7, 4, 4)


def test_fixed_seed_returns_independent_equal_copies():
    template = config.BOTTOM_STACKED
    first = seed_deck(template, "fixed")
    first[0] = 1
    second = seed_deck(template, "fixed")
    assert second == list(template)
    assert template == (0,) * 42 + (1,) * 8
    assert second is not seed_deck(template, "fixed")


def test_template_survives_repeated_trials():
    template = config.PILED
    rng = np.random.default_rng(0)
    for _ in range(20):
        deck = seed_deck(template, "fixed", rng)
        riffle_once(deck, ShuffleParams(), rng)
    assert seed_deck(template, "fixed") == list(config.PILED)


def test_randomized_seed_preserves_markers_and_template():
    template = config.UNORDERED
    rng = np.random.default_rng(1)
    decks = [seed_deck(template, "randomized", rng) for _ in range(20)]
    assert all(count_markers(d) == 8 and len(d) == 50 for d in decks)
    assert len({tuple(d) for d in decks}) > 1
    assert seed_deck(template, "fixed") == list(config.UNORDERED)


def test_randomized_seed_is_uniform_over_arrangements():
    template = (1, 1, 0, 0)
    rng = np.random.default_rng(42)
    n = 12_000
    counts = Counter(tuple(seed_deck(template, "randomized", rng)) for _ in range(n))
    arrangements = set(permutations(template))
    assert set(counts) == arrangements
    observed = [counts[a] for a in sorted(arrangements)]
    assert chisquare(observed).pvalue > 0.001


def test_fisher_yates_is_uniform_over_distinct_orderings():
    rng = np.random.default_rng(17)
    n = 24_000
    counts = Counter(tuple(fisher_yates([0, 1, 2, 3], rng)) for _ in range(n))
    assert len(counts) == 24
    assert chisquare(list(counts.values())).pvalue > 0.001


def test_seed_deck_rejects_unknown_mode_and_missing_rng():
    with pytest.raises(ValueError, match="unknown seed mode"):
        seed_deck(config.PILED, "sorted")
    with pytest.raises(ValueError, match="requires an rng"):
        seed_deck(config.PILED, "randomized")


def test_validate_template_accepts_reference_templates():
    for _, _, template in config.SEEDS:
        validate_template(template, config.DECK_LENGTH)


@pytest.mark.parametrize(
    "template, deck_length, match",
    [
        ((0, 1), 0, "must be > 0"),
        ((0, 1), -3, "must be > 0"),
        ((0, 1, 1), 50, "disagrees"),
        ((0, 2, 1), 3, "0/1"),
    ],
)
def test_validate_template_rejects_bad_configuration(template, deck_length, match):
    with pytest.raises(InvalidDeckConfiguration, match=match):
        validate_template(template, deck_length)
