"""Tests for the seeded random helpers."""
from __future__ import annotations

import pytest

from voxel_layout.rng import SEED_RANGE, draw_seed, frand, make_rng, rand_range, reseed, shuffle


def test_same_seed_same_stream():
    a = make_rng(123)
    b = make_rng(123)
    assert [rand_range(0, 1000, a) for _ in range(20)] == [rand_range(0, 1000, b) for _ in range(20)]
    assert frand(a) == frand(b)


def test_rand_range_is_half_open():
    rng = make_rng(0)
    values = {rand_range(3, 6, rng) for _ in range(500)}
    assert values == {3, 4, 5}
    assert {rand_range(7, 8, rng) for _ in range(10)} == {7}


def test_rand_range_empty_interval_raises():
    with pytest.raises(ValueError):
        rand_range(3, 3, make_rng(0))


def test_frand_unit_interval():
    rng = make_rng(1)
    for _ in range(200):
        assert 0.0 <= frand(rng) < 1.0


def test_shuffle_in_place_is_permutation():
    rng = make_rng(2)
    items = list(range(30))
    out = shuffle(items, rng)
    assert out is items
    assert sorted(items) == list(range(30))


def test_reseed_keeps_generator_identity():
    rng = make_rng(1)
    alias = rng
    rand_range(0, 10, rng)

    reseed(rng, 5)
    fresh = make_rng(5)
    assert [rand_range(0, 100, alias) for _ in range(10)] == [rand_range(0, 100, fresh) for _ in range(10)]


def test_draw_seed_range():
    rng = make_rng(9)
    for _ in range(100):
        assert 0 <= draw_seed(rng) < SEED_RANGE
