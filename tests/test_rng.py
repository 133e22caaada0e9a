"""Tests for seeded RNG and sampling without replacement."""

import pytest

from tarotbot.utils.rng import sample_without_replacement, seeded_random


class TestSeededRandom:
    def test_same_seed_and_salt_repeat(self):
        rng1 = seeded_random("test_seed", "test_salt")
        rng2 = seeded_random("test_seed", "test_salt")
        assert [rng1.random() for _ in range(10)] == [rng2.random() for _ in range(10)]

    def test_different_salts_differ(self):
        rng1 = seeded_random("seed", "salt1")
        rng2 = seeded_random("seed", "salt2")
        assert [rng1.random() for _ in range(10)] != [rng2.random() for _ in range(10)]


class TestSampleWithoutReplacement:
    def test_distinct_items(self):
        pool = [f"card_{i}" for i in range(20)]
        drawn = sample_without_replacement(pool, 5, seeded_random("seed"))
        assert len(drawn) == 5
        assert len(set(drawn)) == 5
        assert set(drawn) <= set(pool)

    def test_deterministic_with_seed(self):
        pool = list(range(20))
        assert sample_without_replacement(pool, 4, seeded_random("x")) == \
            sample_without_replacement(pool, 4, seeded_random("x"))

    def test_input_not_mutated(self):
        pool = ["a", "b", "c", "d"]
        sample_without_replacement(pool, 4, seeded_random("y"))
        assert pool == ["a", "b", "c", "d"]

    def test_zero_draws(self):
        assert sample_without_replacement(["a"], 0) == []

    def test_too_many_draws(self):
        with pytest.raises(ValueError):
            sample_without_replacement(["a", "b"], 3)
