"""
Tests for Random Sources
========================
Tests for markovpass/entropy.py.
"""

import random
import secrets
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from markovpass.entropy import derive_seeds, get_rng, seeded_rng, system_rng


class TestRandomSources:
    """Tests for random source selection."""

    def test_system_rng(self):
        assert isinstance(system_rng(), secrets.SystemRandom)

    def test_get_rng_defaults_to_system(self):
        assert isinstance(get_rng(), secrets.SystemRandom)

    def test_get_rng_seeded(self):
        rng = get_rng(7)
        assert type(rng) is random.Random
        assert rng.random() == seeded_rng(7).random()


class TestDeriveSeeds:
    """Tests for per-task seed derivation."""

    def test_deterministic(self):
        assert derive_seeds(42, 5) == derive_seeds(42, 5)

    def test_count_and_range(self):
        seeds = derive_seeds(1, 10)
        assert len(seeds) == 10
        assert all(0 <= s < 2 ** 64 for s in seeds)
        assert len(set(seeds)) == 10

    def test_prefix_stable(self):
        assert derive_seeds(3, 8)[:4] == derive_seeds(3, 4)

    def test_zero_count(self):
        assert derive_seeds(3, 0) == []
