#!/usr/bin/env python3
"""
Random Sources
==============
Samplers and chains never touch process-wide random state; callers hand them
a ``random.Random``-compatible object instead.

- ``system_rng()``: ``secrets.SystemRandom`` backed by ``os.urandom``. This is
  the default for real passphrases.
- ``seeded_rng(seed)``: a ``random.Random`` for reproducible output (tests,
  fixtures, demos).
"""

import random
import secrets
from typing import Optional, Union

RandomSource = Union[random.Random, secrets.SystemRandom]


def system_rng() -> secrets.SystemRandom:
    """Random source drawing from the operating system's entropy pool."""
    return secrets.SystemRandom()


def seeded_rng(seed: int) -> random.Random:
    """Deterministic random source."""
    return random.Random(seed)


def get_rng(seed: Optional[int] = None) -> RandomSource:
    """Seeded source if ``seed`` is given, otherwise the system source."""
    if seed is None:
        return system_rng()
    return seeded_rng(seed)


def derive_seeds(seed: int, count: int) -> list:
    """Draw ``count`` independent 64-bit seeds from a master seed."""
    master = random.Random(seed)
    return [master.getrandbits(64) for _ in range(count)]


__all__ = [
    "RandomSource",
    "system_rng",
    "seeded_rng",
    "get_rng",
    "derive_seeds",
]
