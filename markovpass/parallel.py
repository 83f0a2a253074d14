#!/usr/bin/env python3
"""
Parallel Batch Generation
=========================
Generates many passphrases from one shared chain using a thread pool.

A built chain is read-only, so workers need no locking; each task only gets
its own random source. With a seed, task seeds are derived up front from the
master seed, which keeps the output identical whatever the worker count.

Usage:
    from markovpass.parallel import generate_batch, ParallelConfig

    config = ParallelConfig(workers=4)
    results = generate_batch(chain, count=20, min_entropy=60.0,
                             workers=config.workers, seed=1234)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .entropy import derive_seeds, seeded_rng, system_rng
from .settings import get_setting

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class ParallelConfig:
    """Configuration for batch generation."""
    workers: Optional[int] = None   # Threads in the pool

    def __post_init__(self):
        if self.workers is None:
            self.workers = get_setting("parallel.workers")
        if self.workers is None:
            raise ValueError("parallel.workers must be set in app.yaml")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")


# =============================================================================
# Batch Generation
# =============================================================================

def _task_rngs(count: int, seed: Optional[int]) -> list:
    if seed is None:
        return [system_rng() for _ in range(count)]
    return [seeded_rng(s) for s in derive_seeds(seed, count)]


def generate_batch(chain,
                   count: int,
                   min_entropy: float,
                   workers: int = 1,
                   seed: Optional[int] = None,
                   max_steps: Optional[int] = None) -> List[Tuple[str, float]]:
    """
    Generate ``count`` passphrases.

    Args:
        chain: A built PassphraseMarkovChain
        count: Number of passphrases
        min_entropy: Minimum entropy per passphrase, in bits
        workers: Thread pool size (1 runs inline)
        seed: Optional master seed for reproducible output
        max_steps: Per-passphrase step budget (None = unbounded)

    Returns:
        List of (passphrase, entropy) tuples in task order
    """
    if count < 0:
        raise ValueError("count must not be negative")
    if workers < 1:
        raise ValueError("workers must be at least 1")

    rngs = _task_rngs(count, seed)

    def task(rng):
        return chain.passphrase(min_entropy, rng=rng, max_steps=max_steps)

    if workers == 1 or count <= 1:
        return [task(rng) for rng in rngs]

    logger.debug(f"Generating {count} passphrases on {workers} threads")
    with ThreadPoolExecutor(max_workers=workers) as executor:
        # map() keeps task order and re-raises the first failure
        return list(executor.map(task, rngs))


__all__ = [
    "ParallelConfig",
    "generate_batch",
]
