#!/usr/bin/env python3
"""
Weighted Alias Sampler
======================
O(1) sampling from an arbitrary discrete distribution using Vose's alias
method, with the Shannon entropy of the distribution computed up front.

Theory:
-------
Each of the n table slots is chosen with probability 1/n. Slot i keeps its own
index with probability ``probability_table[i]`` and otherwise hands over to
``alias_table[i]``. Construction moves the surplus of overfull slots (scaled
probability >= 1) into underfull ones until every slot holds exactly one unit,
which takes O(n). A draw is then one uniform index and one uniform float.

Usage:
    from markovpass.alias import WeightedAliasSampler

    sampler = WeightedAliasSampler([1.0, 2.0, 3.0])
    index = sampler.choice(rng)
    bits = sampler.entropy
"""

import math
from typing import List, Sequence

from .errors import InvalidWeightError, NullDistributionError


def _is_valid_weight(weight: float) -> bool:
    # copysign catches -0.0 as well as NaN with the sign bit set
    return math.isfinite(weight) and math.copysign(1.0, weight) > 0


class WeightedAliasSampler:
    """
    Discrete distribution over ``range(len(weights))``.

    Immutable after construction: draws only consume randomness from the
    caller-supplied ``rng``, so one sampler can be shared between threads.
    """

    __slots__ = ('probability_table', 'alias_table', '_entropy')

    def __init__(self, weights: Sequence[float]):
        """
        Build the probability and alias tables.

        Args:
            weights: Non-negative finite weights; they need not sum to 1.

        Raises:
            InvalidWeightError: A weight is negative, NaN or infinite.
            NullDistributionError: No weights, or they sum to zero.
        """
        weights = [float(w) for w in weights]
        if not all(_is_valid_weight(w) for w in weights):
            raise InvalidWeightError()

        peak = max(weights, default=0.0)
        if peak == 0.0:
            raise NullDistributionError()

        # Relative to the largest weight the total is at most n and cannot overflow.
        weights = [w / peak for w in weights]
        size = len(weights)
        total = math.fsum(weights)

        entropy = 0.0
        probability_table: List[float] = []
        for weight in weights:
            prob = weight / total
            if prob > 0.0:
                entropy -= prob * math.log2(prob)
            probability_table.append(prob * size)

        alias_table = list(range(size))
        overfull: List[int] = []
        underfull: List[int] = []
        for i, prob in enumerate(probability_table):
            if prob < 1.0:
                underfull.append(i)
            else:
                overfull.append(i)

        while underfull and overfull:
            i = underfull.pop()
            j = overfull.pop()
            alias_table[i] = j
            probability_table[j] += probability_table[i] - 1.0
            if probability_table[j] < 1.0:
                underfull.append(j)
            else:
                overfull.append(j)

        # Whatever is left over is full up to rounding error.
        for i in underfull + overfull:
            probability_table[i] = 1.0

        self.probability_table = probability_table
        self.alias_table = alias_table
        self._entropy = entropy

    @property
    def entropy(self) -> float:
        """Shannon entropy of the distribution, in bits."""
        return self._entropy

    def choice(self, rng) -> int:
        """
        Draw one index.

        Args:
            rng: Any ``random.Random``-compatible source (``randrange``
                 and ``random`` are used).

        Returns:
            An index in ``range(len(self))``.
        """
        i = rng.randrange(len(self.probability_table))
        if self.probability_table[i] >= rng.random():
            return i
        return self.alias_table[i]

    def probabilities(self) -> List[float]:
        """Recover the normalized distribution encoded by the tables."""
        size = len(self.probability_table)
        probs = [0.0] * size
        for i, (prob, alias) in enumerate(zip(self.probability_table, self.alias_table)):
            probs[i] += prob / size
            probs[alias] += (1.0 - prob) / size
        return probs

    def __len__(self) -> int:
        return len(self.probability_table)

    def __repr__(self) -> str:
        return f"WeightedAliasSampler(size={len(self)}, entropy={self._entropy:.4f})"


__all__ = ["WeightedAliasSampler"]
