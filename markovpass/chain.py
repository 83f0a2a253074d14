#!/usr/bin/env python3
"""
Passphrase Markov Chain
=======================
Character n-gram Markov chain that walks from a word-start n-gram until an
entropy budget is spent at a word boundary.

Theory:
-------
Every distinct n-gram of the corpus is a state. Consecutive n-grams overlap
in all but one character, so a walk ``" pa", "pas", "ass", "ss "`` spells
``" pass "``. Transition weights are the observed counts of each successor,
and each state's Shannon entropy is the number of bits an attacker who knows
the chain must guess when that state is left. A passphrase is worth the
starting distribution's entropy plus the entropy of every state visited.

The n-gram sequence is treated as a cycle (the last n-gram is followed by the
first), so every state has at least one way out.
"""

import logging
from collections import Counter, defaultdict
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .alias import WeightedAliasSampler
from .entropy import system_rng
from .errors import (
    NoNgramsError,
    NullDistributionError,
    TraversalLimitError,
    ZeroEntropyError,
    ZeroStartOfWordEntropyError,
)

logger = logging.getLogger(__name__)

WORD_BOUNDARY = ' '

# Average bits per state below which a corpus is reported as repetitive
LOW_ENTROPY_PER_STATE = 0.1


# =============================================================================
# Transition Node
# =============================================================================

class TransitionNode:
    """One n-gram and the weighted set of n-grams that can follow it."""

    __slots__ = ('value', 'transitions', '_dist')

    def __init__(self, value: str, transitions: Sequence[str], weights: Sequence[float]):
        self.value = value
        self.transitions = list(transitions)
        self._dist = WeightedAliasSampler(weights)

    def next(self, rng) -> str:
        """Sample the following n-gram."""
        return self.transitions[self._dist.choice(rng)]

    @property
    def entropy(self) -> float:
        return self._dist.entropy

    def __repr__(self) -> str:
        return (f"TransitionNode({self.value!r}, transitions={len(self.transitions)}, "
                f"entropy={self.entropy:.4f})")


# =============================================================================
# Markov Chain
# =============================================================================

def count_transitions(ngrams: Sequence[str]) -> Tuple[Dict[str, Counter], Counter]:
    """
    Count successor n-grams and word-start n-grams.

    The sequence wraps around: the last n-gram transitions to the first.

    Returns:
        (transition_counts, starting_counts)
    """
    transition_counts: Dict[str, Counter] = defaultdict(Counter)
    starting_counts: Counter = Counter()

    first = ngrams[0]
    for i, current in enumerate(ngrams):
        if current.startswith(WORD_BOUNDARY):
            starting_counts[current] += 1
        following = ngrams[i + 1] if i + 1 < len(ngrams) else first
        transition_counts[current][following] += 1

    return transition_counts, starting_counts


class PassphraseMarkovChain:
    """
    Immutable Markov chain over n-grams.

    Usage:
        chain = PassphraseMarkovChain(corpus.ngrams())
        passphrase, bits = chain.passphrase(60.0)

    Once built nothing is mutated, so ``passphrase`` may be called from many
    threads at once as long as each call gets its own random source.
    """

    def __init__(self, ngrams: Sequence[str], rng=None):
        """
        Build the chain.

        Args:
            ngrams: Equal-length n-grams in corpus order.
            rng: Default random source for ``passphrase`` calls that do not
                 pass one (OS entropy if omitted).

        Raises:
            NoNgramsError: ``ngrams`` is empty.
            ZeroEntropyError: Every transition is deterministic.
            ZeroStartOfWordEntropyError: Fewer than two distinct word-start
                n-grams.
        """
        ngrams = list(ngrams)
        if not ngrams:
            raise NoNgramsError()

        self.rng = rng if rng is not None else system_rng()

        transition_counts, starting_counts = count_transitions(ngrams)

        self.nodes: Dict[str, TransitionNode] = {}
        self.total_entropy = 0.0
        for ngram, counts in transition_counts.items():
            node = TransitionNode(ngram, list(counts.keys()), list(counts.values()))
            self.total_entropy += node.entropy
            self.nodes[ngram] = node

        self.starting_ngrams: List[str] = list(starting_counts.keys())
        try:
            self.starting_dist = WeightedAliasSampler(list(starting_counts.values()))
        except NullDistributionError:
            # No word starts at all
            self.starting_dist = None
        self.starting_entropy = self.starting_dist.entropy if self.starting_dist else 0.0

        logger.debug(
            f"Built chain: {len(ngrams)} ngrams, {len(self.nodes)} states, "
            f"{len(self.starting_ngrams)} word starts, "
            f"total entropy {self.total_entropy:.2f}, "
            f"starting entropy {self.starting_entropy:.2f}"
        )

        if self.total_entropy == 0.0:
            raise ZeroEntropyError()
        if self.starting_entropy == 0.0:
            raise ZeroStartOfWordEntropyError()

        mean_entropy = self.total_entropy / len(self.nodes)
        if mean_entropy < LOW_ENTROPY_PER_STATE:
            logger.warning(
                f"Corpus is very repetitive: {mean_entropy:.3f} bits per state on average, "
                f"passphrases will be long"
            )

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def starting_ngram(self, rng=None) -> str:
        """Sample a word-start n-gram."""
        rng = rng if rng is not None else self.rng
        return self.starting_ngrams[self.starting_dist.choice(rng)]

    def walk(self, rng=None) -> Iterator[str]:
        """Endless random walk from a sampled word start."""
        rng = rng if rng is not None else self.rng
        current = self.starting_ngram(rng)
        while True:
            yield current
            current = self.nodes[current].next(rng)

    def passphrase(self,
                   min_entropy: float,
                   rng=None,
                   max_steps: Optional[int] = None) -> Tuple[str, float]:
        """
        Generate one passphrase.

        Args:
            min_entropy: Bits the passphrase must carry at least.
            rng: Random source for this call (defaults to the chain's).
            max_steps: Give up after this many n-grams. ``None`` walks until
                       the stopping rule fires, however long that takes.

        Returns:
            (passphrase, entropy in bits)

        Raises:
            TraversalLimitError: ``max_steps`` n-grams were used without
                reaching a word end with enough entropy.
        """
        selected: List[str] = []
        entropy = self.starting_entropy

        for ngram in self.walk(rng):
            selected.append(ngram)
            entropy += self.nodes[ngram].entropy
            if entropy >= min_entropy and ngram.endswith(WORD_BOUNDARY):
                break
            if max_steps is not None and len(selected) >= max_steps:
                raise TraversalLimitError(max_steps, entropy)

        # First character of every n-gram, then the rest of the last one.
        chars = [ngram[0] for ngram in selected]
        chars.append(selected[-1][1:])
        passphrase = ''.join(chars).strip()

        return passphrase, entropy

    def passphrases(self,
                    count: int,
                    min_entropy: float,
                    rng=None,
                    max_steps: Optional[int] = None) -> Iterator[Tuple[str, float]]:
        """Yield ``count`` independent passphrases."""
        for _ in range(count):
            yield self.passphrase(min_entropy, rng=rng, max_steps=max_steps)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def ngram_entropy(self, ngram: str) -> float:
        return self.nodes[ngram].entropy

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, ngram: str) -> bool:
        return ngram in self.nodes

    def __repr__(self) -> str:
        return (f"PassphraseMarkovChain(states={len(self.nodes)}, "
                f"starts={len(self.starting_ngrams)}, "
                f"starting_entropy={self.starting_entropy:.4f})")


__all__ = [
    "TransitionNode",
    "PassphraseMarkovChain",
    "count_transitions",
    "WORD_BOUNDARY",
]
