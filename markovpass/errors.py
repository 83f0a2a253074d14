#!/usr/bin/env python3
"""
Exceptions
==========
Every failure markovpass reports is raised while building a sampler, a chain
or reading a corpus. Sampling and chain traversal never fail once construction
has succeeded (except for an explicit ``max_steps`` budget).

    MarkovpassError
    +-- AliasDistributionError      (ValueError)
    |   +-- InvalidWeightError
    |   +-- NullDistributionError
    +-- MarkovChainError            (ValueError)
    |   +-- NoNgramsError
    |   +-- ZeroEntropyError
    |   +-- ZeroStartOfWordEntropyError
    +-- TraversalLimitError         (RuntimeError)
    +-- CorpusReadError
"""


class MarkovpassError(Exception):
    """Base class for all markovpass errors."""

    message = "markovpass error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


# =============================================================================
# Weighted sampling
# =============================================================================

class AliasDistributionError(MarkovpassError, ValueError):
    """A weight vector cannot be turned into a probability distribution."""


class InvalidWeightError(AliasDistributionError):
    message = "Weights must be finite non-negative values."


class NullDistributionError(AliasDistributionError):
    message = "Sum of weights must be non-zero."


# =============================================================================
# Markov chain
# =============================================================================

class MarkovChainError(MarkovpassError, ValueError):
    """The n-gram sequence cannot produce varied passphrases."""


class NoNgramsError(MarkovChainError):
    message = "No ngrams found in cleaned input."


class ZeroEntropyError(MarkovChainError):
    message = "Cleaned input has no entropy."


class ZeroStartOfWordEntropyError(MarkovChainError):
    message = "Cleaned input has no start of word entropy."


class TraversalLimitError(MarkovpassError, RuntimeError):
    """A passphrase walk hit its step budget before reaching a stopping state."""

    def __init__(self, max_steps: int, entropy: float):
        self.max_steps = max_steps
        self.entropy = entropy
        super().__init__(
            f"No word boundary reached after {max_steps} ngrams "
            f"(accumulated entropy {entropy:.2f} bits)."
        )


# =============================================================================
# Corpus input
# =============================================================================

class CorpusReadError(MarkovpassError):
    """A corpus file could not be read."""

    def __init__(self, filename: str, reason: str = "Failed to read input."):
        self.filename = filename
        self.reason = reason
        super().__init__(f"{filename}: {reason}")


__all__ = [
    "MarkovpassError",
    "AliasDistributionError",
    "InvalidWeightError",
    "NullDistributionError",
    "MarkovChainError",
    "NoNgramsError",
    "ZeroEntropyError",
    "ZeroStartOfWordEntropyError",
    "TraversalLimitError",
    "CorpusReadError",
]
