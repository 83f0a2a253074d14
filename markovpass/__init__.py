#!/usr/bin/env python3
"""
markovpass - Markov Chain Passphrase Generator
==============================================

Generates human-sounding passphrases from a character n-gram Markov chain,
along with the Shannon entropy of the choices that produced them. Long
random strings are hard to remember and word lists are slow to type;
markovpass output sits in between:

    soluttingle misfy curther requenturn

Quick Start
-----------
    from markovpass import Markovpass

    mp = Markovpass.from_files(["austen.txt"])
    passphrase, entropy = mp.passphrase(min_entropy=60)

    # Reproducible output for tests and demos
    mp = Markovpass.from_text(text, seed=42)

Modules
-------
    markovpass.alias    - O(1) weighted sampling (alias method) with entropy
    markovpass.chain    - Transition nodes and the passphrase Markov chain
    markovpass.corpus   - Corpus reading, cleaning and n-gram extraction
    markovpass.generate - End-to-end generation options and pipeline
    markovpass.parallel - Thread pool batch generation
    markovpass.settings - YAML settings

CLI Usage
---------
    python -m markovpass austen.txt -n 5 --show-entropy
"""

__version__ = "2.0.1"
__author__ = "markovpass"

from .alias import WeightedAliasSampler
from .chain import PassphraseMarkovChain, TransitionNode
from .corpus import Corpus, clean_corpus, clean_word, read_corpus
from .entropy import get_rng
from .errors import (
    MarkovpassError,
    AliasDistributionError,
    InvalidWeightError,
    NullDistributionError,
    MarkovChainError,
    NoNgramsError,
    ZeroEntropyError,
    ZeroStartOfWordEntropyError,
    TraversalLimitError,
    CorpusReadError,
)
from .generate import GenerationOptions, build_chain, gen_passphrases
from .parallel import generate_batch
from .settings import get_setting


# =============================================================================
# Markovpass Main Class
# =============================================================================

class Markovpass:
    """
    Main interface: one chain, many passphrases.

    Examples
    --------
        >>> mp = Markovpass.from_text(open("austen.txt").read())
        >>> mp.passphrase(60)
        ('beforeing licting stroducted shall', 61.3...)
        >>> mp.generate(count=5, workers=4)
    """

    def __init__(self, chain: PassphraseMarkovChain, seed: int = None):
        self._chain = chain
        self._seed = seed
        self._rng = get_rng(seed)

    @classmethod
    def from_text(cls,
                  text: str,
                  ngram_length: int = None,
                  min_word_length: int = None,
                  seed: int = None) -> 'Markovpass':
        if ngram_length is None:
            ngram_length = get_setting("generation.ngram_length")
        if min_word_length is None:
            min_word_length = get_setting("generation.min_word_length")
        return cls(build_chain(text, ngram_length, min_word_length), seed=seed)

    @classmethod
    def from_files(cls, files, **kwargs) -> 'Markovpass':
        return cls.from_text(read_corpus(files), **kwargs)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def chain(self) -> PassphraseMarkovChain:
        """The underlying Markov chain."""
        return self._chain

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    @staticmethod
    def _step_budget(max_steps):
        # None reads generation.max_steps; 0 (or null in app.yaml) is unbounded
        if max_steps is None:
            max_steps = get_setting("generation.max_steps")
        return max_steps or None

    def passphrase(self, min_entropy: float = None, max_steps: int = None):
        """Generate one (passphrase, entropy) pair."""
        if min_entropy is None:
            min_entropy = get_setting("generation.min_entropy")
        return self._chain.passphrase(min_entropy, rng=self._rng,
                                      max_steps=self._step_budget(max_steps))

    def generate(self,
                 count: int = 1,
                 min_entropy: float = None,
                 workers: int = 1,
                 max_steps: int = None) -> list:
        """Generate ``count`` passphrases, optionally on several threads."""
        if min_entropy is None:
            min_entropy = get_setting("generation.min_entropy")
        # Fresh seed per batch, so repeated calls do not repeat output.
        seed = None if self._seed is None else self._rng.getrandbits(64)
        return generate_batch(self._chain, count, min_entropy,
                              workers=workers, seed=seed,
                              max_steps=self._step_budget(max_steps))


__all__ = [
    "__version__",
    "Markovpass",
    "WeightedAliasSampler",
    "TransitionNode",
    "PassphraseMarkovChain",
    "Corpus",
    "clean_corpus",
    "clean_word",
    "read_corpus",
    "GenerationOptions",
    "build_chain",
    "gen_passphrases",
    "generate_batch",
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
