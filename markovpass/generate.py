#!/usr/bin/env python3
"""
Passphrase Generation
=====================
End-to-end pipeline: read corpus -> clean -> n-grams -> chain -> passphrases.

Usage:
    from markovpass import GenerationOptions, gen_passphrases

    options = GenerationOptions(files=["austen.txt"], number=5, min_entropy=80)
    for passphrase, entropy in gen_passphrases(options):
        print(passphrase, entropy)
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .chain import PassphraseMarkovChain
from .corpus import Corpus, read_corpus
from .entropy import get_rng
from .parallel import ParallelConfig, generate_batch
from .settings import get_setting

logger = logging.getLogger(__name__)


@dataclass
class GenerationOptions:
    """Options for one generation run. ``None`` fields come from app.yaml."""
    files: List[str] = field(default_factory=list)
    number: Optional[int] = None
    min_entropy: Optional[float] = None
    ngram_length: Optional[int] = None
    min_word_length: Optional[int] = None
    max_steps: Optional[int] = None
    workers: Optional[int] = None
    seed: Optional[int] = None

    def __post_init__(self):
        cfg = get_setting("generation", {}) or {}
        if self.number is None:
            self.number = cfg.get("number")
        if self.min_entropy is None:
            self.min_entropy = cfg.get("min_entropy")
        if self.ngram_length is None:
            self.ngram_length = cfg.get("ngram_length")
        if self.min_word_length is None:
            self.min_word_length = cfg.get("min_word_length")
        if self.max_steps is None:
            # null in app.yaml means unbounded
            self.max_steps = cfg.get("max_steps")
        if self.workers is None:
            self.workers = ParallelConfig().workers

        missing = [
            name for name, value in (
                ("number", self.number),
                ("min_entropy", self.min_entropy),
                ("ngram_length", self.ngram_length),
                ("min_word_length", self.min_word_length),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"generation settings missing in app.yaml: {', '.join(missing)}")

        if self.number < 0:
            raise ValueError("number must not be negative")
        if self.ngram_length < 2:
            raise ValueError("Ngram length must be greater than one.")
        if self.min_word_length < 0:
            raise ValueError("min_word_length must not be negative")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.max_steps is not None and self.max_steps < 0:
            raise ValueError("max_steps must not be negative")
        if self.max_steps == 0:
            # 0 switches the budget off
            self.max_steps = None


def build_chain(text: str,
                ngram_length: int,
                min_word_length: int,
                rng=None) -> PassphraseMarkovChain:
    """Clean ``text`` and build a chain from its n-grams."""
    corpus = Corpus(text, ngram_length, min_word_length)
    return PassphraseMarkovChain(corpus.ngrams(), rng=rng)


def gen_passphrases(options: GenerationOptions,
                    text: Optional[str] = None) -> List[Tuple[str, float]]:
    """
    Run the full pipeline.

    Args:
        options: Generation options
        text: Corpus text; read from ``options.files`` (or stdin) if omitted

    Returns:
        List of (passphrase, entropy) tuples

    Raises:
        CorpusReadError: A corpus file could not be read
        MarkovChainError: The corpus cannot produce varied passphrases
        TraversalLimitError: A passphrase exceeded ``options.max_steps``
    """
    if text is None:
        text = read_corpus(options.files)

    chain = build_chain(text, options.ngram_length, options.min_word_length,
                        rng=get_rng(options.seed))
    logger.info(f"Chain ready: {len(chain)} states, "
                f"starting entropy {chain.starting_entropy:.2f} bits")

    return generate_batch(
        chain,
        count=options.number,
        min_entropy=options.min_entropy,
        workers=options.workers,
        seed=options.seed,
        max_steps=options.max_steps,
    )


__all__ = [
    "GenerationOptions",
    "build_chain",
    "gen_passphrases",
]
