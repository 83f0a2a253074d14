#!/usr/bin/env python3
"""
Corpus Handling
===============
Reads corpus text, cleans it and cuts it into overlapping n-grams.

Cleaning lowercases the text, keeps words made only of letters and
apostrophes (after trimming punctuation and digits from either end), drops
words shorter than ``min_word_length`` and joins the survivors with a single
space in front of each word:

    "This is a test"  ->  " this test"     (min_word_length=3)

N-grams are taken with wraparound so the last characters flow back into the
first ones and the resulting chain has no dead ends.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO, Union

from .errors import CorpusReadError
from .settings import get_setting, resolve_path

logger = logging.getLogger(__name__)

STDIN_NAME = '-'
WORD_SEPARATOR = ' '

PathLike = Union[str, Path]


# =============================================================================
# Cleaning
# =============================================================================

def is_word_char(char: str) -> bool:
    return char.isalpha() or char == "'"


def clean_word(word: str, min_length: int) -> Optional[str]:
    """
    Trim non-word characters from both ends of ``word``.

    Returns:
        The trimmed word, or None if it still contains non-word characters
        or is shorter than ``min_length``.
    """
    start, end = 0, len(word)
    while start < end and not is_word_char(word[start]):
        start += 1
    while end > start and not is_word_char(word[end - 1]):
        end -= 1
    word = word[start:end]

    if all(is_word_char(c) for c in word) and len(word) >= min_length:
        return word
    return None


def clean_corpus(text: str, min_word_length: int) -> str:
    """Lowercase ``text`` and keep clean words, each preceded by one space."""
    words = (clean_word(w, min_word_length) for w in text.lower().split())
    return ''.join(WORD_SEPARATOR + w for w in words if w)


# =============================================================================
# N-grams
# =============================================================================

class Corpus:
    """
    Cleaned corpus text ready to be cut into n-grams.

    Usage:
        corpus = Corpus(text, ngram_length=3, min_word_length=5)
        chain = PassphraseMarkovChain(corpus.ngrams())
    """

    def __init__(self, text: str, ngram_length: int, min_word_length: int):
        if ngram_length < 2:
            raise ValueError("Ngram length must be greater than one.")
        if min_word_length < 0:
            raise ValueError("Minimum word length must not be negative.")

        self.ngram_length = ngram_length
        self.min_word_length = min_word_length
        self.text = clean_corpus(text, min_word_length)

        logger.debug(
            f"Cleaned corpus: {len(text)} -> {len(self.text)} characters, "
            f"{self.text.count(WORD_SEPARATOR)} words"
        )

    def ngrams(self) -> List[str]:
        """
        All n-grams of the cleaned text, with wraparound.

        One n-gram starts at every character, so the list is as long as the
        text. Empty when the text is shorter than one n-gram.
        """
        length = self.ngram_length
        if len(self.text) < length:
            logger.warning(
                f"Cleaned corpus has {len(self.text)} characters, "
                f"fewer than the ngram length {length}"
            )
            return []

        wrapped = self.text + self.text[:length - 1]
        return [wrapped[i:i + length] for i in range(len(self.text))]

    def __len__(self) -> int:
        return len(self.text)


# =============================================================================
# Reading
# =============================================================================

def default_corpus_path() -> Path:
    """Location of the bundled corpus."""
    value = get_setting("corpus.default_path")
    if value is None:
        raise ValueError("corpus.default_path must be set in app.yaml")
    return resolve_path(value)


def read_stream(stream: TextIO) -> str:
    return stream.read()


def read_corpus(paths: Iterable[PathLike] = (), stdin: TextIO = None) -> str:
    """
    Concatenate the given files, in order.

    ``-`` (or an empty ``paths``) reads standard input instead.

    Raises:
        CorpusReadError: A file is missing, unreadable or not valid text.
    """
    paths = list(paths)
    stdin = stdin if stdin is not None else sys.stdin
    encoding = get_setting("corpus.encoding", "utf-8")

    if not paths:
        return read_stream(stdin)

    chunks = []
    for path in paths:
        if str(path) == STDIN_NAME:
            chunks.append(read_stream(stdin))
            continue
        try:
            chunks.append(Path(path).read_text(encoding=encoding))
        except FileNotFoundError:
            raise CorpusReadError(str(path), "No such file or directory.") from None
        except IsADirectoryError:
            raise CorpusReadError(str(path), "Is a directory.") from None
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Failed to read {path}: {e}")
            raise CorpusReadError(str(path)) from e
        logger.debug(f"Read corpus file {path}")

    # Files are joined on whitespace so words never run together.
    return '\n'.join(chunks)


__all__ = [
    "Corpus",
    "clean_word",
    "clean_corpus",
    "is_word_char",
    "read_corpus",
    "default_corpus_path",
    "STDIN_NAME",
]
