"""
Tests for the Passphrase Markov Chain
=====================================
Tests for TransitionNode and PassphraseMarkovChain in markovpass/chain.py.
"""

import logging
import random
import sys
import threading
from pathlib import Path

import pytest

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from markovpass.chain import (
    LOW_ENTROPY_PER_STATE,
    PassphraseMarkovChain,
    TransitionNode,
    count_transitions,
)
from markovpass.corpus import Corpus
from markovpass.errors import (
    InvalidWeightError,
    MarkovChainError,
    NoNgramsError,
    NullDistributionError,
    TraversalLimitError,
    ZeroEntropyError,
    ZeroStartOfWordEntropyError,
)


TIC_TOC = [" ti", "tic", "ic ", "c t", " to", "toc", "oc ", "c t"]


@pytest.fixture
def chain():
    """Chain over the two-word 'tic toc' corpus."""
    return PassphraseMarkovChain(TIC_TOC, rng=random.Random(42))


class TestTransitionNode:
    """Tests for a single chain state."""

    def test_next_returns_destination(self):
        node = TransitionNode("abc", ["bcd", "bce"], [1.0, 3.0])
        rng = random.Random(0)
        assert {node.next(rng) for _ in range(200)} == {"bcd", "bce"}

    def test_entropy_forwards_sampler(self):
        node = TransitionNode("abc", ["bcd", "bce"], [1.0, 1.0])
        assert node.entropy == pytest.approx(1.0)

    def test_deterministic_node(self):
        node = TransitionNode("abc", ["bcd"], [4.0])
        assert node.entropy == 0.0
        assert node.next(random.Random(3)) == "bcd"

    def test_bad_weights_fail_at_construction(self):
        with pytest.raises(NullDistributionError):
            TransitionNode("abc", [], [])
        with pytest.raises(InvalidWeightError):
            TransitionNode("abc", ["bcd"], [-1.0])


class TestCountTransitions:
    """Tests for the cyclic transition count."""

    def test_wraparound_edge(self):
        """Test that the last n-gram transitions to the first."""
        transitions, _ = count_transitions(["ab", "bc", "ca"])
        assert transitions["ca"] == {"ab": 1}

    def test_counts(self):
        transitions, starts = count_transitions(TIC_TOC)
        assert transitions["c t"] == {" to": 1, " ti": 1}
        assert transitions["tic"] == {"ic ": 1}
        assert starts == {" ti": 1, " to": 1}

    def test_every_ngram_has_successor(self):
        ngrams = [" ab", "abc", "bc ", "c a", " ab", "abc", "cbd", "bd ", "d a"]
        transitions, _ = count_transitions(ngrams)
        assert set(transitions) == set(ngrams)

    def test_start_counts_include_every_occurrence(self):
        _, starts = count_transitions([" ab", "ab ", "b a", " ab", "ab ", "b x", " xy"])
        assert starts == {" ab": 2, " xy": 1}


class TestChainConstruction:
    """Tests for building a chain."""

    def test_tic_toc(self, chain):
        assert len(chain.starting_ngrams) == 2
        assert " ti" in chain.starting_ngrams
        assert " to" in chain.starting_ngrams
        assert chain.starting_entropy == 1.0
        assert chain.total_entropy == 1.0

    def test_nodes_cover_every_ngram(self, chain):
        assert len(chain) == len(set(TIC_TOC))
        assert all(ngram in chain for ngram in TIC_TOC)
        assert chain.ngram_entropy("c t") == pytest.approx(1.0)
        assert chain.ngram_entropy("tic") == 0.0

    def test_starting_ngram_is_observed(self, chain):
        rng = random.Random(5)
        for _ in range(20):
            assert chain.starting_ngram(rng) in TIC_TOC

    def test_accepts_iterator(self):
        chain = PassphraseMarkovChain(iter(TIC_TOC))
        assert len(chain) == 7

    def test_no_ngrams(self):
        with pytest.raises(NoNgramsError):
            PassphraseMarkovChain([])

    def test_no_entropy(self):
        with pytest.raises(ZeroEntropyError):
            PassphraseMarkovChain([" ab", "abc", "bcd", "cd ", "d a"])

    def test_no_start_of_word_entropy(self):
        ngrams = [" ab", "abc", "bc ", "c a", " ab", "abc", "cbd", "bd ", "d a"]
        with pytest.raises(ZeroStartOfWordEntropyError):
            PassphraseMarkovChain(ngrams)

    def test_no_word_starts_at_all(self):
        with pytest.raises(ZeroStartOfWordEntropyError):
            PassphraseMarkovChain(["ab", "bc", "ca", "ab", "bd", "da"])

    def test_zero_entropy_checked_first(self):
        """Test that a deterministic corpus without word starts reports no entropy."""
        with pytest.raises(ZeroEntropyError):
            PassphraseMarkovChain(["ab", "bc", "ca"])

    def test_errors_share_base(self):
        with pytest.raises(MarkovChainError, match="No ngrams"):
            PassphraseMarkovChain([])

    def test_repetitive_corpus_warns(self, caplog):
        ngrams = Corpus("tic toc tic tac abcdefghijklmnopqrsuvwxyz", 3, 3).ngrams()
        with caplog.at_level(logging.WARNING, logger="markovpass.chain"):
            chain = PassphraseMarkovChain(ngrams)
        assert chain.total_entropy / len(chain) < LOW_ENTROPY_PER_STATE
        assert "very repetitive" in caplog.text

    def test_varied_corpus_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="markovpass.chain"):
            PassphraseMarkovChain(TIC_TOC)
        assert caplog.records == []


class TestPassphrase:
    """Tests for chain traversal."""

    def test_tic_toc_fixed_length(self, chain):
        """Test the deterministic length of the tic toc fixture."""
        passphrase, entropy = chain.passphrase(60.0)
        assert entropy == 60.0
        assert len(passphrase) == 239

    def test_tic_toc_words(self, chain):
        passphrase, _ = chain.passphrase(60.0)
        assert set(passphrase.split(" ")) <= {"tic", "toc"}
        assert passphrase == passphrase.strip()

    def test_low_budget_stops_at_first_word_end(self, chain):
        """Test that a budget met at the start stops at the first word boundary."""
        passphrase, entropy = chain.passphrase(0.5, rng=random.Random(1))
        assert passphrase in ("tic", "toc")
        assert entropy == 1.0

    def test_entropy_meets_minimum(self, chain):
        rng = random.Random(11)
        for min_entropy in (1.0, 2.5, 10.0, 33.3):
            _, entropy = chain.passphrase(min_entropy, rng=rng)
            assert entropy >= min_entropy

    def test_seeded_output_reproducible(self):
        ngrams = [" ab", "abc", "bc ", "c a", " ac", "acb", "cb ", "b a",
                  " ba", "bac", "ac ", "c b", " ab", "abb", "bb ", "b a"]
        chain = PassphraseMarkovChain(ngrams)
        first = [chain.passphrase(20.0, rng=random.Random(2024)) for _ in range(3)]
        second = [chain.passphrase(20.0, rng=random.Random(2024)) for _ in range(3)]
        assert first == second

    def test_default_rng_used(self):
        chain_a = PassphraseMarkovChain(TIC_TOC, rng=random.Random(8))
        chain_b = PassphraseMarkovChain(TIC_TOC, rng=random.Random(8))
        assert chain_a.passphrase(5.0) == chain_b.passphrase(5.0)

    def test_passphrases_count(self, chain):
        results = list(chain.passphrases(4, 3.0))
        assert len(results) == 4
        assert all(entropy >= 3.0 for _, entropy in results)

    def test_max_steps(self, chain):
        with pytest.raises(TraversalLimitError) as excinfo:
            chain.passphrase(60.0, max_steps=10)
        assert excinfo.value.max_steps == 10

    def test_max_steps_not_hit(self, chain):
        passphrase, entropy = chain.passphrase(60.0, max_steps=239)
        assert len(passphrase) == 239

    def test_chain_not_mutated(self, chain):
        nodes_before = dict(chain.nodes)
        starts_before = list(chain.starting_ngrams)
        chain.passphrase(10.0)
        assert chain.nodes == nodes_before
        assert chain.starting_ngrams == starts_before

    def test_concurrent_calls(self, chain):
        """Test that threads can share one chain with their own random sources."""
        results = []
        lock = threading.Lock()

        def worker(seed):
            result = chain.passphrase(60.0, rng=random.Random(seed))
            with lock:
                results.append(result)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(entropy == 60.0 and len(p) == 239 for p, entropy in results)
