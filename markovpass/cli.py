#!/usr/bin/env python3
"""
markovpass CLI
==============
Command-line interface for passphrase generation.

Usage:
    markovpass austen.txt -n 5
    markovpass austen.txt lovecraft.txt -e 80 --show-entropy
    cat corpus.txt | markovpass -l 4 -w 4
    markovpass --seed 42 --table
"""

import argparse
import logging
import sys

from . import __version__
from .corpus import default_corpus_path, read_corpus, STDIN_NAME
from .errors import CorpusReadError, MarkovpassError
from .generate import GenerationOptions, gen_passphrases
from .settings import get_setting
from .ui import make_console, render_lines, render_table

PROG = 'markovpass'


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = make_console()
        self.err_console = make_console(stderr=True)

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.err_console.print(*args, markup=False, **kwargs)

    def error(self, msg: str):
        self.err_console.print(f"{PROG}: {msg}", markup=False)


def ngram_length_type(value: str) -> int:
    length = int(value)
    if length < 2:
        raise argparse.ArgumentTypeError("Ngram length must be greater than one.")
    return length


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"{value} is negative")
    return number


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value} must be at least 1")
    return number


def resolve_inputs(files: list) -> list:
    """Fall back to the bundled corpus when nothing is given on the command line or piped in."""
    if files:
        return files
    if sys.stdin is None or sys.stdin.isatty():
        return [str(default_corpus_path())]
    return [STDIN_NAME]


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description='Markov chain based passphrase generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Passphrases are generated by walking a Markov chain of character n-grams
built from FILE (or standard input). Their entropy is the Shannon entropy of
every choice made along the way.

Examples:
  %(prog)s austen.txt -n 5
  %(prog)s austen.txt lovecraft.txt -e 80 --show-entropy
  cat corpus.txt | %(prog)s -l 4 -w 4
"""
    )

    parser.add_argument('files', nargs='*', metavar='FILE',
                        help="Corpus files ('-' for stdin, default: bundled corpus)")
    parser.add_argument('-n', dest='number', type=non_negative_int, metavar='NUM',
                        help=f"Number of passphrases to generate "
                             f"(default {get_setting('generation.number')})")
    parser.add_argument('-e', dest='min_entropy', type=float, metavar='MINENTROPY',
                        help=f"Minimum entropy (default {get_setting('generation.min_entropy')})")
    parser.add_argument('-l', dest='ngram_length', type=ngram_length_type, metavar='LENGTH',
                        help=f"NGram length (default {get_setting('generation.ngram_length')}, "
                             f"must be > 1)")
    parser.add_argument('-w', dest='min_word_length', type=non_negative_int, metavar='LENGTH',
                        help=f"Minimum word length for corpus "
                             f"(default {get_setting('generation.min_word_length')})")
    parser.add_argument('--show-entropy', action='store_true',
                        default=bool(get_setting('output.show_entropy', False)),
                        help='Print the entropy for each passphrase')
    parser.add_argument('--table', action='store_true',
                        default=bool(get_setting('output.table', False)),
                        help='Print passphrases as a table')
    parser.add_argument('--seed', type=int,
                        help='Seed the random source (reproducible, NOT secure)')
    parser.add_argument('--workers', type=positive_int,
                        help='Threads used to generate passphrases')
    parser.add_argument('--max-steps', type=non_negative_int, metavar='N',
                        help='Give up on a passphrase after N ngrams (0 = never)')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show debug logging')
    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    out = Output(quiet=args.quiet)

    try:
        options = GenerationOptions(
            files=resolve_inputs(args.files),
            number=args.number,
            min_entropy=args.min_entropy,
            ngram_length=args.ngram_length,
            min_word_length=args.min_word_length,
            max_steps=args.max_steps,
            workers=args.workers,
            seed=args.seed,
        )
        if args.seed is not None:
            out.print("Warning: seeded output is reproducible and unsuitable for real passwords.")

        text = read_corpus(options.files)
        passphrases = gen_passphrases(options, text=text)
    except KeyboardInterrupt:
        out.print("\nCancelled.")
        return 130
    except CorpusReadError as e:
        out.error(f"{e.filename}: {e.reason}")
        return 1
    except (MarkovpassError, ValueError) as e:
        out.error(str(e))
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    if args.table:
        render_table(passphrases, out.console)
    else:
        render_lines(passphrases, out.console, show_entropy=args.show_entropy)

    return 0


if __name__ == '__main__':
    sys.exit(main())
