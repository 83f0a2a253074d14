#!/usr/bin/env python3
"""
Output Formatting
=================
Plain-line and Rich table rendering of generated passphrases.

Plain output is one passphrase per line, optionally followed by its entropy:

    soluttingle misfy curther requenturn <61.2>
"""

from typing import Iterable, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

Result = Tuple[str, float]


def format_entropy(value: float) -> str:
    """Shortest float repr, with integral values shown without ``.0``."""
    text = repr(float(value))
    if text.endswith('.0'):
        return text[:-2]
    return text


def format_passphrase(passphrase: str, entropy: float, show_entropy: bool = False) -> str:
    if show_entropy:
        return f"{passphrase} <{format_entropy(entropy)}>"
    return passphrase


def make_console(stderr: bool = False, file=None) -> Console:
    # No highlighting or markup: passphrases are printed verbatim.
    return Console(stderr=stderr, file=file, highlight=False, soft_wrap=True)


def build_table(results: Sequence[Result], title: Optional[str] = None) -> Table:
    """Rich table with one row per passphrase."""
    table = Table(title=title, box=box.SIMPLE_HEAD, show_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Passphrase", style="bold")
    table.add_column("Entropy (bits)", justify="right", style="cyan")
    table.add_column("Length", justify="right", style="dim")

    for i, (passphrase, entropy) in enumerate(results, 1):
        table.add_row(str(i), Text(passphrase), f"{entropy:.2f}", str(len(passphrase)))

    return table


def render_lines(results: Iterable[Result],
                 console: Console,
                 show_entropy: bool = False) -> None:
    for passphrase, entropy in results:
        console.print(format_passphrase(passphrase, entropy, show_entropy), markup=False)


def render_table(results: Sequence[Result], console: Console) -> None:
    console.print(build_table(results))


__all__ = [
    "format_entropy",
    "format_passphrase",
    "make_console",
    "build_table",
    "render_lines",
    "render_table",
]
