"""Buffered Rich console with the refnet theme.

Renderers draw into a ``StringIO``-backed console and hand back plain
strings, so ``format_result`` stays a pure ``ServiceResult -> str`` function
and Click decides where the text goes. Rich drops color codes by itself when
the buffer is not a terminal, which covers pipes and ``CliRunner``.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

REFNET_THEME = Theme(
    {
        "ref.ok": "bold green",
        "ref.error": "bold red",
        "ref.warning": "bold yellow",
        "ref.op": "bold cyan",
        "ref.key": "dim",
        "ref.id": "bold blue",
        "ref.score": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int = DEFAULT_WIDTH) -> Console:
    """A themed console writing to a fresh buffer; fixed width keeps tables stable."""
    return Console(
        file=StringIO(),
        theme=REFNET_THEME,
        no_color=no_color,
        highlight=False,
        width=width,
    )


def get_output(console: Console) -> str:
    """Everything written to *console* so far."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console was not created by create_console()")
    return buffer.getvalue()
