"""Rich Console factory and theme for archmap output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ARCH_THEME = Theme(
    {
        "arch.ok": "bold green",
        "arch.error": "bold red",
        "arch.warning": "bold yellow",
        "arch.op": "bold cyan",
        "arch.key": "dim",
        "arch.id": "bold blue",
        "arch.path": "dim",
        "arch.title": "bold",
        "arch.type.layer": "magenta",
        "arch.type.component": "green",
        "arch.type.store": "yellow",
        "arch.type.external": "cyan",
        "arch.type.app": "bold green",
        "arch.progress.done": "green",
        "arch.progress.partial": "yellow",
        "arch.progress.none": "dim",
    }
)

_TYPE_STYLES: dict[str, str] = {
    "layer": "arch.type.layer",
    "component": "arch.type.component",
    "store": "arch.type.store",
    "external": "arch.type.external",
    "app": "arch.type.app",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=ARCH_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_type(node_type: str) -> str:
    """Return the Rich style name for a node type."""
    return _TYPE_STYLES.get(node_type, "")


def style_for_progress(progress: int) -> str:
    if progress >= 100:
        return "arch.progress.done"
    if progress > 0:
        return "arch.progress.partial"
    return "arch.progress.none"
