"""Rich Console factory and theme for pluginval output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PLUGINVAL_THEME = Theme(
    {
        "pv.ok": "bold green",
        "pv.error": "bold red",
        "pv.warning": "bold yellow",
        "pv.op": "bold cyan",
        "pv.key": "dim",
        "pv.path": "bold",
        "pv.type": "dim",
        "pv.layer.command": "magenta",
        "pv.layer.agent": "blue",
        "pv.layer.skill": "green",
    }
)

_LAYER_STYLES: dict[str, str] = {
    "command": "pv.layer.command",
    "agent": "pv.layer.agent",
    "skill": "pv.layer.skill",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PLUGINVAL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_layer(layer: str) -> str:
    """Return the Rich style name for a layer."""
    return _LAYER_STYLES.get(layer, "")
