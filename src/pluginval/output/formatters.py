"""Output mode dispatch.

The CLI renders ServiceResult for humans (Rich output) or machines
(--json). ``--quiet`` trims human output to the essentials.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pluginval.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from pluginval.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output flags taken from the global CLI options."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    show_passed: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(
        result,
        verbose=settings.verbose,
        show_passed=settings.show_passed or settings.verbose,
    )
