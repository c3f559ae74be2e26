"""Human/quiet/JSON output helpers.

The CLI renders ServiceResult for humans (Rich), for scripts (--quiet,
bare integer) or for machines (--json). The formatter picks the mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from almanac.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from almanac.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output mode flags, taken from the global CLI options."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(
    result: ServiceResult,
    *,
    settings: OutputSettings | None = None,
    json_output: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        settings: Output flags. When given, *json_output* is ignored.
        json_output: Shortcut for ``OutputSettings(json_output=True)``.
    """
    if settings is None:
        settings = OutputSettings(json_output=json_output)

    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
