"""Command: cross-check interval splitting against enumeration."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from almanac.commands import AlmanacCommand

if TYPE_CHECKING:
    from almanac.commands._context import AppContext


@click.command(
    cls=AlmanacCommand,
    examples="""\
  almanac verify data/day05.txt
  almanac --json verify small.txt""",
)
@click.argument(
    "input_path",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.pass_obj
def verify(app: AppContext, input_path: Path | None) -> None:
    """Resolve range mode both ways and fail if the answers differ."""
    app.emit(app.solver().verify(input_path))
