"""Command: show every stage a single seed passes through."""

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
  almanac trace 79 data/day05.txt
  almanac --json trace 14""",
)
@click.argument("seed", type=click.IntRange(min=0))
@click.argument(
    "input_path",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.pass_obj
def trace(app: AppContext, seed: int, input_path: Path | None) -> None:
    """Trace SEED through every category table."""
    app.emit(app.solver().trace(seed, input_path))
