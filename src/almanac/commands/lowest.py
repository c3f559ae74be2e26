"""Command: lowest location reachable from the seeds."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from almanac.commands import AlmanacCommand
from almanac.domain.types import SeedMode, Strategy

if TYPE_CHECKING:
    from almanac.commands._context import AppContext


@click.command(
    cls=AlmanacCommand,
    examples="""\
  almanac lowest data/day05.txt
  almanac lowest data/day05.txt --mode ranges
  almanac lowest data/day05.txt --mode ranges --workers 4
  almanac -q lowest --mode ranges --strategy enumerate small.txt""",
)
@click.argument(
    "input_path",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in SeedMode]),
    default=None,
    help="Read seeds as identifiers or as start/length ranges.",
)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in Strategy]),
    default=None,
    help="Range-mode algorithm (enumerate is for small inputs only).",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Resolve seeds on this many threads.",
)
@click.pass_obj
def lowest(
    app: AppContext,
    input_path: Path | None,
    mode: str | None,
    strategy: str | None,
    workers: int | None,
) -> None:
    """Print the lowest location any seed resolves to."""
    app.emit(
        app.solver().lowest(
            input_path,
            mode=SeedMode(mode) if mode else None,
            strategy=Strategy(strategy) if strategy else None,
            workers=workers,
        )
    )
