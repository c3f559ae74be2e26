"""Subcommand modules for almanac.

Provides register_commands() which uses deferred imports to keep
``almanac --help`` fast.
"""

from __future__ import annotations

from typing import Any

import click


class AlmanacCommand(click.Command):
    """A command whose ``--examples`` flag prints sample invocations and exits."""

    def __init__(self, *args: Any, examples: str = "", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show example invocations and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from almanac.commands.lowest import lowest
    from almanac.commands.trace import trace
    from almanac.commands.verify import verify

    cli.add_command(lowest)
    cli.add_command(trace)
    cli.add_command(verify)
