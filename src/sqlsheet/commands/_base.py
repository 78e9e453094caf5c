"""Click base classes with ``--examples`` support.

``SheetCommand`` and ``SheetGroup`` take an ``examples`` string. Passing
``--examples`` prints it and exits, so ``--help`` stays short.
"""

from __future__ import annotations

from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to *cmd*."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class SheetCommand(click.Command):
    """Command that accepts ``examples=`` and grows an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class SheetGroup(click.Group):
    """Group variant; subcommands default to :class:`SheetCommand`."""

    command_class = SheetCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def document_argument[F](func: F) -> F:
    """Optional ``PATH`` argument shared by every document command."""
    return click.argument("path", required=False, metavar="[PATH]")(func)  # type: ignore[return-value]
