"""Click base classes that carry usage examples.

``RefCommand`` and ``RefGroup`` accept an ``examples`` string and expose it
through an eager ``--examples`` flag, keeping ``--help`` short. On a group,
``--examples`` also lists the examples of every subcommand, so
``refnet graph --examples`` is a one-stop cheat sheet.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Stores ``examples`` and registers the ``--examples`` flag."""

    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        assert isinstance(self, click.Command)
        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._show_examples,
                help="Show usage examples.",
            )
        )

    def _examples_text(self, ctx: click.Context) -> str:
        return self.examples or ""

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self._examples_text(ctx))
        ctx.exit(0)


class RefCommand(_ExamplesMixin, click.Command):
    """Command with an optional ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class RefGroup(_ExamplesMixin, click.Group):
    """Group with an optional ``--examples`` flag.

    Subcommands default to :class:`RefCommand`, so ``@group.command(examples=...)``
    works without ``cls=``.
    """

    command_class = RefCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)

    def _examples_text(self, ctx: click.Context) -> str:
        sections = [self.examples or ""]
        for name in self.list_commands(ctx):
            sub = self.get_command(ctx, name)
            sub_examples = getattr(sub, "examples", None)
            if sub_examples:
                sections.append(f"\n{name}:\n{sub_examples}")
        return "\n".join(sections)
