"""Command-line entry point: ``refnet [global flags] <command> ...``.

The root group turns its flags into :class:`RefnetSettings` and hands an
:class:`AppContext` to every subcommand. It never reads the network file
itself; graph commands do that on first use.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click

from refnet import __version__
from refnet.commands import register_commands
from refnet.commands._context import AppContext
from refnet.config.settings import RefnetSettings

_OUTPUT_FLAGS = (
    click.option("--json", "json_output", is_flag=True, help="Print results as JSON."),
    click.option("-q", "--quiet", is_flag=True, help="Print only the bare answer."),
    click.option("-v", "--verbose", is_flag=True, help="Add error detail, timings and debug logs."),
    click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines."),
)


def _output_flags(func: Callable[..., Any]) -> Callable[..., Any]:
    for option in reversed(_OUTPUT_FLAGS):
        func = option(func)
    return func


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="refnet")
@_output_flags
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Read this refnet.toml instead of searching for one.",
)
@click.option(
    "-n",
    "--network",
    "network_path",
    type=click.Path(dir_okay=False),
    help="Referral edge list to analyse; replaces [network] path.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    network_path: str | None,
    **output_flags: bool,
) -> None:
    """refnet: reach, growth and bonus planning for referral networks."""
    settings = RefnetSettings.from_cli(
        config_path=config_path, network_path=network_path, **output_flags
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
