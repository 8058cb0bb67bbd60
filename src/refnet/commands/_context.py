"""AppContext: per-invocation state handed to every command via ``@click.pass_obj``."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click

from refnet.domain.errors import ReferralNetworkError
from refnet.output.formatters import OutputSettings, format_result
from refnet.services.result import ServiceResult

if TYPE_CHECKING:
    from refnet.config.settings import RefnetSettings
    from refnet.infrastructure.network import Network


class AppContext:
    """Settings, the lazily built Network, and result emission.

    Construction configures logging (and telemetry under ``--verbose``) once
    per invocation. Nothing touches the network file until a graph command
    asks for it, so ``--help``, ``--examples`` and the growth commands work
    without one.
    """

    def __init__(self, settings: RefnetSettings) -> None:
        from refnet.config.logging import configure_logging

        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._network: Network | None = None

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )
        if settings.verbose:
            from refnet.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def network(self) -> Network:
        if self._network is None:
            from refnet.infrastructure.network import Network

            self._network = Network(self.settings)
        return self._network

    def load_graph(self, op: str) -> None:
        """Read the network file now, reporting a bad file as a failed *op*."""
        try:
            self.network.graph  # noqa: B018
        except ReferralNetworkError as exc:
            self.fail(ServiceResult.failure(op, exc))

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; failures go to stderr and exit with status 1.

        In quiet mode warnings are repeated on stderr, since the quiet form
        on stdout has no room for them.
        """
        if not result.ok:
            self.fail(result)
        click.echo(format_result(result, settings=self.output))
        if self.output.quiet and not self.output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)

    def fail(self, result: ServiceResult) -> NoReturn:
        click.echo(format_result(result, settings=self.output), err=True)
        raise SystemExit(1)
