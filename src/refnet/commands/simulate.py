"""Command group: expected-value growth simulation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from refnet.commands._base import RefGroup
from refnet.services.growth import GrowthService

if TYPE_CHECKING:
    from refnet.commands._context import AppContext

_SIMULATE_EXAMPLES = """\
  refnet simulate run --probability 0.1 --days 30
  refnet --json simulate run -p 0.5 -d 10
  refnet simulate target --probability 0.2 --target 500"""


@click.group(cls=RefGroup, examples=_SIMULATE_EXAMPLES)
@click.pass_obj
def simulate(app: AppContext) -> None:
    """Project referral growth from the configured referrer pool."""


@simulate.command(
    examples="""\
  refnet simulate run --probability 0.1 --days 30"""
)
@click.option("-p", "--probability", required=True, type=float, help="Daily success probability.")
@click.option("-d", "--days", required=True, type=int, help="Days to simulate.")
@click.pass_obj
def run(app: AppContext, probability: float, days: int) -> None:
    """Cumulative expected referrals for each day."""
    app.emit(GrowthService(app.network).simulate(probability, days))


@simulate.command(
    examples="""\
  refnet simulate target --probability 0.2 --target 500"""
)
@click.option("-p", "--probability", required=True, type=float, help="Daily success probability.")
@click.option("-t", "--target", required=True, type=float, help="Target cumulative referrals.")
@click.pass_obj
def target(app: AppContext, probability: float, target: float) -> None:
    """Days needed to reach a referral target."""
    app.emit(GrowthService(app.network).days_to_target(probability, target))
