"""Standalone command: minimum referral bonus for a hiring target."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from refnet.commands._base import RefCommand
from refnet.services.growth import GrowthService, linear_adoption

if TYPE_CHECKING:
    from refnet.commands._context import AppContext


@click.command(
    cls=RefCommand,
    examples="""\
  refnet optimize --days 30 --target 500
  refnet optimize --days 10 --target 800 --saturation-bonus 250
  refnet --json optimize --days 30 --target 500 --eps 0.1""",
)
@click.option("--days", required=True, type=int, help="Day budget.")
@click.option("--target", required=True, type=int, help="Target cumulative referrals.")
@click.option("--eps", default=None, type=float, help="Search precision (default: config).")
@click.option(
    "--saturation-bonus",
    default=None,
    type=float,
    help="Bonus at which adoption probability reaches 1 (linear model).",
)
@click.pass_obj
def optimize(
    app: AppContext,
    days: int,
    target: int,
    eps: float | None,
    saturation_bonus: float | None,
) -> None:
    """Find the smallest bonus that reaches TARGET referrals within DAYS."""
    adoption = linear_adoption(saturation_bonus) if saturation_bonus else None
    app.emit(
        GrowthService(app.network).min_bonus(days, target, adoption_prob=adoption, eps=eps)
    )
