"""Command group: referral graph analysis over a network file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from refnet.commands._base import RefGroup
from refnet.services.graph import GraphService

if TYPE_CHECKING:
    from refnet.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  refnet -n referrals.csv graph reach alice
  refnet -n referrals.csv graph top --k 5
  refnet -n referrals.csv graph expansion
  refnet -n referrals.csv graph centrality --top 10
  refnet -n referrals.csv graph referrals alice
  refnet -n referrals.csv graph check carol alice"""


@click.group(cls=RefGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Analyze the referral graph loaded from the network file."""


def _service(app: AppContext, op: str) -> GraphService:
    app.load_graph(op)
    return GraphService(app.network)


@graph.command(
    examples="""\
  refnet -n referrals.csv graph reach alice
  refnet -n referrals.csv --json graph reach alice"""
)
@click.argument("user_id")
@click.pass_obj
def reach(app: AppContext, user_id: str) -> None:
    """Count every user downstream of USER_ID."""
    app.emit(_service(app, "reach").reach(user_id))


@graph.command(
    examples="""\
  refnet -n referrals.csv graph top
  refnet -n referrals.csv graph top --k 3"""
)
@click.option("--k", "k", default=None, type=int, help="Max results (default: [analysis] default_top).")
@click.pass_obj
def top(app: AppContext, k: int | None) -> None:
    """Rank referrers by total downstream reach."""
    app.emit(_service(app, "top_reach").top_reach(k=k))


@graph.command(
    examples="""\
  refnet -n referrals.csv graph expansion
  refnet -n referrals.csv -q graph expansion"""
)
@click.pass_obj
def expansion(app: AppContext) -> None:
    """Greedy picks that each add the most not-yet-reached users."""
    app.emit(_service(app, "expansion").expansion())


@graph.command(
    examples="""\
  refnet -n referrals.csv graph centrality
  refnet -n referrals.csv graph centrality --top 5"""
)
@click.option("--top", default=None, type=int, help="Max results (default: all).")
@click.pass_obj
def centrality(app: AppContext, top: int | None) -> None:
    """Rank users by how many shortest referral paths pass through them."""
    app.emit(_service(app, "centrality").centrality(top=top))


@graph.command(
    examples="""\
  refnet -n referrals.csv graph referrals alice"""
)
@click.argument("user_id")
@click.pass_obj
def referrals(app: AppContext, user_id: str) -> None:
    """Show who referred USER_ID and whom USER_ID referred."""
    app.emit(_service(app, "referrals").referrals(user_id))


@graph.command(
    examples="""\
  refnet -n referrals.csv graph check carol alice
  refnet -n referrals.csv -q graph check carol alice"""
)
@click.argument("referrer_id")
@click.argument("candidate_id")
@click.pass_obj
def check(app: AppContext, referrer_id: str, candidate_id: str) -> None:
    """Check whether REFERRER_ID could refer CANDIDATE_ID (nothing is written)."""
    app.emit(_service(app, "check_referral").check_referral(referrer_id, candidate_id))
