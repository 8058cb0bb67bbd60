"""End-to-end library workflows through the public ``refnet`` API."""

from __future__ import annotations

import pytest

import refnet
from refnet import (
    BonusOptimizer,
    CycleDetectedError,
    NetworkAnalyzer,
    NetworkSimulator,
    RankedUser,
    ReferralGraph,
)


def test_public_api_exports() -> None:
    for name in refnet.__all__:
        assert hasattr(refnet, name)


def test_build_analyse_mutate_reanalyse() -> None:
    graph = ReferralGraph()
    for user_id in ("alice", "bob", "carol", "dave"):
        graph.add_user(user_id)
    graph.add_referral("alice", "bob")
    graph.add_referral("bob", "carol")

    analyzer = NetworkAnalyzer(graph)
    assert analyzer.get_top_referrers_by_reach(2) == [
        RankedUser("alice", 2),
        RankedUser("bob", 1),
    ]

    with pytest.raises(CycleDetectedError):
        graph.add_referral("carol", "alice")

    graph.add_referral("carol", "dave")
    assert analyzer.calculate_total_reach("alice") == 2
    analyzer.clear_cache()
    assert analyzer.calculate_total_reach("alice") == 3
    assert analyzer.calculate_flow_centrality() == [
        RankedUser("bob", 2),
        RankedUser("carol", 2),
    ]


def test_growth_planning() -> None:
    simulator = NetworkSimulator()
    assert simulator.days_to_target(0.5, 250) == 5
    optimizer = BonusOptimizer(simulator)
    bonus = optimizer.min_bonus_for_target(5, 250, lambda b: min(1.0, b / 100), 0.5)
    assert bonus == 50
