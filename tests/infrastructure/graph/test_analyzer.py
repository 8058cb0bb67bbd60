"""Tests for NetworkAnalyzer — reach, greedy expansion, flow centrality."""

from __future__ import annotations

import random

import networkx as nx
import pytest

from refnet.domain.errors import InvalidParameterError
from refnet.domain.types import RankedUser
from refnet.infrastructure.graph.analyzer import AnalysisCache, NetworkAnalyzer
from refnet.infrastructure.graph.referral_graph import ReferralGraph
from tests.conftest import build_graph


def _random_forest(seed: int, size: int = 30) -> ReferralGraph:
    """Random forest: each user after the first gets a referrer with p=0.8."""
    rng = random.Random(seed)
    users = [f"u{i:02d}" for i in range(size)]
    referrals = [
        (rng.choice(users[:i]), users[i]) for i in range(1, size) if rng.random() < 0.8
    ]
    return build_graph(referrals, users=users)


def _as_digraph(graph: ReferralGraph) -> nx.DiGraph:
    shadow = nx.DiGraph()
    for user_id in graph.get_all_users():
        shadow.add_node(user_id)
        for child in graph.get_direct_referrals(user_id):
            shadow.add_edge(user_id, child)
    return shadow


class TestTotalReach:
    def test_chain(self, chain: ReferralGraph) -> None:
        analyzer = NetworkAnalyzer(chain)
        assert [analyzer.calculate_total_reach(u) for u in "ABCD"] == [3, 2, 1, 0]

    def test_sample(self, graph: ReferralGraph) -> None:
        analyzer = NetworkAnalyzer(graph)
        assert analyzer.calculate_total_reach("alice") == 5
        assert analyzer.calculate_total_reach("bob") == 2
        assert analyzer.calculate_total_reach("gina") == 1
        assert analyzer.calculate_total_reach("frank") == 0

    def test_unknown_user_is_zero_and_not_cached(self, graph: ReferralGraph) -> None:
        analyzer = NetworkAnalyzer(graph)
        assert analyzer.calculate_total_reach("ghost") == 0
        assert "ghost" not in analyzer.cache.total_reach

    def test_star(self) -> None:
        star = build_graph([("hub", f"leaf{i}") for i in range(5)])
        analyzer = NetworkAnalyzer(star)
        assert analyzer.calculate_total_reach("hub") == 5

    @pytest.mark.parametrize("seed", [3, 11, 29])
    def test_matches_descendants(self, seed: int) -> None:
        forest = _random_forest(seed)
        shadow = _as_digraph(forest)
        analyzer = NetworkAnalyzer(forest)
        for user_id in forest.get_all_users():
            assert analyzer.calculate_total_reach(user_id) == len(
                nx.descendants(shadow, user_id)
            )


class TestTopReferrers:
    def test_ranking_with_tie_break(self, graph: ReferralGraph) -> None:
        analyzer = NetworkAnalyzer(graph)
        assert analyzer.get_top_referrers_by_reach(3) == [
            RankedUser("alice", 5),
            RankedUser("bob", 2),
            RankedUser("carol", 1),
        ]

    def test_excludes_zero_reach(self, graph: ReferralGraph) -> None:
        ranked = NetworkAnalyzer(graph).get_top_referrers_by_reach(100)
        assert [entry.user_id for entry in ranked] == ["alice", "bob", "carol", "gina"]

    def test_empty_graph(self) -> None:
        assert NetworkAnalyzer(ReferralGraph()).get_top_referrers_by_reach(5) == []

    @pytest.mark.parametrize("k", [0, -1, 2.5, True, "3"])
    def test_invalid_k(self, graph: ReferralGraph, k: object) -> None:
        with pytest.raises(InvalidParameterError):
            NetworkAnalyzer(graph).get_top_referrers_by_reach(k)  # type: ignore[arg-type]

    def test_fills_reach_cache(self, graph: ReferralGraph) -> None:
        analyzer = NetworkAnalyzer(graph)
        analyzer.get_top_referrers_by_reach(2)
        assert analyzer.cache.total_reach["alice"] == 5
        assert len(analyzer.cache.total_reach) == graph.user_count


class TestUniqueReachExpansion:
    def test_sample(self, graph: ReferralGraph) -> None:
        assert NetworkAnalyzer(graph).calculate_unique_reach_expansion() == [
            RankedUser("alice", 5),
            RankedUser("gina", 1),
        ]

    def test_chain_stops_after_root(self, chain: ReferralGraph) -> None:
        assert NetworkAnalyzer(chain).calculate_unique_reach_expansion() == [
            RankedUser("A", 3)
        ]

    def test_tie_break_by_id(self) -> None:
        graph = build_graph([("zed", "z1"), ("amy", "a1")])
        assert NetworkAnalyzer(graph).calculate_unique_reach_expansion() == [
            RankedUser("amy", 1),
            RankedUser("zed", 1),
        ]

    def test_no_referrals(self) -> None:
        graph = ReferralGraph()
        graph.add_user("solo")
        assert NetworkAnalyzer(graph).calculate_unique_reach_expansion() == []

    @pytest.mark.parametrize("seed", [3, 11, 29])
    def test_scores_non_increasing_and_cover_all(self, seed: int) -> None:
        forest = _random_forest(seed)
        shadow = _as_digraph(forest)
        ranked = NetworkAnalyzer(forest).calculate_unique_reach_expansion()
        scores = [entry.score for entry in ranked]
        assert scores == sorted(scores, reverse=True)
        assert all(score > 0 for score in scores)
        assert len({entry.user_id for entry in ranked}) == len(ranked)
        # Every user with a referrer is downstream of some root.
        assert sum(scores) == sum(1 for u in shadow if shadow.in_degree(u) == 1)


class TestFlowCentrality:
    def test_chain(self, chain: ReferralGraph) -> None:
        assert NetworkAnalyzer(chain).calculate_flow_centrality() == [
            RankedUser("B", 2),
            RankedUser("C", 2),
        ]

    def test_sample(self, graph: ReferralGraph) -> None:
        assert NetworkAnalyzer(graph).calculate_flow_centrality() == [
            RankedUser("bob", 2),
            RankedUser("carol", 1),
        ]

    def test_star_has_no_intermediaries(self) -> None:
        star = build_graph([("hub", f"leaf{i}") for i in range(4)])
        assert NetworkAnalyzer(star).calculate_flow_centrality() == []

    @pytest.mark.parametrize("seed", [3, 11])
    def test_matches_path_count(self, seed: int) -> None:
        """In a forest every reachable pair has one path: score = interior visits."""
        forest = _random_forest(seed, size=20)
        shadow = _as_digraph(forest)
        expected: dict[str, int] = {}
        for source in shadow:
            for target in nx.descendants(shadow, source):
                for via in nx.shortest_path(shadow, source, target)[1:-1]:
                    expected[via] = expected.get(via, 0) + 1
        ranked = NetworkAnalyzer(forest).calculate_flow_centrality()
        assert {entry.user_id: entry.score for entry in ranked} == expected


class TestCache:
    def test_stale_until_cleared(self, chain: ReferralGraph) -> None:
        analyzer = NetworkAnalyzer(chain)
        assert analyzer.calculate_total_reach("A") == 3
        chain.add_user("E")
        chain.add_referral("D", "E")
        assert analyzer.calculate_total_reach("A") == 3
        analyzer.clear_cache()
        assert analyzer.calculate_total_reach("A") == 4

    def test_expansion_reach_sets_are_stale(self, chain: ReferralGraph) -> None:
        analyzer = NetworkAnalyzer(chain)
        analyzer.calculate_unique_reach_expansion()
        chain.add_user("E")
        chain.add_referral("D", "E")
        assert analyzer.calculate_unique_reach_expansion() == [RankedUser("A", 3)]
        analyzer.clear_cache()
        assert analyzer.calculate_unique_reach_expansion() == [RankedUser("A", 4)]

    def test_centrality_distances_are_stale(self, chain: ReferralGraph) -> None:
        analyzer = NetworkAnalyzer(chain)
        before = analyzer.calculate_flow_centrality()
        chain.add_user("X")
        chain.add_referral("X", "A")
        assert analyzer.calculate_flow_centrality() == before
        analyzer.clear_cache()
        assert analyzer.calculate_flow_centrality() == [
            RankedUser("B", 4),
            RankedUser("A", 3),
            RankedUser("C", 3),
        ]

    def test_clear_empties_everything(self, graph: ReferralGraph) -> None:
        analyzer = NetworkAnalyzer(graph)
        analyzer.get_top_referrers_by_reach(3)
        analyzer.calculate_unique_reach_expansion()
        analyzer.calculate_flow_centrality()
        assert not analyzer.cache.is_empty()
        analyzer.clear_cache()
        assert analyzer.cache.is_empty()

    def test_analysis_does_not_mutate_graph(self, graph: ReferralGraph) -> None:
        analyzer = NetworkAnalyzer(graph)
        analyzer.get_top_referrers_by_reach(10)
        analyzer.calculate_unique_reach_expansion()
        analyzer.calculate_flow_centrality()
        assert graph.user_count == 8
        assert graph.referral_count == 6

    def test_cache_dataclass(self) -> None:
        cache = AnalysisCache()
        assert cache.is_empty()
        cache.total_reach["a"] = 1
        assert not cache.is_empty()
        cache.clear()
        assert cache.is_empty()
