"""NetworkAnalyzer — reach, coverage, and pass-through metrics over a ReferralGraph.

Read-only consumer of the graph: it only calls ``has_user``,
``get_direct_referrals`` and ``get_all_users``. Results are memoised in an
:class:`AnalysisCache` that is *never* invalidated by graph mutation.
After mutating the graph, callers must call :meth:`NetworkAnalyzer.clear_cache`
to see the new state; until then cached values are returned as-is.

Equal scores are ordered by ascending user id so every ranking is
deterministic.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from refnet.domain.errors import InvalidParameterError
from refnet.domain.types import RankedUser, rank_key

if TYPE_CHECKING:
    from refnet.infrastructure.graph.referral_graph import ReferralGraph

logger = logging.getLogger(__name__)


@dataclass
class AnalysisCache:
    """Three independent lazily-filled mappings owned by one analyzer."""

    total_reach: dict[str, int] = field(default_factory=dict)
    shortest_paths: dict[str, dict[str, int]] = field(default_factory=dict)
    reach_sets: dict[str, frozenset[str]] = field(default_factory=dict)

    def clear(self) -> None:
        self.total_reach.clear()
        self.shortest_paths.clear()
        self.reach_sets.clear()

    def is_empty(self) -> bool:
        return not (self.total_reach or self.shortest_paths or self.reach_sets)


class NetworkAnalyzer:
    """Computes network metrics without mutating the graph."""

    def __init__(self, graph: ReferralGraph) -> None:
        self._graph = graph
        self._cache = AnalysisCache()

    @property
    def cache(self) -> AnalysisCache:
        return self._cache

    # ------------------------------------------------------------------
    # Traversal helpers
    # ------------------------------------------------------------------

    def _bfs_distances(self, source: str) -> dict[str, int]:
        """Hop distance from *source* to every node reachable via forward edges.

        Includes *source* itself at distance 0.
        """
        distances: dict[str, int] = {source: 0}
        queue: deque[str] = deque([source])
        while queue:
            node = queue.popleft()
            next_distance = distances[node] + 1
            for child in self._graph.get_direct_referrals(node):
                if child not in distances:
                    distances[child] = next_distance
                    queue.append(child)
        return distances

    def _reach_set(self, user_id: str) -> frozenset[str]:
        """Nodes reachable from *user_id*, excluding *user_id*."""
        reachable = self._bfs_distances(user_id).keys() - {user_id}
        return frozenset(reachable)

    # ------------------------------------------------------------------
    # total reach
    # ------------------------------------------------------------------

    def calculate_total_reach(self, user_id: str) -> int:
        """Number of distinct users downstream of *user_id*.

        Returns the cached value if present (possibly stale). Unknown users
        have reach 0 and are not cached.
        """
        cached = self._cache.total_reach.get(user_id)
        if cached is not None:
            return cached
        if not self._graph.has_user(user_id):
            return 0

        reach = len(self._reach_set(user_id))
        self._cache.total_reach[user_id] = reach
        return reach

    def get_top_referrers_by_reach(self, k: int) -> list[RankedUser]:
        """Return up to *k* users with the largest positive total reach.

        Raises:
            InvalidParameterError: *k* is not a positive integer.
        """
        if not isinstance(k, int) or isinstance(k, bool) or k <= 0:
            raise InvalidParameterError("k must be a positive integer", k=k)

        ranked = [
            RankedUser(user_id, reach)
            for user_id in self._graph.get_all_users()
            if (reach := self.calculate_total_reach(user_id)) > 0
        ]
        ranked.sort(key=rank_key)
        return ranked[:k]

    # ------------------------------------------------------------------
    # unique reach expansion: greedy maximum coverage
    # ------------------------------------------------------------------

    def _ensure_reach_sets(self) -> dict[str, frozenset[str]]:
        """Fill the reach-set cache for every user in one pass if it is empty."""
        if not self._cache.reach_sets:
            for user_id in self._graph.get_all_users():
                self._cache.reach_sets[user_id] = self._reach_set(user_id)
            logger.debug("Computed reach sets for %d users", len(self._cache.reach_sets))
        return self._cache.reach_sets

    def calculate_unique_reach_expansion(self) -> list[RankedUser]:
        """Greedy maximum coverage over downstream reach sets.

        Each round selects the candidate adding the most not-yet-covered
        users (ties: smallest id) and records that marginal gain. Stops when
        the best remaining gain is zero, so scores are non-increasing.
        """
        reach_sets = self._ensure_reach_sets()
        candidates = set(reach_sets)
        covered: set[str] = set()
        selections: list[RankedUser] = []

        while candidates:
            best_id: str | None = None
            best_gain = 0
            for user_id in sorted(candidates):
                gain = len(reach_sets[user_id] - covered)
                if gain > best_gain:
                    best_id, best_gain = user_id, gain
            if best_id is None:
                break
            selections.append(RankedUser(best_id, best_gain))
            covered |= reach_sets[best_id]
            candidates.discard(best_id)

        return selections

    # ------------------------------------------------------------------
    # flow centrality: shortest-path pass-through counts
    # ------------------------------------------------------------------

    def _ensure_shortest_paths(self) -> dict[str, dict[str, int]]:
        """Fill the distance cache for every user in one pass if it is empty."""
        paths = self._cache.shortest_paths
        if not paths:
            for user_id in self._graph.get_all_users():
                paths[user_id] = self._bfs_distances(user_id)
            logger.debug("Computed distances from %d users", len(paths))
        return paths

    def calculate_flow_centrality(self) -> list[RankedUser]:
        """Count, for each user, the ordered pairs whose shortest path it lies on.

        For every ordered pair ``(s, t)`` with ``t`` reachable from ``s`` and
        every other user ``v``, ``v`` scores a point when
        ``dist(s, v) + dist(v, t) == dist(s, t)``. Pairs with several
        equal-length shortest paths are not normalised. Users with score
        0 are omitted.
        """
        paths = self._ensure_shortest_paths()
        scores: dict[str, int] = {}

        for source, from_source in paths.items():
            for target, total in from_source.items():
                if target == source:
                    continue
                for via, to_via in from_source.items():
                    if via == source or via == target:
                        continue
                    onward = paths.get(via, {}).get(target)
                    if onward is not None and to_via + onward == total:
                        scores[via] = scores.get(via, 0) + 1

        ranked = [RankedUser(user_id, score) for user_id, score in scores.items() if score > 0]
        ranked.sort(key=rank_key)
        return ranked

    def clear_cache(self) -> None:
        """Drop every cached result; the next query recomputes from the graph."""
        self._cache.clear()
