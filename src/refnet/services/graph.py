"""GraphService — referral mutations and network metrics as ServiceResults.

Wraps :class:`ReferralGraph` and :class:`NetworkAnalyzer` from the shared
:class:`Network`. Domain errors become failed results carrying the error
code; nothing is raised to the caller.

The analyzer cache is not cleared on mutation. ``add_referral`` and
``add_user`` report ``cache_stale`` so callers know to run
:meth:`GraphService.clear_cache` before re-querying.
"""

from __future__ import annotations

from typing import Any

from refnet.domain.errors import ReferralNetworkError
from refnet.domain.types import RankedUser
from refnet.services.base import BaseService
from refnet.services.result import ServiceResult
from refnet.services.telemetry import count, trace_span, traced


def _ranked_items(ranked: list[RankedUser]) -> list[dict[str, Any]]:
    return [entry.to_dict() for entry in ranked]


class GraphService(BaseService):
    """Handles referral mutations and graph analysis."""

    def _cache_stale(self) -> bool:
        return not self._network.analyzer.cache.is_empty()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @traced
    def add_user(self, user_id: str) -> ServiceResult:
        """Register a user; adding an existing user is a successful no-op."""
        try:
            created = self._network.graph.add_user(user_id)
        except ReferralNetworkError as exc:
            return ServiceResult.failure("add_user", exc)

        warnings: list[str] = []
        if not created:
            warnings.append(f"User '{user_id}' already exists")
        return ServiceResult(
            ok=True,
            op="add_user",
            data={"id": user_id, "created": created, "cache_stale": self._cache_stale()},
            warnings=warnings,
        )

    @traced
    def add_referral(self, referrer_id: str, candidate_id: str) -> ServiceResult:
        """Record ``referrer -> candidate``."""
        try:
            self._network.graph.add_referral(referrer_id, candidate_id)
        except ReferralNetworkError as exc:
            return ServiceResult.failure("add_referral", exc)

        return ServiceResult(
            ok=True,
            op="add_referral",
            data={
                "referrer_id": referrer_id,
                "candidate_id": candidate_id,
                "cache_stale": self._cache_stale(),
            },
        )

    # ------------------------------------------------------------------
    # Structure queries
    # ------------------------------------------------------------------

    @traced
    def referrals(self, user_id: str) -> ServiceResult:
        """Describe one user: referrer and direct referrals."""
        node = self._network.graph.get_user(user_id)
        if node is None:
            return ServiceResult(
                ok=True,
                op="referrals",
                data={"id": user_id, "exists": False, "direct_referrals": [], "count": 0},
                warnings=[f"User '{user_id}' not found"],
            )
        data = node.to_dict()
        data["exists"] = True
        data["count"] = node.referrals_made
        return ServiceResult(ok=True, op="referrals", data=data)

    @traced
    def check_referral(self, referrer_id: str, candidate_id: str) -> ServiceResult:
        """Report whether ``referrer -> candidate`` could be added, without adding it.

        ``acyclic`` is the raw acyclicity predicate; ``allowed`` additionally
        accounts for self-referral and an existing referrer.
        """
        graph = self._network.graph
        acyclic = graph.validate_acyclicity(referrer_id, candidate_id)
        reasons: list[str] = []
        if referrer_id == candidate_id:
            reasons.append("self_referral")
        for user_id in (referrer_id, candidate_id):
            if not graph.has_user(user_id):
                reasons.append(f"unknown_user:{user_id}")
        if graph.get_referrer(candidate_id) is not None:
            reasons.append("duplicate_referrer")
        if not acyclic and not reasons:
            reasons.append("cycle")

        return ServiceResult(
            ok=True,
            op="check_referral",
            data={
                "referrer_id": referrer_id,
                "candidate_id": candidate_id,
                "acyclic": acyclic,
                "allowed": acyclic and not reasons,
                "reasons": reasons,
            },
        )

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    @traced
    def reach(self, user_id: str) -> ServiceResult:
        """Total downstream reach of one user (0 for unknown users)."""
        graph = self._network.graph
        total = self._network.analyzer.calculate_total_reach(user_id)
        warnings = [] if graph.has_user(user_id) else [f"User '{user_id}' not found"]
        return ServiceResult(
            ok=True,
            op="reach",
            data={"id": user_id, "reach": total},
            warnings=warnings,
        )

    @traced
    def top_reach(self, *, k: int | None = None) -> ServiceResult:
        """Top referrers by total reach.

        Args:
            k: Maximum entries; defaults to ``[analysis] default_top``.
        """
        if k is None:
            k = self._network.settings.analysis.default_top
        try:
            with trace_span("rank_by_reach", users=self._network.graph.user_count):
                ranked = self._network.analyzer.get_top_referrers_by_reach(k)
                count("ranked", len(ranked))
        except ReferralNetworkError as exc:
            return ServiceResult.failure("top_reach", exc)

        return ServiceResult(
            ok=True,
            op="top_reach",
            data={"k": k, "count": len(ranked), "items": _ranked_items(ranked)},
        )

    @traced
    def expansion(self) -> ServiceResult:
        """Greedy unique-reach expansion ranking."""
        cache = self._network.analyzer.cache
        with trace_span("greedy_coverage", warm=bool(cache.reach_sets)):
            ranked = self._network.analyzer.calculate_unique_reach_expansion()
            count("selected", len(ranked))

        return ServiceResult(
            ok=True,
            op="expansion",
            data={
                "count": len(ranked),
                "covered": sum(entry.score for entry in ranked),
                "items": _ranked_items(ranked),
            },
        )

    @traced
    def centrality(self, *, top: int | None = None) -> ServiceResult:
        """Flow centrality ranking, optionally truncated to *top* entries."""
        cache = self._network.analyzer.cache
        with trace_span("flow_centrality", warm=bool(cache.shortest_paths)):
            ranked = self._network.analyzer.calculate_flow_centrality()
            count("scored", len(ranked))

        if top is not None:
            ranked = ranked[: max(top, 0)]
        return ServiceResult(
            ok=True,
            op="centrality",
            data={"count": len(ranked), "items": _ranked_items(ranked)},
        )

    @traced
    def clear_cache(self) -> ServiceResult:
        """Drop every cached analysis result."""
        self._network.analyzer.clear_cache()
        return ServiceResult(ok=True, op="clear_cache", data={"cleared": True})
