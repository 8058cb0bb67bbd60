"""ReferralGraph — acyclic referral forest backed by a NetworkX DiGraph.

Edges point from referrer to candidate. Structural rules are enforced at
mutation time, never by post-hoc validation:

- no self-referrals,
- a candidate's referrer is assigned exactly once,
- no directed cycles (the graph is always a forest of out-trees).

Nodes and edges are never removed.
"""

from __future__ import annotations

import networkx as nx

from refnet.domain.errors import (
    CycleDetectedError,
    DuplicateReferrerError,
    InvalidIdentifierError,
    SelfReferralError,
    UserNotFoundError,
)
from refnet.domain.ids import is_present_id, is_valid_user_id
from refnet.domain.types import DEFAULT_REFERRAL_CAPACITY, UserNode

type _Graph = nx.DiGraph


class ReferralGraph:
    """Owns the participant set and the referral edges between them."""

    def __init__(self) -> None:
        self._graph: _Graph = nx.DiGraph()

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, user_id: object) -> bool:
        return isinstance(user_id, str) and user_id in self._graph

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_user(self, user_id: str) -> bool:
        """Register *user_id*.

        Returns False (no-op) if the user already exists.

        Raises:
            InvalidIdentifierError: *user_id* is empty or all whitespace.
        """
        if not is_valid_user_id(user_id):
            raise InvalidIdentifierError(user_id=user_id)
        if user_id in self._graph:
            return False
        self._graph.add_node(user_id, active=True, capacity=DEFAULT_REFERRAL_CAPACITY)
        return True

    def add_referral(self, referrer_id: str, candidate_id: str) -> bool:
        """Record that *referrer_id* referred *candidate_id*.

        Checks run in a fixed order and the first failure wins; a failed
        call leaves the graph untouched.

        Raises:
            InvalidIdentifierError: Either id is empty.
            SelfReferralError: Both ids are equal.
            UserNotFoundError: Either user is not registered.
            DuplicateReferrerError: The candidate already has a referrer.
            CycleDetectedError: The candidate can already reach the referrer.
        """
        if not is_present_id(referrer_id) or not is_present_id(candidate_id):
            raise InvalidIdentifierError(referrer_id=referrer_id, candidate_id=candidate_id)
        if referrer_id == candidate_id:
            raise SelfReferralError(user_id=referrer_id)
        for user_id in (referrer_id, candidate_id):
            if user_id not in self._graph:
                raise UserNotFoundError(f"User does not exist: {user_id}", user_id=user_id)
        existing = self.get_referrer(candidate_id)
        if existing is not None:
            raise DuplicateReferrerError(
                f"{candidate_id} already referred by {existing}",
                candidate_id=candidate_id,
                referrer_id=existing,
            )
        if not self.validate_acyclicity(referrer_id, candidate_id):
            raise CycleDetectedError(referrer_id=referrer_id, candidate_id=candidate_id)

        self._graph.add_edge(referrer_id, candidate_id)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def validate_acyclicity(self, referrer_id: str, candidate_id: str) -> bool:
        """Return True if the edge ``referrer -> candidate`` keeps the graph acyclic.

        Pure predicate. False when either user is unknown. Runs a DFS from
        the candidate over forward edges: reaching the referrer means the
        new edge would close a cycle. O(V + E) worst case.
        """
        if referrer_id not in self or candidate_id not in self:
            return False
        return referrer_id not in nx.dfs_preorder_nodes(self._graph, candidate_id)

    def get_direct_referrals(self, user_id: str) -> set[str]:
        """Return users directly referred by *user_id* (empty if unknown)."""
        if user_id not in self:
            return set()
        return set(self._graph.successors(user_id))

    def has_user(self, user_id: str) -> bool:
        return user_id in self

    def get_referrer(self, user_id: str) -> str | None:
        """Return the referrer of *user_id*, or None (no referrer or unknown)."""
        if user_id not in self:
            return None
        return next(iter(self._graph.predecessors(user_id)), None)

    def get_all_users(self) -> list[str]:
        return list(self._graph.nodes)

    def get_user(self, user_id: str) -> UserNode | None:
        """Return a read-only snapshot of *user_id*, or None if unknown."""
        if user_id not in self:
            return None
        attrs = self._graph.nodes[user_id]
        referrals = frozenset(self._graph.successors(user_id))
        return UserNode(
            user_id=user_id,
            referrer_id=self.get_referrer(user_id),
            direct_referrals=referrals,
            referrals_made=len(referrals),
            is_active=attrs.get("active", True),
            referral_capacity=attrs.get("capacity", DEFAULT_REFERRAL_CAPACITY),
        )

    def roots(self) -> list[str]:
        """Users with no referrer, one per tree of the forest."""
        return [n for n, degree in self._graph.in_degree() if degree == 0]

    @property
    def user_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def referral_count(self) -> int:
        return self._graph.number_of_edges()
