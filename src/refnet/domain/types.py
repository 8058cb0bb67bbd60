"""Value types shared by the graph, the analyzer, and the service layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_REFERRAL_CAPACITY = 10


@dataclass(frozen=True)
class UserNode:
    """Read-only snapshot of one participant in the referral graph.

    ``referrals_made`` always equals ``len(direct_referrals)``.
    ``is_active`` is always True: deactivation is not modelled.
    """

    user_id: str
    referrer_id: str | None = None
    direct_referrals: frozenset[str] = field(default_factory=frozenset)
    referrals_made: int = 0
    is_active: bool = True
    referral_capacity: int = DEFAULT_REFERRAL_CAPACITY

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.user_id,
            "referrer_id": self.referrer_id,
            "direct_referrals": sorted(self.direct_referrals),
            "referrals_made": self.referrals_made,
            "is_active": self.is_active,
        }


@dataclass(frozen=True, order=True)
class RankedUser:
    """A ``(user_id, score)`` pair produced by an analysis.

    Score meaning depends on the analysis: total reach, marginal
    coverage, or shortest-path pass-through count.
    """

    user_id: str
    score: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.user_id, "score": self.score}


def rank_key(entry: RankedUser) -> tuple[int, str]:
    """Sort key: score descending, then identifier ascending."""
    return (-entry.score, entry.user_id)
