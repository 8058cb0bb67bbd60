"""NetworkSimulator — deterministic expected-value growth projection.

Models a fixed population of initial referrers, each with a lifetime
referral capacity. Every day each active referrer makes ``probability``
expected referrals, which are deducted from its remaining capacity.
Referrers whose capacity is exhausted drop out of the pool. New referrals
do not become referrers themselves.

This model never touches the referral graph.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from refnet.domain.errors import InvalidParameterError, InvalidProbabilityError
from refnet.domain.types import DEFAULT_REFERRAL_CAPACITY

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_REFERRERS = 100
DEFAULT_CAPACITY_EPSILON = 0.001


@dataclass
class SimulationState:
    """Expected state of the referrer pool at the start of a day."""

    active_referrers: dict[str, float] = field(default_factory=dict)
    total_referrals: float = 0.0
    day: int = 0


def _check_probability(probability: float, op: str) -> None:
    if not isinstance(probability, (int, float)) or not 0.0 <= probability <= 1.0:
        logger.warning("Invalid probability for %s: %r", op, probability)
        raise InvalidProbabilityError(probability=probability)


class NetworkSimulator:
    """Expected-value simulator for referral network growth.

    Args:
        initial_referrers: Size of the starting referrer pool.
        referral_capacity: Lifetime referrals each referrer can make.
        capacity_epsilon: Remaining capacity at or below which a referrer
            is considered exhausted.
    """

    def __init__(
        self,
        *,
        initial_referrers: int = DEFAULT_INITIAL_REFERRERS,
        referral_capacity: int = DEFAULT_REFERRAL_CAPACITY,
        capacity_epsilon: float = DEFAULT_CAPACITY_EPSILON,
    ) -> None:
        if initial_referrers <= 0 or referral_capacity <= 0:
            raise InvalidParameterError(
                "Referrer pool and capacity must be positive",
                initial_referrers=initial_referrers,
                referral_capacity=referral_capacity,
            )
        self.initial_referrers = initial_referrers
        self.referral_capacity = referral_capacity
        self.capacity_epsilon = capacity_epsilon

    @property
    def max_referrals(self) -> int:
        """Upper bound on cumulative referrals: every referrer fully spent."""
        return self.initial_referrers * self.referral_capacity

    def initial_state(self) -> SimulationState:
        """Return a fresh pool with every referrer at full capacity."""
        return SimulationState(
            active_referrers={
                f"referrer_{i}": float(self.referral_capacity)
                for i in range(self.initial_referrers)
            },
        )

    def simulate(self, probability: float, days: int) -> list[float]:
        """Project cumulative expected referrals day by day.

        Args:
            probability: Daily success probability per active referrer.
            days: Number of days to simulate (positive).

        Returns:
            A list of length *days*; element ``i`` is the cumulative expected
            number of referrals at the end of day ``i``.
        """
        if days <= 0:
            logger.warning("Invalid days for simulate: %r", days)
            raise InvalidParameterError("Days must be positive", days=days)
        _check_probability(probability, "simulate")

        results: list[float] = []
        state = self.initial_state()
        for _ in range(days):
            state = self._advance(state, probability)
            results.append(state.total_referrals)
        return results

    def days_to_target(self, probability: float, target: float) -> int | None:
        """Return the first day on which *target* expected referrals is reached.

        Returns 0 for a non-positive target and None when the target cannot
        be reached (zero probability, above :attr:`max_referrals`, or the pool
        is exhausted first).
        """
        _check_probability(probability, "days_to_target")

        if target <= 0:
            return 0
        if probability <= 0 or target > self.max_referrals:
            return None

        state = self.initial_state()
        while state.active_referrers:
            state = self._advance(state, probability)
            # Float drift must not hide a target equal to the pool maximum.
            if state.total_referrals >= target or math.isclose(state.total_referrals, target):
                return state.day
        return None

    def _advance(self, state: SimulationState, probability: float) -> SimulationState:
        """Deduct one day of expected referrals from every active referrer."""
        remaining: dict[str, float] = {}
        made = 0.0
        for referrer_id, capacity in state.active_referrers.items():
            spent = min(probability, capacity)
            made += spent
            left = capacity - spent
            if left > self.capacity_epsilon:
                remaining[referrer_id] = left
        return SimulationState(
            active_referrers=remaining,
            total_referrals=state.total_referrals + made,
            day=state.day + 1,
        )
