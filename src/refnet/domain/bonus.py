"""BonusOptimizer — minimal referral bonus that hits a hiring target in time.

Treats the adoption curve (bonus -> daily success probability) as an
expensive, monotone non-decreasing black box and the growth simulator as
the feasibility oracle. Search is exponential (to bracket a feasible bonus)
followed by bisection, then rounded up to the bonus increment.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from refnet.domain.errors import InvalidParameterError
from refnet.domain.growth import NetworkSimulator

logger = logging.getLogger(__name__)

type AdoptionProb = Callable[[float], float]

DEFAULT_BONUS_INCREMENT = 10
DEFAULT_INITIAL_BONUS = 10
DEFAULT_MAX_EXPANSIONS = 32
DEFAULT_MAX_BINARY_ITERATIONS = 1024
DEFAULT_SATURATION_THRESHOLD = 0.999999


def _positive_finite(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def clamp_probability(value: float) -> float:
    """Clamp *value* into [0, 1]; non-finite values become 0."""
    if not math.isfinite(value):
        return 0.0
    return min(1.0, max(0.0, value))


class BonusOptimizer:
    """Find the smallest bonus that reaches a target within a day budget."""

    def __init__(
        self,
        simulator: NetworkSimulator | None = None,
        *,
        bonus_increment: int = DEFAULT_BONUS_INCREMENT,
        initial_bonus: int = DEFAULT_INITIAL_BONUS,
        max_expansions: int = DEFAULT_MAX_EXPANSIONS,
        max_binary_iterations: int = DEFAULT_MAX_BINARY_ITERATIONS,
        saturation_threshold: float = DEFAULT_SATURATION_THRESHOLD,
    ) -> None:
        self.simulator = simulator or NetworkSimulator()
        self.bonus_increment = bonus_increment
        self.initial_bonus = initial_bonus
        self.max_expansions = max_expansions
        self.max_binary_iterations = max_binary_iterations
        self.saturation_threshold = saturation_threshold

    def min_bonus_for_target(
        self,
        days: int,
        target_hires: int,
        adoption_prob: AdoptionProb,
        eps: float,
    ) -> int | None:
        """Return the minimum bonus, rounded up to the increment, or None.

        Args:
            days: Day budget for reaching the target.
            target_hires: Expected referrals required.
            adoption_prob: Maps a bonus amount to a daily success
                probability. Assumed monotone non-decreasing.
            eps: Bisection stops once the bracket is no wider than this.

        Returns:
            The bonus, or None when no finite bonus reaches the target
            within *days*.
        """
        for name, value in (("days", days), ("target_hires", target_hires), ("eps", eps)):
            if not _positive_finite(value):
                logger.warning("Invalid %s in min_bonus_for_target: %r", name, value)
                raise InvalidParameterError(f"{name} must be a positive number", **{name: value})
        if not callable(adoption_prob):
            logger.warning("Invalid adoption_prob in min_bonus_for_target: not callable")
            raise InvalidParameterError("adoption_prob must be callable")

        max_possible = self.simulator.max_referrals
        if target_hires > max_possible:
            logger.info(
                "Target exceeds max possible referrals: target=%s max=%s",
                target_hires,
                max_possible,
            )
            return None

        best_case = self.simulator.days_to_target(1.0, target_hires)
        if best_case is None or best_case > days:
            logger.info(
                "Target unreachable within %s days even at p=1 (needs %s)", days, best_case
            )
            return None

        def feasible(bonus: float) -> bool:
            p = clamp_probability(adoption_prob(bonus))
            needed = self.simulator.days_to_target(p, target_hires)
            return needed is not None and needed <= days

        if feasible(0):
            return 0

        low: float = 0
        high: float = self.initial_bonus
        for _ in range(self.max_expansions):
            if feasible(high):
                break
            if clamp_probability(adoption_prob(high)) >= self.saturation_threshold:
                logger.info("Adoption probability saturated at bonus=%s without feasibility", high)
                return None
            low, high = high, high * 2
        else:
            logger.info("No feasible upper bound after %s expansions", self.max_expansions)
            return None

        for _ in range(self.max_binary_iterations):
            if high - low <= eps:
                break
            mid = (low + high) / 2
            if feasible(mid):
                high = mid
            else:
                low = mid

        rounded = self._round_up(high)
        if feasible(rounded):
            return rounded

        # Only reachable when adoption_prob is not actually monotone.
        fallback = self._round_up(rounded + self.bonus_increment)
        if feasible(fallback):
            return fallback
        logger.info("Rounded bonus %s and fallback %s both infeasible", rounded, fallback)
        return None

    def _round_up(self, bonus: float) -> int:
        if bonus <= 0:
            return 0
        step = self.bonus_increment
        return int(math.ceil(bonus / step) * step)
