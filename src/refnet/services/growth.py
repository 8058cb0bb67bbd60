"""GrowthService — growth projections and bonus search as ServiceResults.

Builds a :class:`NetworkSimulator` and :class:`BonusOptimizer` from the
``[simulation]`` and ``[optimizer]`` settings. Neither reads the referral
graph.
"""

from __future__ import annotations

from refnet.domain.bonus import AdoptionProb, BonusOptimizer
from refnet.domain.errors import ReferralNetworkError
from refnet.domain.growth import NetworkSimulator
from refnet.services.base import BaseService
from refnet.services.result import ServiceResult
from refnet.services.telemetry import traced


def linear_adoption(saturation_bonus: float) -> AdoptionProb:
    """Adoption model rising linearly from 0 to 1 at *saturation_bonus*."""

    def adoption_prob(bonus: float) -> float:
        return min(1.0, max(0.0, bonus / saturation_bonus))

    return adoption_prob


class GrowthService(BaseService):
    """Handles growth simulation and incentive optimization."""

    def _simulator(self) -> NetworkSimulator:
        cfg = self._network.settings.simulation
        return NetworkSimulator(
            initial_referrers=cfg.initial_referrers,
            referral_capacity=cfg.referral_capacity,
            capacity_epsilon=cfg.capacity_epsilon,
        )

    def _optimizer(self) -> BonusOptimizer:
        cfg = self._network.settings.optimizer
        return BonusOptimizer(
            self._simulator(),
            bonus_increment=cfg.bonus_increment,
            initial_bonus=cfg.initial_bonus,
            max_expansions=cfg.max_expansions,
            max_binary_iterations=cfg.max_binary_iterations,
            saturation_threshold=cfg.saturation_threshold,
        )

    @traced
    def simulate(self, probability: float, days: int) -> ServiceResult:
        """Cumulative expected referrals for each of *days* days."""
        try:
            series = self._simulator().simulate(probability, days)
        except ReferralNetworkError as exc:
            return ServiceResult.failure("simulate", exc)

        return ServiceResult(
            ok=True,
            op="simulate",
            data={
                "probability": probability,
                "days": days,
                "total": round(series[-1], 4),
                "series": [round(value, 4) for value in series],
            },
        )

    @traced
    def days_to_target(self, probability: float, target: float) -> ServiceResult:
        """First day on which *target* expected referrals is reached."""
        try:
            day = self._simulator().days_to_target(probability, target)
        except ReferralNetworkError as exc:
            return ServiceResult.failure("days_to_target", exc)

        warnings = [] if day is not None else ["Target is unreachable"]
        return ServiceResult(
            ok=True,
            op="days_to_target",
            data={
                "probability": probability,
                "target": target,
                "days": day,
                "reachable": day is not None,
            },
            warnings=warnings,
        )

    @traced
    def min_bonus(
        self,
        days: int,
        target: int,
        *,
        adoption_prob: AdoptionProb | None = None,
        eps: float | None = None,
    ) -> ServiceResult:
        """Minimum bonus reaching *target* within *days*.

        Args:
            adoption_prob: Bonus -> probability model. Defaults to a linear
                model saturating at ``[optimizer] saturation_bonus``.
            eps: Bisection precision; defaults to ``[optimizer] default_eps``.
        """
        cfg = self._network.settings.optimizer
        if adoption_prob is None:
            adoption_prob = linear_adoption(cfg.saturation_bonus)
        if eps is None:
            eps = cfg.default_eps

        try:
            bonus = self._optimizer().min_bonus_for_target(days, target, adoption_prob, eps)
        except ReferralNetworkError as exc:
            return ServiceResult.failure("min_bonus", exc)

        warnings = [] if bonus is not None else ["No finite bonus reaches the target in time"]
        return ServiceResult(
            ok=True,
            op="min_bonus",
            data={
                "days": days,
                "target": target,
                "bonus": bonus,
                "reachable": bonus is not None,
            },
            warnings=warnings,
        )
