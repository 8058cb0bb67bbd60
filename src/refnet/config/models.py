"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, refnet.toml only contains overrides.
Defaults for the growth models come from the domain modules so the CLI
and the library agree without a second source of truth.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from refnet.domain.bonus import (
    DEFAULT_BONUS_INCREMENT,
    DEFAULT_INITIAL_BONUS,
    DEFAULT_MAX_BINARY_ITERATIONS,
    DEFAULT_MAX_EXPANSIONS,
    DEFAULT_SATURATION_THRESHOLD,
)
from refnet.domain.growth import DEFAULT_CAPACITY_EPSILON, DEFAULT_INITIAL_REFERRERS
from refnet.domain.types import DEFAULT_REFERRAL_CAPACITY


class NetworkConfig(BaseModel):
    """[network] section."""

    model_config = {"frozen": True}

    path: str | None = None
    delimiter: str = Field(default=",", min_length=1, max_length=1)


class AnalysisConfig(BaseModel):
    """[analysis] section."""

    model_config = {"frozen": True}

    default_top: int = Field(default=10, gt=0)


class SimulationConfig(BaseModel):
    """[simulation] section."""

    model_config = {"frozen": True}

    initial_referrers: int = Field(default=DEFAULT_INITIAL_REFERRERS, gt=0)
    referral_capacity: int = Field(default=DEFAULT_REFERRAL_CAPACITY, gt=0)
    capacity_epsilon: float = Field(default=DEFAULT_CAPACITY_EPSILON, ge=0)


class OptimizerConfig(BaseModel):
    """[optimizer] section."""

    model_config = {"frozen": True}

    bonus_increment: int = Field(default=DEFAULT_BONUS_INCREMENT, gt=0)
    initial_bonus: int = Field(default=DEFAULT_INITIAL_BONUS, gt=0)
    max_expansions: int = Field(default=DEFAULT_MAX_EXPANSIONS, gt=0)
    max_binary_iterations: int = Field(default=DEFAULT_MAX_BINARY_ITERATIONS, gt=0)
    saturation_threshold: float = DEFAULT_SATURATION_THRESHOLD
    default_eps: float = Field(default=0.5, gt=0)
    # Bonus at which the CLI's linear adoption model reaches probability 1.
    saturation_bonus: float = Field(default=100.0, gt=0)


class RefnetConfig(BaseModel):
    """Top-level refnet.toml contents."""

    model_config = {"frozen": True}

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    optimizer: OptimizerConfig = Field(default_factory=OptimizerConfig)
