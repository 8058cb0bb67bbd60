"""refnet — referral network graph analysis."""

from __future__ import annotations

from refnet.domain.bonus import BonusOptimizer
from refnet.domain.errors import (
    CycleDetectedError,
    DuplicateReferrerError,
    InvalidIdentifierError,
    InvalidParameterError,
    InvalidProbabilityError,
    NetworkFileError,
    ReferralErrorCode,
    ReferralNetworkError,
    SelfReferralError,
    UserNotFoundError,
)
from refnet.domain.growth import NetworkSimulator
from refnet.domain.types import RankedUser, UserNode
from refnet.infrastructure.graph.analyzer import NetworkAnalyzer
from refnet.infrastructure.graph.referral_graph import ReferralGraph

__version__ = "0.3.0"

__all__ = [
    "BonusOptimizer",
    "CycleDetectedError",
    "DuplicateReferrerError",
    "InvalidIdentifierError",
    "InvalidParameterError",
    "InvalidProbabilityError",
    "NetworkAnalyzer",
    "NetworkFileError",
    "NetworkSimulator",
    "RankedUser",
    "ReferralErrorCode",
    "ReferralGraph",
    "ReferralNetworkError",
    "SelfReferralError",
    "UserNode",
    "UserNotFoundError",
    "__version__",
]
