"""Error hierarchy for referral network operations.

Every error carries a stable :class:`ReferralErrorCode` so the service
layer can translate it into a ``ServiceError`` without string matching.
Errors are raised synchronously by the call that detected them and are
never retried: each operation is a pure function of current state.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar


class ReferralErrorCode(StrEnum):
    """Stable machine-readable error codes."""

    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    SELF_REFERRAL = "SELF_REFERRAL"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    DUPLICATE_REFERRER = "DUPLICATE_REFERRER"
    CYCLE_DETECTED = "CYCLE_DETECTED"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    INVALID_PROBABILITY = "INVALID_PROBABILITY"
    INVALID_NETWORK_FILE = "INVALID_NETWORK_FILE"


class ReferralNetworkError(ValueError):
    """Base class for all referral network failures.

    Attributes:
        code: Stable error code for the failure kind.
        detail: Structured context (offending ids, parameter values).
    """

    code: ClassVar[ReferralErrorCode]
    default_message: ClassVar[str] = "Referral network error"

    def __init__(self, message: str | None = None, **detail: Any) -> None:
        super().__init__(message or self.default_message)
        self.detail: dict[str, Any] = detail


class InvalidIdentifierError(ReferralNetworkError):
    code = ReferralErrorCode.INVALID_IDENTIFIER
    default_message = "Invalid user ID format"


class SelfReferralError(ReferralNetworkError):
    code = ReferralErrorCode.SELF_REFERRAL
    default_message = "Users cannot refer themselves"


class UserNotFoundError(ReferralNetworkError):
    code = ReferralErrorCode.USER_NOT_FOUND
    default_message = "User does not exist"


class DuplicateReferrerError(ReferralNetworkError):
    code = ReferralErrorCode.DUPLICATE_REFERRER
    default_message = "Candidate already has a referrer"


class CycleDetectedError(ReferralNetworkError):
    code = ReferralErrorCode.CYCLE_DETECTED
    default_message = "Referral would create a cycle"


class InvalidParameterError(ReferralNetworkError):
    code = ReferralErrorCode.INVALID_PARAMETER
    default_message = "Invalid parameter value"


class InvalidProbabilityError(ReferralNetworkError):
    code = ReferralErrorCode.INVALID_PROBABILITY
    default_message = "Probability must be between 0 and 1"


class NetworkFileError(ReferralNetworkError):
    """A network file could not be loaded.

    When the failure comes from a graph rule (cycle, duplicate referrer),
    *code* is the code of the underlying error so callers see the real cause.
    """

    code = ReferralErrorCode.INVALID_NETWORK_FILE
    default_message = "Invalid network file"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ReferralErrorCode | None = None,
        **detail: Any,
    ) -> None:
        super().__init__(message, **detail)
        if code is not None:
            self.code = code  # type: ignore[misc]
