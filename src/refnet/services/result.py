"""ServiceResult and ServiceError: what every service method returns.

Services never raise for domain failures. A ``ReferralNetworkError`` becomes
a failed result whose ``error.code`` is the error's ``ReferralErrorCode``,
so the CLI (and any other caller) can branch on codes instead of messages.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from refnet.domain.errors import ReferralNetworkError

_JSON_SCALARS = (str, int, float, bool)


class ServiceError(BaseModel):
    """Machine-readable failure: code, human message, structured detail."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: ReferralNetworkError) -> ServiceError:
        """Copy code, message and detail; non-scalar detail values become their repr."""
        detail = {
            key: value if value is None or isinstance(value, _JSON_SCALARS) else repr(value)
            for key, value in exc.detail.items()
        }
        return cls(code=str(exc.code), message=str(exc), detail=detail)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: False exactly when ``error`` is set.
        op: Operation name, also the renderer key (``"top_reach"``).
        data: Operation payload; rankings use ``items`` of ``{"id", "score"}``.
        warnings: Non-fatal notes (unknown user, unreachable target).
        error: Failure description when ``ok`` is False.
        meta: Extras such as the ``telemetry`` span tree under ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, exc: ReferralNetworkError) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc))
