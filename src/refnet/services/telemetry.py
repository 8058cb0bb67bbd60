"""Telemetry for service calls: Span, @traced, trace_span, count.

Off by default; ``--verbose`` turns it on. While off, every helper costs a
single ContextVar lookup. While on, each ``@traced`` service method opens a
root span, ``trace_span`` opens children around the graph algorithms, and
``count`` tallies work on the innermost open span. The finished tree is
attached to ``ServiceResult.meta["telemetry"]`` and logged at DEBUG.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from refnet.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("refnet_telemetry_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("refnet_active_span", default=None)

_log = structlog.get_logger("refnet.telemetry")


@dataclass
class Span:
    """One timed region. ``counts`` are additive, ``annotations`` last-write-wins."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def finish(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def count(self, key: str, n: int = 1) -> None:
        self.counts[key] = self.counts.get(key, 0) + n

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.counts:
            data["counts"] = dict(self.counts)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@contextmanager
def trace_span(name: str, **annotations: Any) -> Iterator[Span | None]:
    """Open a child of the active span; yields None when there is nothing to attach to."""
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    span = Span(name=name, parent=parent, annotations=dict(annotations))
    parent.children.append(span)
    token = _active.set(span)
    try:
        yield span
    finally:
        span.finish()
        _active.reset(token)


def count(key: str, n: int = 1) -> None:
    """Add *n* to counter *key* on the active span, if any."""
    span = _active.get() if _enabled.get() else None
    if span is not None:
        span.count(key, n)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to the returned ServiceResult.

    A failed result marks the root span with its error code. Exceptions
    propagate unchanged after the span is closed and logged.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        token = _active.set(span)
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            span.annotate("exception", type(exc).__name__)
            _close(span, ok=False)
            raise
        finally:
            _active.reset(token)

        if not isinstance(result, ServiceResult):
            _close(span, ok=True)
            return result

        if result.error is not None:
            span.annotate("error", result.error.code)
        _close(span, ok=result.ok)
        meta = {**(result.meta or {}), "telemetry": span.to_dict()}
        return result.model_copy(update={"meta": meta})  # type: ignore[return-value]

    return wrapper


def _close(span: Span, *, ok: bool) -> None:
    span.finish()
    _log.debug(
        "span.complete",
        span_name=span.name,
        duration_ms=round(span.duration_ms, 2),
        ok=ok,
        children=len(span.children),
        **span.counts,
    )


def enable_telemetry() -> None:
    """Turn span collection on (AppContext does this for ``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def current_span() -> Span | None:
    """The innermost open span, or None when telemetry is off."""
    if not _enabled.get():
        return None
    return _active.get()
