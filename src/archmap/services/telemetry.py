"""Verbose-mode tracing for service calls.

``archmap -v`` switches tracing on for the invocation. Each ``@traced``
service method then records a span tree: stages opened with
``trace_span`` become children, and a traced method called from inside
another one (``export_architecture`` -> ``get_architecture``) nests under
its caller. The outermost tree is attached to
``ServiceResult.meta["telemetry"]`` and every finished traced call is
logged through structlog at debug level.

When tracing is off, ``@traced`` and ``trace_span`` cost one ContextVar
read.
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

from archmap.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("archmap_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("archmap_active_span", default=None)

_log = structlog.get_logger("archmap.telemetry")


@dataclass(slots=True)
class Span:
    """A timed stage. Serialises to the dict the verbose renderer walks."""

    name: str
    annotations: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)
    started_ns: int = field(default_factory=time.perf_counter_ns)
    elapsed_ns: int | None = None

    @property
    def duration_ms(self) -> float:
        if self.elapsed_ns is None:
            return 0.0
        return self.elapsed_ns / 1_000_000

    def close(self) -> None:
        if self.elapsed_ns is None:
            self.elapsed_ns = time.perf_counter_ns() - self.started_ns

    def annotate(self, **values: Any) -> None:
        self.annotations.update(values)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    """Make *span* the parent of spans opened inside the block."""
    token = _active.set(span)
    try:
        yield span
    finally:
        span.close()
        _active.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Record a stage of the traced call in progress.

    Yields None outside a traced call or with tracing off, so callers
    guard annotations with ``if span:``.
    """
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    span = Span(name)
    parent.children.append(span)
    with _activate(span):
        yield span


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Trace a service method; the outermost call carries the tree in ``meta``."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        caller = _active.get()
        span = Span(func.__qualname__)
        if caller is not None:
            caller.children.append(span)

        ok = False
        try:
            with _activate(span):
                result = func(*args, **kwargs)
            ok = result.ok if isinstance(result, ServiceResult) else True
        finally:
            _log.debug(
                "span.complete",
                span_name=span.name,
                duration_ms=round(span.duration_ms, 2),
                ok=ok,
                nested=caller is not None,
            )

        if caller is None and isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn tracing on for the current context."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
    _active.set(None)
