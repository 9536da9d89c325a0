"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from archmap.services.result import ServiceError, ServiceResult


def now_iso() -> str:
    """Current UTC time as ISO 8601 (``updated_at``, ``created_at``)."""
    return datetime.now(UTC).isoformat()


def fail(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    """Shorthand for an ``ok=False`` result."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=detail),
    )


def not_found(op: str, kind: str, ident: str | int) -> ServiceResult:
    """``NOT_FOUND`` result for a missing node, layer, edge, or key.

    Examples:
        >>> not_found("get_version", "Node", "api").error.message
        "Node 'api' not found"
    """
    return fail(op, "NOT_FOUND", f"{kind} '{ident}' not found", id=ident)


def snippet(text: str, query: str, *, radius: int = 50) -> str:
    """Excerpt of *text* around the first case-insensitive match of *query*.

    Up to *radius* characters either side, with ``...`` where text was cut.
    Without a match, the first ``2 * radius`` characters.

    Examples:
        >>> snippet("Feature: login", "nope")
        'Feature: login'
        >>> snippet("a" * 60 + "needle", "needle")
        '...aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaneedle'
    """
    pos = text.lower().find(query.lower())
    if pos < 0:
        return text[: radius * 2].strip()
    start = max(0, pos - radius)
    end = min(len(text), pos + len(query) + radius)
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return f"{prefix}{text[start:end].strip()}{suffix}"
