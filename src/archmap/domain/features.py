"""Feature entity and Gherkin parsing helpers.

A feature is a Gherkin ``.feature`` file attached to one node and one
version tag. The parsing helpers are pure functions: each call compiles
its own pattern and keeps no state between calls.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, field_validator

_STEP_PATTERN = r"^\s*(Given|When|Then|And|But)\s+"
_SCENARIO_PATTERN = r"^\s*Scenario(?:\s+Outline)?:"
_FEATURE_TITLE_PATTERN = r"^Feature:\s*(.+)$"
_VERSION_PREFIX_PATTERN = r"^(v\d+)-"


class Feature(BaseModel):
    """Immutable feature-file record."""

    model_config = {"frozen": True}

    id: int | None = None
    node_id: str
    version: str
    filename: str
    title: str
    content: str | None = None
    step_count: int = 0
    updated_at: str | None = None

    @field_validator("step_count", mode="before")
    @classmethod
    def _default_steps(cls, value: Any) -> Any:
        return 0 if value is None else value

    def summary(self) -> dict[str, Any]:
        return {"filename": self.filename, "title": self.title, "content": self.content}

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def version_from_filename(filename: str) -> str:
    """Derive the version tag from a ``vN-`` filename prefix.

    Examples:
        >>> version_from_filename("v2-enhanced.feature")
        'v2'
        >>> version_from_filename("basic-thing.feature")
        'mvp'
    """
    match = re.match(_VERSION_PREFIX_PATTERN, filename)
    return match.group(1) if match else "mvp"


def title_from_content(content: str, fallback_filename: str) -> str:
    """Text after the first ``Feature:`` line, or the filename stem."""
    match = re.search(_FEATURE_TITLE_PATTERN, content, re.MULTILINE)
    if match:
        return match.group(1).strip()
    return fallback_filename.replace(".feature", "")


def count_steps(content: str | None) -> int:
    """Count Given/When/Then/And/But step lines."""
    if not content:
        return 0
    return len(re.findall(_STEP_PATTERN, content, re.MULTILINE))


def count_scenarios(content: str | None) -> int:
    """Count ``Scenario:`` and ``Scenario Outline:`` lines."""
    if not content:
        return 0
    return len(re.findall(_SCENARIO_PATTERN, content, re.MULTILINE))


def count_by_keyword(content: str | None) -> dict[str, int]:
    """Count steps per primary keyword.

    ``And``/``But`` inherit the preceding primary keyword's category. An
    ``And``/``But`` before any primary keyword counts as ``given``.
    """
    counts = {"given": 0, "when": 0, "then": 0}
    if not content:
        return counts

    last_primary = "given"
    for keyword in re.findall(_STEP_PATTERN, content, re.MULTILINE):
        if keyword in ("Given", "When", "Then"):
            last_primary = keyword.lower()
        counts[last_primary] += 1
    return counts


def has_valid_gherkin(content: str | None) -> bool:
    """Whether *content* has a ``Feature: <title>`` line."""
    if not content:
        return False
    return re.search(r"^Feature:\s*\S", content, re.MULTILINE) is not None
