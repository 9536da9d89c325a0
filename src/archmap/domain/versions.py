"""Version entity and phase-progress derivation.

Each node carries one version record per tag (``overview``, ``mvp``,
``v1``, ``v2`` by default; any string is accepted). Phase tags map to a
major version number, so a node's ``current_version`` determines how far
each phase has come:

- major above the phase → phase superseded (100)
- major below the phase → phase not reached (0)
- same major → ``minor * 10 + patch``, capped at 100

Derivation is pure; it never reads or writes storage.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from archmap.domain.ids import parse_semver
from archmap.domain.types import VersionStatus

STANDARD_TAGS: tuple[str, ...] = ("overview", "mvp", "v1", "v2")

PHASE_MAJORS: dict[str, int] = {
    "mvp": 0,
    "v1": 1,
    "v2": 2,
}


class Version(BaseModel):
    """Immutable version record for one node and one tag."""

    model_config = {"frozen": True}

    id: int | None = None
    node_id: str
    version: str
    content: str | None = None
    progress: int = Field(default=0, ge=0, le=100)
    status: VersionStatus = VersionStatus.PLANNED
    updated_at: str | None = None

    def is_complete(self) -> bool:
        return self.status == VersionStatus.COMPLETE

    def is_in_progress(self) -> bool:
        return self.status == VersionStatus.IN_PROGRESS

    def summary(self) -> dict[str, Any]:
        """Per-tag summary used in the architecture payload."""
        return {
            "content": self.content,
            "progress": self.progress,
            "status": str(self.status),
            "updated_at": self.updated_at,
        }

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def is_phase_tag(tag: str) -> bool:
    """Whether *tag* participates in progress derivation."""
    return tag in PHASE_MAJORS


def derive_progress(current_version: str | None, tag: str) -> int:
    """Map a semantic version to completion of the phase named by *tag*.

    Unrecognised tags, a missing version, or an unparsable version all
    yield 0.

    Examples:
        >>> derive_progress("0.7.5", "mvp")
        75
        >>> derive_progress("2.0.0", "v1")
        100
        >>> derive_progress("1.5.0", "v2")
        0
    """
    phase_major = PHASE_MAJORS.get(tag)
    if phase_major is None or not current_version:
        return 0

    parsed = parse_semver(current_version)
    if parsed is None:
        return 0
    major, minor, patch = parsed

    if major > phase_major:
        return 100
    if major < phase_major:
        return 0
    return min(minor * 10 + patch, 100)


def derive_status(progress: int) -> VersionStatus:
    """Status implied by a progress percentage."""
    if progress <= 0:
        return VersionStatus.PLANNED
    if progress >= 100:
        return VersionStatus.COMPLETE
    return VersionStatus.IN_PROGRESS


def derived_copy(version: Version, current_version: str) -> Version:
    """Return *version* with progress/status recomputed from *current_version*.

    Non-phase tags are returned unchanged.
    """
    if not is_phase_tag(version.version):
        return version
    progress = derive_progress(current_version, version.version)
    return version.model_copy(update={"progress": progress, "status": derive_status(progress)})
