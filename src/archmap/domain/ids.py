"""ID and version-string patterns.

Node IDs are kebab-case slugs chosen by the author, never generated.
Version strings follow ``major.minor[.patch]``.

INVARIANT: Node IDs are permanent. Once created, an ID never changes.
"""

from __future__ import annotations

import re

MAX_ID_LENGTH = 64

KEBAB_CASE_RE = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")
SEMVER_RE = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?$")


def validate_node_id(node_id: str) -> str | None:
    """Return an error message if *node_id* is not a valid kebab-case ID."""
    if len(node_id) > MAX_ID_LENGTH:
        return f"Invalid id: must be {MAX_ID_LENGTH} characters or fewer"
    if not KEBAB_CASE_RE.match(node_id):
        return f'Invalid id format: must be kebab-case (got "{node_id}")'
    return None


def is_semver(value: str) -> bool:
    """Check whether *value* looks like ``major.minor[.patch]``."""
    return SEMVER_RE.match(value) is not None


def parse_semver(value: str) -> tuple[int, int, int] | None:
    """Split a version string into ``(major, minor, patch)``.

    Missing patch defaults to 0. Returns None for anything unparsable.

    Examples:
        >>> parse_semver("0.7.5")
        (0, 7, 5)
        >>> parse_semver("1.2")
        (1, 2, 0)
        >>> parse_semver("latest") is None
        True
    """
    match = SEMVER_RE.match(value.strip())
    if match is None:
        return None
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch or 0)


def leading_major(value: str) -> int | None:
    """Parse only the major component, tolerating trailing garbage.

    ``display_state`` accepts loose strings such as ``"2.0.0-rc1"`` where
    only the leading integer matters.
    """
    head = value.split(".", 1)[0]
    match = re.match(r"^\s*(\d+)", head)
    if match is None:
        return None
    return int(match.group(1))
