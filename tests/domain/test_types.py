"""Tests for domain type enums, parametrized."""

import pytest

from archmap.domain.types import (
    API_KEY_SCOPES,
    EDGE_TYPES,
    NODE_TYPES,
    VERSION_STATUSES,
    ApiKeyScope,
    EdgeType,
    NodeType,
    VersionStatus,
)

ENUM_CASES = [
    (
        NodeType,
        {"layer", "component", "store", "external", "phase", "app", "mcp"},
    ),
    (
        VersionStatus,
        {"planned", "in-progress", "complete"},
    ),
    (
        ApiKeyScope,
        {"read", "write", "admin"},
    ),
]


@pytest.mark.parametrize(
    "enum_cls,expected_values",
    ENUM_CASES,
    ids=[cls.__name__ for cls, _ in ENUM_CASES],
)
def test_enum_members_and_values(enum_cls: type, expected_values: set[str]) -> None:
    """Each StrEnum has the expected members with matching string values."""
    actual_values = {e.value for e in enum_cls}
    assert actual_values == expected_values
    for member in enum_cls:
        assert member == member.value
        assert isinstance(member, str)


def test_edge_types_are_upper_snake() -> None:
    assert len(EdgeType) == 11
    assert all(t == t.upper() for t in EDGE_TYPES)
    assert "CONTAINS" in EDGE_TYPES


def test_value_tuples_follow_declaration_order() -> None:
    assert NODE_TYPES[0] == "layer"
    assert EDGE_TYPES[:3] == ("CONTAINS", "CONTROLS", "DEPENDS_ON")
    assert VERSION_STATUSES == ("planned", "in-progress", "complete")
    assert API_KEY_SCOPES == ("read", "write", "admin")
