"""Tests for EdgeService."""

from __future__ import annotations

import pytest

from archmap.domain.repositories import Repositories
from archmap.services.edges import EdgeService
from tests.conftest import add_component, add_layer


@pytest.fixture
def wired(any_repos: Repositories) -> Repositories:
    add_layer(any_repos, "core")
    add_component(any_repos, "api")
    add_component(any_repos, "db")
    return any_repos


class TestCreateEdge:
    def test_creates_with_id(self, wired: Repositories) -> None:
        result = EdgeService(wired).create_edge("api", "db", "READS_FROM", label="queries")
        assert result.ok
        assert result.op == "create_edge"
        assert isinstance(result.data["id"], int)
        assert result.data["type"] == "READS_FROM"
        assert result.data["label"] == "queries"
        assert wired.edges.exists("api", "db", "READS_FROM")

    def test_same_pair_different_type(self, wired: Repositories) -> None:
        svc = EdgeService(wired)
        assert svc.create_edge("api", "db", "READS_FROM").ok
        assert svc.create_edge("api", "db", "WRITES_TO").ok

    def test_duplicate(self, wired: Repositories) -> None:
        svc = EdgeService(wired)
        svc.create_edge("api", "db", "DEPENDS_ON")
        result = svc.create_edge("api", "db", "DEPENDS_ON")
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"

    def test_self_reference(self, wired: Repositories) -> None:
        result = EdgeService(wired).create_edge("api", "api", "DEPENDS_ON")
        assert result.error is not None
        assert result.error.code == "SELF_REFERENCE"

    def test_unknown_type(self, wired: Repositories) -> None:
        result = EdgeService(wired).create_edge("api", "db", "LIKES")
        assert result.error is not None
        assert result.error.code == "INVALID_TYPE"
        assert "DEPENDS_ON" in result.error.detail["allowed"]

    @pytest.mark.parametrize(
        ("source", "target", "role"),
        [("ghost", "db", "source"), ("api", "ghost", "target")],
    )
    def test_missing_endpoint(
        self, wired: Repositories, source: str, target: str, role: str
    ) -> None:
        result = EdgeService(wired).create_edge(source, target, "DEPENDS_ON")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert f"Invalid {role}" in result.error.message


class TestDeleteEdge:
    def test_delete(self, wired: Repositories) -> None:
        svc = EdgeService(wired)
        edge_id = svc.create_edge("api", "db", "DEPENDS_ON").data["id"]
        result = svc.delete_edge(edge_id)
        assert result.ok
        assert result.data["source_id"] == "api"
        assert not wired.edges.exists("api", "db", "DEPENDS_ON")

    def test_missing(self, wired: Repositories) -> None:
        result = EdgeService(wired).delete_edge(9999)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
