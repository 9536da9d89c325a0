"""Tests for GraphSnapshot: NetworkX views and traversals."""

from __future__ import annotations

from archmap.domain.edges import Edge
from archmap.domain.nodes import Node
from archmap.domain.types import EdgeType, NodeType
from archmap.infrastructure.graph.engine import GraphSnapshot


def _nodes(*ids: str, layer: str | None = None) -> list[Node]:
    return [Node(id=i, name=i.upper(), type=NodeType.COMPONENT, layer=layer) for i in ids]


def _dep(source: str, target: str, edge_id: int = 0) -> Edge:
    return Edge(id=edge_id or None, source_id=source, target_id=target, type=EdgeType.DEPENDS_ON)


def _snapshot(edges: list[Edge], *ids: str) -> GraphSnapshot:
    return GraphSnapshot(_nodes(*ids), edges)


class TestDerivedGraphs:
    def test_dependencies_only_depends_on(self) -> None:
        snap = _snapshot(
            [
                _dep("a", "b"),
                Edge(source_id="a", target_id="c", type=EdgeType.READS_FROM),
            ],
            "a",
            "b",
            "c",
        )
        assert list(snap.dependencies.edges()) == [("a", "b")]
        assert snap.undirected.number_of_edges() == 2

    def test_parallel_edges_kept_in_undirected(self) -> None:
        snap = _snapshot(
            [_dep("a", "b"), Edge(source_id="b", target_id="a", type=EdgeType.CONTROLS)],
            "a",
            "b",
        )
        assert snap.undirected.number_of_edges("a", "b") == 2

    def test_component_dependencies_excludes_layers(self) -> None:
        layer = Node(id="core", name="Core", type=NodeType.LAYER)
        snap = GraphSnapshot([layer, *_nodes("a", "b")], [_dep("a", "core"), _dep("a", "b")])
        g = snap.component_dependencies()
        assert list(g.nodes) == ["a", "b"]
        assert list(g.edges) == [("a", "b")]


class TestShortestPath:
    def test_follows_edges_backwards(self) -> None:
        snap = _snapshot([_dep("a", "b", 1), _dep("c", "b", 2)], "a", "b", "c")
        found = snap.shortest_path("a", "c")
        assert found is not None
        node_ids, edges = found
        assert node_ids == ["a", "b", "c"]
        assert [e.id for e in edges] == [1, 2]

    def test_first_edge_reported(self) -> None:
        snap = _snapshot(
            [
                Edge(id=1, source_id="a", target_id="b", type=EdgeType.READS_FROM),
                Edge(id=2, source_id="a", target_id="b", type=EdgeType.WRITES_TO),
            ],
            "a",
            "b",
        )
        found = snap.shortest_path("a", "b")
        assert found is not None
        assert found[1][0].id == 1

    def test_unreachable(self) -> None:
        snap = _snapshot([_dep("a", "b"), _dep("c", "d")], "a", "b", "c", "d")
        assert snap.shortest_path("a", "d") is None

    def test_unknown_endpoint(self) -> None:
        snap = _snapshot([_dep("a", "b")], "a", "b")
        assert snap.shortest_path("a", "zzz") is None


class TestWithinHops:
    def test_root_first(self) -> None:
        snap = _snapshot([_dep("a", "b"), _dep("b", "c")], "a", "b", "c")
        assert snap.within_hops("b", 1)[0] == "b"
        assert set(snap.within_hops("b", 1)) == {"a", "b", "c"}

    def test_bounded_by_hops(self) -> None:
        snap = _snapshot([_dep("a", "b"), _dep("b", "c")], "a", "b", "c")
        assert snap.within_hops("a", 1) == ["a", "b"]
        assert snap.within_hops("a", 2) == ["a", "b", "c"]

    def test_isolated_or_zero_hops(self) -> None:
        snap = _snapshot([_dep("a", "b")], "a", "b", "lone")
        assert snap.within_hops("lone", 3) == ["lone"]
        assert snap.within_hops("a", 0) == ["a"]

    def test_induced_edges(self) -> None:
        edges = [_dep("a", "b", 1), _dep("b", "c", 2), _dep("a", "c", 3), _dep("c", "d", 4)]
        snap = _snapshot(edges, "a", "b", "c", "d")
        assert [e.id for e in snap.induced_edges({"a", "b", "c"})] == [1, 2, 3]


class TestDependencyLookups:
    def test_depends_on_and_back(self) -> None:
        snap = _snapshot([_dep("a", "b"), _dep("a", "c"), _dep("d", "b")], "a", "b", "c", "d")
        assert snap.depends_on("a") == ["b", "c"]
        assert snap.depended_on_by("b") == ["a", "d"]
        assert snap.depends_on("zzz") == []
        assert snap.depended_on_by("zzz") == []


class TestTopologicalOrder:
    def test_dependencies_first(self) -> None:
        snap = _snapshot([_dep("app", "api"), _dep("api", "db")], "app", "api", "db")
        order, remaining = snap.topological_order()
        assert order == ["db", "api", "app"]
        assert remaining == []

    def test_predecessors_follow_edge_order(self) -> None:
        snap = _snapshot([_dep("y", "d"), _dep("x", "c"), _dep("y", "c")], "d", "c", "x", "y")
        assert list(snap.component_dependencies().predecessors("c")) == ["x", "y"]
        assert snap.topological_order() == (["d", "c", "x", "y"], [])

    def test_isolated_nodes_in_repository_order(self) -> None:
        snap = _snapshot([], "x", "y", "z")
        assert snap.topological_order() == (["x", "y", "z"], [])

    def test_cycle_leaves_remaining(self) -> None:
        snap = _snapshot(
            [_dep("a", "b"), _dep("b", "a"), _dep("c", "a")],
            "a",
            "b",
            "c",
            "free",
        )
        order, remaining = snap.topological_order()
        assert order == ["free"]
        assert remaining == ["a", "b", "c"]
