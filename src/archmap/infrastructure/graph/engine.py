"""GraphSnapshot: NetworkX views over one read of nodes and edges.

Built per query from ``find_all()`` results; nothing is cached across
calls. Two graphs are derived lazily:

- ``undirected``: a MultiGraph of every edge, used for shortest path and
  neighbourhood. NetworkX keeps adjacency in insertion order, so adding
  edges in ``find_all()`` order makes BFS tie-breaking follow edge order.
- ``dependencies``: a DiGraph of ``DEPENDS_ON`` edges.
"""

from __future__ import annotations

from collections import deque
from functools import cached_property
from typing import TYPE_CHECKING

import networkx as nx

from archmap.domain.types import EdgeType

if TYPE_CHECKING:
    from archmap.domain.edges import Edge
    from archmap.domain.nodes import Node
    from archmap.domain.repositories import Repositories


class GraphSnapshot:
    """In-memory graph over a fixed node and edge collection."""

    def __init__(self, nodes: list[Node], edges: list[Edge]) -> None:
        self._nodes: dict[str, Node] = {n.id: n for n in nodes}
        self._edges = edges

    @classmethod
    def load(cls, repos: Repositories) -> GraphSnapshot:
        """Read every node and edge once."""
        return cls(repos.nodes.find_all(), repos.edges.find_all())

    @property
    def nodes(self) -> dict[str, Node]:
        return self._nodes

    @property
    def edges(self) -> list[Edge]:
        return self._edges

    def node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    # ------------------------------------------------------------------
    # Derived graphs
    # ------------------------------------------------------------------

    @cached_property
    def undirected(self) -> nx.MultiGraph:
        g = nx.MultiGraph()
        for index, edge in enumerate(self._edges):
            g.add_edge(edge.source_id, edge.target_id, key=index, edge=edge)
        return g

    @cached_property
    def dependencies(self) -> nx.DiGraph:
        """``source -> target`` for every DEPENDS_ON edge."""
        g = nx.DiGraph()
        for edge in self._edges:
            if edge.type == EdgeType.DEPENDS_ON:
                g.add_edge(edge.source_id, edge.target_id)
        return g

    def component_dependencies(self) -> nx.DiGraph:
        """DEPENDS_ON graph restricted to non-layer nodes.

        Every non-layer node is present, isolated ones included, in
        repository order. Edges are added in edge order so predecessor
        lists match ``depended_on_by``.
        """
        g = nx.DiGraph()
        g.add_nodes_from(n.id for n in self._nodes.values() if not n.is_layer())
        for edge in self._edges:
            if edge.type != EdgeType.DEPENDS_ON:
                continue
            if edge.source_id in g and edge.target_id in g:
                g.add_edge(edge.source_id, edge.target_id)
        return g

    # ------------------------------------------------------------------
    # Traversals
    # ------------------------------------------------------------------

    def shortest_path(self, from_id: str, to_id: str) -> tuple[list[str], list[Edge]] | None:
        """Hop-count shortest path ignoring edge direction.

        Returns ``(node_ids, edges)`` or None when no path exists. The
        first edge discovered to a node is the one reported.
        """
        g = self.undirected
        if from_id not in g or to_id not in g:
            return None

        parents: dict[str, str] = {}
        for node, parent in nx.bfs_predecessors(g, from_id):
            parents[node] = parent
            if node == to_id:
                break
        if to_id not in parents:
            return None

        node_ids = [to_id]
        while node_ids[-1] != from_id:
            node_ids.append(parents[node_ids[-1]])
        node_ids.reverse()

        traversed: list[Edge] = []
        for u, v in zip(node_ids, node_ids[1:], strict=False):
            first_key = next(iter(g[u][v]))
            traversed.append(g[u][v][first_key]["edge"])
        return node_ids, traversed

    def within_hops(self, node_id: str, hops: int) -> list[str]:
        """Node ids reachable in at most *hops* undirected steps, root first."""
        visited = [node_id]
        if hops <= 0 or node_id not in self.undirected:
            return visited
        seen = nx.single_source_shortest_path_length(self.undirected, node_id, cutoff=hops)
        visited.extend(n for n in seen if n != node_id)
        return visited

    def induced_edges(self, node_ids: set[str] | list[str]) -> list[Edge]:
        """Edges with both endpoints in *node_ids*, in repository order."""
        members = set(node_ids)
        return [e for e in self._edges if e.source_id in members and e.target_id in members]

    def depends_on(self, node_id: str) -> list[str]:
        """DEPENDS_ON targets of *node_id*, in edge order."""
        if node_id not in self.dependencies:
            return []
        return list(self.dependencies.successors(node_id))

    def depended_on_by(self, node_id: str) -> list[str]:
        """DEPENDS_ON sources pointing at *node_id*, in edge order."""
        if node_id not in self.dependencies:
            return []
        return list(self.dependencies.predecessors(node_id))

    def topological_order(self) -> tuple[list[str], list[str]]:
        """Kahn's algorithm over :meth:`component_dependencies`.

        Returns ``(order, remaining)``. A node's in-degree is the number of
        things it depends on, so dependencies come first. ``remaining``
        holds every node that could not be ordered, in repository order.
        """
        g = self.component_dependencies()
        pending = {node: g.out_degree(node) for node in g}
        queue: deque[str] = deque(node for node, degree in pending.items() if degree == 0)

        order: list[str] = []
        while queue:
            current = queue.popleft()
            order.append(current)
            for dependent in g.predecessors(current):
                pending[dependent] -= 1
                if pending[dependent] == 0:
                    queue.append(dependent)

        placed = set(order)
        return order, [node for node in g if node not in placed]
