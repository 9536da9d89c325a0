"""GraphService: read-only traversals over the architecture graph.

Each call loads one :class:`GraphSnapshot` (every node and edge) and
computes in memory. Unknown ids degrade to empty results; callers that
name a single node can pass ``strict=True`` to get ``NOT_FOUND`` instead.

Tie-breaking follows repository order throughout: edges in ``find_all``
order for BFS, nodes in ``find_all`` order for Kahn's seed queue.
"""

from __future__ import annotations

import logging
from typing import Any

from archmap.infrastructure.graph.engine import GraphSnapshot
from archmap.services._helpers import not_found
from archmap.services.base import BaseService
from archmap.services.contracts import (
    DependencyTreeData,
    DependentsData,
    ImplementationOrderData,
    NeighbourhoodData,
    NextImplementableData,
    ShortestPathData,
    dump_validated,
)
from archmap.services.result import ServiceResult
from archmap.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class GraphService(BaseService):
    """Shortest path, dependency tree, neighbourhood, ordering, frontier."""

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _load(self) -> GraphSnapshot:
        with trace_span("load_snapshot") as span:
            snapshot = self._snapshot()
            if span:
                span.annotate(nodes=len(snapshot.nodes), edges=len(snapshot.edges))
        return snapshot

    @staticmethod
    def _node_ref(snapshot: GraphSnapshot, node_id: str) -> dict[str, str]:
        """``{id, name, type}``; a placeholder when the node is missing."""
        node = snapshot.node(node_id)
        if node is None:
            return {"id": node_id, "name": node_id, "type": "unknown"}
        return node.summary()

    # ------------------------------------------------------------------
    # shortest_path: undirected BFS
    # ------------------------------------------------------------------

    @traced
    def shortest_path(self, from_id: str, to_id: str) -> ServiceResult:
        """Fewest-hop path between two nodes, ignoring edge direction.

        ``from_id == to_id`` yields the single node (if it exists). No
        path, or an unknown endpoint, yields empty ``path`` and ``edges``.
        """
        snapshot = self._load()
        path: list[dict[str, str]] = []
        edges: list[dict[str, str]] = []

        if from_id == to_id:
            node = snapshot.node(from_id)
            if node is not None:
                path = [node.summary()]
        else:
            found = snapshot.shortest_path(from_id, to_id)
            if found is not None:
                node_ids, traversed = found
                path = [self._node_ref(snapshot, n) for n in node_ids]
                edges = [e.summary() for e in traversed]

        logger.debug("shortest_path %s -> %s: %d hops", from_id, to_id, len(edges))
        data = {"from_id": from_id, "to_id": to_id, "path": path, "edges": edges}
        return ServiceResult(
            ok=True,
            op="shortest_path",
            data=dump_validated(ShortestPathData, data),
        )

    # ------------------------------------------------------------------
    # dependency_tree: depth-bounded DFS over DEPENDS_ON
    # ------------------------------------------------------------------

    @traced
    def dependency_tree(
        self,
        node_id: str,
        max_depth: int = 1,
        *,
        strict: bool = False,
    ) -> ServiceResult:
        """Tree of DEPENDS_ON targets reachable from *node_id*.

        One ``visited`` set spans the whole traversal, so a node reachable
        along two paths is listed once, under whichever parent reaches it
        first. Items carry ``dependencies`` only while their depth is
        below *max_depth*. A *max_depth* below 1 allows no hops and yields
        an empty tree; the CLI bounds ``--depth`` to 1-10.
        """
        op = "dependency_tree"
        snapshot = self._load()
        if strict and snapshot.node(node_id) is None:
            return not_found(op, "Node", node_id)

        visited: set[str] = set()

        def traverse(current: str, depth: int) -> list[dict[str, Any]]:
            visited.add(current)
            items: list[dict[str, Any]] = []
            for target_id in snapshot.depends_on(current):
                if target_id in visited:
                    continue
                target = snapshot.node(target_id)
                if target is None:
                    continue
                item: dict[str, Any] = target.summary()
                if depth < max_depth:
                    item["dependencies"] = traverse(target_id, depth + 1)
                items.append(item)
            return items

        items = traverse(node_id, 1) if max_depth >= 1 else []
        data = {"node_id": node_id, "max_depth": max_depth, "count": len(items), "items": items}
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(DependencyTreeData, data, exclude_none=True),
        )

    # ------------------------------------------------------------------
    # neighbourhood: N-hop induced subgraph
    # ------------------------------------------------------------------

    @traced
    def neighbourhood(self, node_id: str, hops: int = 1, *, strict: bool = False) -> ServiceResult:
        """Nodes within *hops* undirected steps and every edge among them.

        The edge list is the induced subgraph, so edges between two
        frontier nodes are included. Ids missing from the node table are
        dropped from ``nodes``.
        """
        op = "neighbourhood"
        snapshot = self._load()
        if strict and snapshot.node(node_id) is None:
            return not_found(op, "Node", node_id)

        visited = snapshot.within_hops(node_id, hops)
        nodes = [snapshot.nodes[n].summary() for n in visited if n in snapshot.nodes]
        edges = [e.summary() for e in snapshot.induced_edges(visited)]

        data = {"node_id": node_id, "hops": hops, "nodes": nodes, "edges": edges}
        return ServiceResult(ok=True, op=op, data=dump_validated(NeighbourhoodData, data))

    # ------------------------------------------------------------------
    # implementation_order: Kahn's algorithm
    # ------------------------------------------------------------------

    @traced
    def implementation_order(self) -> ServiceResult:
        """Topological order of non-layer nodes, dependencies first.

        A cycle is reported as data: ``{"cycle": [...]}`` lists every node
        Kahn's algorithm could not place, which can include nodes that
        merely depend on the cycle.
        """
        snapshot = self._load()
        order, remaining = snapshot.topological_order()

        warnings: list[str] = []
        if remaining:
            data: dict[str, Any] = {"cycle": remaining}
            warnings.append(f"Dependency cycle: {len(remaining)} node(s) could not be ordered")
        else:
            data = {"order": order}

        return ServiceResult(
            ok=True,
            op="implementation_order",
            data=dump_validated(ImplementationOrderData, data, exclude_none=True),
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # dependents / next_implementable
    # ------------------------------------------------------------------

    @traced
    def dependents(self, node_id: str, *, strict: bool = False) -> ServiceResult:
        """Nodes with a DEPENDS_ON edge into *node_id*."""
        op = "dependents"
        snapshot = self._load()
        if strict and snapshot.node(node_id) is None:
            return not_found(op, "Node", node_id)

        items = [
            snapshot.nodes[source].summary()
            for source in snapshot.depended_on_by(node_id)
            if source in snapshot.nodes
        ]
        data = {"node_id": node_id, "count": len(items), "items": items}
        return ServiceResult(ok=True, op=op, data=dump_validated(DependentsData, data))

    @traced
    def next_implementable(self, version: str) -> ServiceResult:
        """Non-layer nodes below 100% for *version* whose dependencies are all at 100%.

        Progress comes from stored version records, read once into a map;
        a node without a record for *version* counts as 0.
        """
        snapshot = self._load()
        components = [n for n in snapshot.nodes.values() if not n.is_layer()]
        component_ids = {n.id for n in components}

        with trace_span("progress_map") as span:
            progress = dict.fromkeys(component_ids, 0)
            for record in self._repos.versions.find_all():
                if record.version == version and record.node_id in component_ids:
                    progress[record.node_id] = record.progress

            steps: dict[str, int] = {}
            for feature in self._repos.features.find_all():
                if feature.version == version:
                    steps[feature.node_id] = steps.get(feature.node_id, 0) + feature.step_count
            if span:
                span.annotate(components=len(component_ids), with_steps=len(steps))

        items: list[dict[str, Any]] = []
        for node in components:
            own = progress[node.id]
            if own >= 100:
                continue
            deps = [t for t in snapshot.depends_on(node.id) if t in component_ids]
            if all(progress[t] >= 100 for t in deps):
                items.append(
                    {
                        **node.summary(),
                        "progress": own,
                        "total_steps": steps.get(node.id, 0),
                    }
                )

        data = {"version": version, "count": len(items), "items": items}
        return ServiceResult(
            ok=True,
            op="next_implementable",
            data=dump_validated(NextImplementableData, data),
        )
