"""ComponentService: create, patch, move, and delete nodes and layers.

A component always lives in exactly one layer, expressed twice: the
node's ``layer`` field and a ``CONTAINS`` edge from the layer. Both are
kept in step here.
"""

from __future__ import annotations

import logging
from typing import Any

from archmap.domain.edges import Edge
from archmap.domain.ids import is_semver, validate_node_id
from archmap.domain.nodes import Node
from archmap.domain.types import NODE_TYPES, EdgeType, NodeType
from archmap.domain.versions import STANDARD_TAGS, Version, derived_copy
from archmap.services._helpers import fail, not_found, now_iso
from archmap.services.base import BaseService
from archmap.services.result import ServiceResult
from archmap.services.telemetry import traced

logger = logging.getLogger(__name__)


def _check_new_node(op: str, node_id: str, name: str) -> ServiceResult | None:
    """Id and name checks shared by components and layers."""
    if not name or not name.strip():
        return fail(op, "INVALID_NAME", "Invalid name: name must not be empty")
    problem = validate_node_id(node_id)
    if problem is not None:
        return fail(op, "INVALID_ID", problem, id=node_id)
    return None


def _check_version(op: str, current_version: str | None) -> ServiceResult | None:
    if current_version is not None and not is_semver(current_version):
        return fail(
            op,
            "INVALID_VERSION",
            f"Invalid version format: {current_version}",
            current_version=current_version,
        )
    return None


class ComponentService(BaseService):
    """Write-side use cases for component and layer nodes."""

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @traced
    def create_component(
        self,
        node_id: str,
        name: str,
        node_type: str,
        layer: str,
        *,
        description: str | None = None,
        tags: list[str] | None = None,
        color: str | None = None,
        icon: str | None = None,
        sort_order: int = 0,
        current_version: str | None = None,
    ) -> ServiceResult:
        """Create a node in *layer* with its containment edge and default versions.

        Default versions are the standard tags. Phase tags start at the
        progress implied by *current_version*, or 0 without one.
        """
        op = "create_component"
        invalid = _check_new_node(op, node_id, name) or _check_version(op, current_version)
        if invalid is not None:
            return invalid
        if node_type not in NODE_TYPES or node_type == NodeType.LAYER:
            allowed = ", ".join(t for t in NODE_TYPES if t != NodeType.LAYER)
            return fail(op, "INVALID_TYPE", f"Invalid node type: {node_type} (use {allowed})")

        parent = self._repos.nodes.find_by_id(layer)
        if parent is None or not parent.is_layer():
            return fail(op, "INVALID_LAYER", f"Invalid layer: {layer} is not a valid layer")
        if self._repos.nodes.exists(node_id):
            return fail(op, "ALREADY_EXISTS", f"Node already exists: {node_id}", id=node_id)

        node = Node(
            id=node_id,
            name=name.strip(),
            type=NodeType(node_type),
            layer=layer,
            color=color,
            icon=icon,
            description=description,
            tags=tags or [],
            sort_order=sort_order,
            current_version=current_version,
        )
        self._repos.nodes.save(node)
        self._repos.edges.save(Edge(source_id=layer, target_id=node_id, type=EdgeType.CONTAINS))

        stamp = now_iso()
        for tag in STANDARD_TAGS:
            record = Version(node_id=node_id, version=tag, updated_at=stamp)
            if current_version:
                record = derived_copy(record, current_version)
            self._repos.versions.save(record)

        logger.info("Created component %s in layer %s", node_id, layer)
        return ServiceResult(
            ok=True,
            op=op,
            data={**node.to_dict(), "versions": list(STANDARD_TAGS)},
        )

    @traced
    def update_component(
        self,
        node_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        tags: list[str] | None = None,
        sort_order: int | None = None,
        current_version: str | None = None,
    ) -> ServiceResult:
        """Merge-patch a node: only supplied fields change.

        Supplying *current_version* recomputes every phase-tag version of
        the node, even when the value is unchanged.
        """
        op = "update_component"
        existing = self._repos.nodes.find_by_id(node_id)
        if existing is None:
            return not_found(op, "Node", node_id)
        invalid = _check_version(op, current_version)
        if invalid is not None:
            return invalid
        if name is not None and not name.strip():
            return fail(op, "INVALID_NAME", "Invalid name: name must not be empty")

        patch: dict[str, Any] = {
            "name": name.strip() if name is not None else None,
            "description": description,
            "tags": tags,
            "sort_order": sort_order,
            "current_version": current_version,
        }
        changed = {k: v for k, v in patch.items() if v is not None}
        merged = existing.model_copy(update=changed)
        self._repos.nodes.save(merged)

        recalculated: list[str] = []
        if current_version is not None:
            for record in self._repos.versions.find_by_node(node_id):
                updated = derived_copy(record, current_version)
                if updated is not record:
                    self._repos.versions.save(updated)
                    recalculated.append(record.version)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                **merged.to_dict(),
                "fields_changed": sorted(changed),
                "recalculated_versions": recalculated,
            },
        )

    @traced
    def move_component(self, node_id: str, layer_id: str) -> ServiceResult:
        """Re-parent a node, replacing its CONTAINS edge."""
        op = "move_component"
        component = self._repos.nodes.find_by_id(node_id)
        if component is None:
            return not_found(op, "Node", node_id)
        target = self._repos.nodes.find_by_id(layer_id)
        if target is None or not target.is_layer():
            return fail(op, "INVALID_LAYER", f"Invalid layer: {layer_id} is not a valid layer")

        if component.layer == layer_id:
            return ServiceResult(
                ok=True,
                op=op,
                data={**component.to_dict(), "moved": False, "from_layer": layer_id},
            )

        for edge in self._repos.edges.find_by_target(node_id):
            if edge.is_containment() and edge.id is not None:
                self._repos.edges.delete(edge.id)
                break
        self._repos.edges.save(Edge(source_id=layer_id, target_id=node_id, type=EdgeType.CONTAINS))

        moved = component.model_copy(update={"layer": layer_id})
        self._repos.nodes.save(moved)
        logger.info("Moved %s from %s to %s", node_id, component.layer, layer_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={**moved.to_dict(), "moved": True, "from_layer": component.layer},
        )

    @traced
    def delete_component(self, node_id: str) -> ServiceResult:
        """Delete a node with its versions, features, and incident edges."""
        op = "delete_component"
        node = self._repos.nodes.find_by_id(node_id)
        if node is None:
            return not_found(op, "Node", node_id)

        version_count = len(self._repos.versions.find_by_node(node_id))
        feature_count = len(self._repos.features.find_by_node(node_id))
        self._repos.versions.delete_by_node(node_id)
        self._repos.features.delete_by_node(node_id)

        incident: dict[int, Edge] = {}
        for edge in [
            *self._repos.edges.find_by_source(node_id),
            *self._repos.edges.find_by_target(node_id),
        ]:
            if edge.id is not None:
                incident[edge.id] = edge
        for edge_id in incident:
            self._repos.edges.delete(edge_id)

        self._repos.nodes.delete(node_id)
        logger.info("Deleted component %s", node_id)

        warnings: list[str] = []
        if node.is_layer():
            orphans = self._repos.nodes.find_by_layer(node_id)
            if orphans:
                warnings.append(f"{len(orphans)} node(s) still reference deleted layer {node_id}")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": node_id,
                "deleted_versions": version_count,
                "deleted_features": feature_count,
                "deleted_edges": len(incident),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    @traced
    def create_layer(
        self,
        layer_id: str,
        name: str,
        *,
        color: str | None = None,
        icon: str | None = None,
        description: str | None = None,
        sort_order: int = 0,
    ) -> ServiceResult:
        op = "create_layer"
        invalid = _check_new_node(op, layer_id, name)
        if invalid is not None:
            return invalid
        if self._repos.nodes.exists(layer_id):
            return fail(op, "ALREADY_EXISTS", f"Node already exists: {layer_id}", id=layer_id)

        layer = Node(
            id=layer_id,
            name=name.strip(),
            type=NodeType.LAYER,
            color=color,
            icon=icon,
            description=description,
            sort_order=sort_order,
        )
        self._repos.nodes.save(layer)
        return ServiceResult(ok=True, op=op, data=layer.to_dict())

    @traced
    def list_layers(self) -> ServiceResult:
        """Layers ordered by ``sort_order`` then id, with child counts."""
        layers = sorted(self._repos.nodes.find_by_type("layer"), key=lambda n: (n.sort_order, n.id))
        items = [
            {**layer.to_dict(), "component_count": len(self._children(layer.id))}
            for layer in layers
        ]
        return ServiceResult(ok=True, op="list_layers", data={"count": len(items), "items": items})

    @traced
    def get_layer(self, layer_id: str) -> ServiceResult:
        op = "get_layer"
        layer = self._repos.nodes.find_by_id(layer_id)
        if layer is None or not layer.is_layer():
            return not_found(op, "Layer", layer_id)
        children = [c.to_dict() for c in self._children(layer_id)]
        return ServiceResult(ok=True, op=op, data={**layer.to_dict(), "children": children})

    def _children(self, layer_id: str) -> list[Node]:
        return [n for n in self._repos.nodes.find_by_layer(layer_id) if not n.is_layer()]
