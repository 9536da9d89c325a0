"""EdgeService: add and remove typed relationships."""

from __future__ import annotations

import logging

from archmap.domain.edges import Edge
from archmap.domain.types import EDGE_TYPES, EdgeType
from archmap.services._helpers import fail, not_found
from archmap.services.base import BaseService
from archmap.services.result import ServiceResult
from archmap.services.telemetry import traced

logger = logging.getLogger(__name__)


class EdgeService(BaseService):
    """Create and delete edges between existing nodes."""

    @traced
    def create_edge(
        self,
        source_id: str,
        target_id: str,
        edge_type: str,
        *,
        label: str | None = None,
        metadata: str | None = None,
    ) -> ServiceResult:
        """Persist a new edge after type, self-loop, endpoint, and duplicate checks."""
        op = "create_edge"
        if edge_type not in EDGE_TYPES:
            return fail(
                op,
                "INVALID_TYPE",
                f"Invalid edge type: {edge_type}",
                allowed=list(EDGE_TYPES),
            )
        if source_id == target_id:
            return fail(op, "SELF_REFERENCE", "Self-referencing edges are not allowed")
        for role, node_id in (("source", source_id), ("target", target_id)):
            if not self._repos.nodes.exists(node_id):
                return fail(
                    op,
                    "NOT_FOUND",
                    f'Invalid {role}: node "{node_id}" does not exist',
                    id=node_id,
                )
        if self._repos.edges.exists(source_id, target_id, edge_type):
            return fail(
                op,
                "ALREADY_EXISTS",
                f"Edge already exists: {source_id} -> {target_id} ({edge_type})",
            )

        saved = self._repos.edges.save(
            Edge(
                source_id=source_id,
                target_id=target_id,
                type=EdgeType(edge_type),
                label=label,
                metadata=metadata,
            )
        )
        logger.info("Created edge %s -[%s]-> %s", source_id, edge_type, target_id)
        return ServiceResult(ok=True, op=op, data=saved.to_dict())

    @traced
    def delete_edge(self, edge_id: int) -> ServiceResult:
        op = "delete_edge"
        edge = self._repos.edges.find_by_id(edge_id)
        if edge is None:
            return not_found(op, "Edge", edge_id)
        self._repos.edges.delete(edge_id)
        return ServiceResult(ok=True, op=op, data=edge.to_dict())
