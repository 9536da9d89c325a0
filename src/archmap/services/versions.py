"""VersionService: per-node version records and their step coverage."""

from __future__ import annotations

from typing import Any

from archmap.domain.types import VERSION_STATUSES, VersionStatus
from archmap.domain.versions import Version, is_phase_tag
from archmap.services._helpers import fail, not_found, now_iso
from archmap.services.base import BaseService
from archmap.services.result import ServiceResult
from archmap.services.telemetry import traced


class VersionService(BaseService):
    """Read and write version records for one node at a time."""

    def _with_steps(self, record: Version) -> dict[str, Any]:
        """Version dict; phase tags gain step totals from their features.

        Every stored step counts as passing, so ``step_progress`` is 100
        whenever any step exists.
        """
        data = record.to_dict()
        data.pop("id", None)
        if is_phase_tag(record.version):
            summary = self._repos.features.get_step_count_summary(record.node_id, record.version)
            total = summary.total_steps
            data["total_steps"] = total
            data["passing_steps"] = total
            data["step_progress"] = 100 if total > 0 else 0
        return data

    @traced
    def update_version(
        self,
        node_id: str,
        version: str,
        content: str | None,
        *,
        progress: int | None = None,
        status: str | None = None,
    ) -> ServiceResult:
        """Create or replace one version record.

        *content* is required. Omitted *progress* and *status* keep the
        stored values, defaulting to 0 and ``planned``.
        """
        op = "update_version"
        if not self._repos.nodes.exists(node_id):
            return not_found(op, "Node", node_id)
        if content is None:
            return fail(op, "INVALID_CONTENT", "content is required")
        if progress is not None and not 0 <= progress <= 100:
            return fail(op, "INVALID_PROGRESS", "progress must be between 0 and 100")
        if status is not None and status not in VERSION_STATUSES:
            return fail(
                op,
                "INVALID_STATUS",
                f"Invalid status: {status}. Must be one of: {', '.join(VERSION_STATUSES)}",
            )

        existing = self._repos.versions.find_by_node_and_version(node_id, version)
        record = Version(
            node_id=node_id,
            version=version,
            content=content,
            progress=progress if progress is not None else (existing.progress if existing else 0),
            status=VersionStatus(status)
            if status is not None
            else (existing.status if existing else VersionStatus.PLANNED),
            updated_at=now_iso(),
        )
        self._repos.versions.save(record)

        data = record.to_dict()
        data.pop("id", None)
        return ServiceResult(ok=True, op=op, data={**data, "created": existing is None})

    @traced
    def get_version(self, node_id: str, version: str) -> ServiceResult:
        op = "get_version"
        if not self._repos.nodes.exists(node_id):
            return not_found(op, "Node", node_id)
        record = self._repos.versions.find_by_node_and_version(node_id, version)
        if record is None:
            return fail(
                op,
                "NOT_FOUND",
                f"Version not found: {version} for component {node_id}",
                id=node_id,
                version=version,
            )
        return ServiceResult(ok=True, op=op, data=self._with_steps(record))

    @traced
    def list_versions(self, node_id: str) -> ServiceResult:
        op = "list_versions"
        if not self._repos.nodes.exists(node_id):
            return not_found(op, "Node", node_id)
        items = [self._with_steps(r) for r in self._repos.versions.find_by_node(node_id)]
        return ServiceResult(
            ok=True,
            op=op,
            data={"node_id": node_id, "count": len(items), "items": items},
        )

    @traced
    def delete_all_versions(self, node_id: str) -> ServiceResult:
        op = "delete_all_versions"
        if not self._repos.nodes.exists(node_id):
            return not_found(op, "Node", node_id)
        count = len(self._repos.versions.find_by_node(node_id))
        self._repos.versions.delete_by_node(node_id)
        return ServiceResult(ok=True, op=op, data={"node_id": node_id, "deleted": count})
