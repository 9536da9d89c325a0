"""FeatureService: Gherkin feature files attached to node versions.

Uploads parse the title and step count once, at write time; reads and
aggregates work from the stored ``step_count``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from archmap.domain.features import (
    Feature,
    count_by_keyword,
    count_scenarios,
    count_steps,
    has_valid_gherkin,
    title_from_content,
    version_from_filename,
)
from archmap.services._helpers import fail, not_found, now_iso, snippet
from archmap.services.base import BaseService
from archmap.services.result import ServiceResult
from archmap.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 50


def _entry_problem(filename: str | None, content: str | None) -> str | None:
    """Why a batch entry cannot be saved, or None."""
    if not filename:
        return "filename is required"
    if not content:
        return "content is required"
    if not has_valid_gherkin(content):
        return "Invalid Gherkin: missing Feature: line"
    return None


class FeatureService(BaseService):
    """Upload, query, search, and export feature files."""

    def _build(self, node_id: str, version: str, filename: str, content: str) -> Feature:
        return Feature(
            node_id=node_id,
            version=version,
            filename=filename,
            title=title_from_content(content, filename),
            content=content,
            step_count=count_steps(content),
            updated_at=now_iso(),
        )

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    @traced
    def upload_feature(
        self,
        node_id: str,
        filename: str,
        content: str,
        version: str | None = None,
    ) -> ServiceResult:
        """Save one feature file, replacing any with the same filename.

        Without *version*, the tag comes from a ``vN-`` filename prefix,
        falling back to ``mvp``.
        """
        op = "upload_feature"
        if not self._repos.nodes.exists(node_id):
            return not_found(op, "Node", node_id)
        if not has_valid_gherkin(content):
            return fail(op, "INVALID_CONTENT", "Invalid Gherkin: missing Feature: line")

        tag = version or version_from_filename(filename)
        feature = self._build(node_id, tag, filename, content)
        self._repos.features.save(feature)
        logger.info("Uploaded %s to %s@%s", filename, node_id, feature.version)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "node_id": node_id,
                "filename": filename,
                "version": feature.version,
                "title": feature.title,
                "step_count": feature.step_count,
            },
        )

    @traced
    def batch_upload(
        self,
        node_id: str,
        version: str,
        entries: list[dict[str, str]],
    ) -> ServiceResult:
        """Upload many files to one node and version.

        Invalid entries are reported in ``errors`` and skipped; the rest
        are saved.
        """
        op = "batch_upload"
        if not entries:
            return fail(op, "EMPTY_BATCH", "features must not be empty")
        if len(entries) > MAX_BATCH_SIZE:
            return fail(
                op,
                "BATCH_TOO_LARGE",
                f"Batch size exceeds maximum {MAX_BATCH_SIZE} features",
                size=len(entries),
            )
        if not self._repos.nodes.exists(node_id):
            return not_found(op, "Node", node_id)

        uploaded = 0
        total_steps = 0
        errors: list[dict[str, str]] = []
        for entry in entries:
            filename = entry.get("filename", "")
            content = entry.get("content", "")
            problem = _entry_problem(filename, content)
            if problem is not None:
                errors.append({"filename": filename or "(unknown)", "error": problem})
                continue
            feature = self._build(node_id, version, filename, content)
            self._repos.features.save(feature)
            uploaded += 1
            total_steps += feature.step_count

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "uploaded": uploaded,
                "version": version,
                "total_steps": total_steps,
                "errors": errors,
            },
            warnings=[f"{len(errors)} feature(s) rejected"] if errors else [],
        )

    @traced
    def batch_upload_cross_component(self, entries: list[dict[str, str]]) -> ServiceResult:
        """Upload many files where each entry names its own node and version."""
        op = "batch_upload_cross_component"
        if not entries:
            return fail(op, "EMPTY_BATCH", "features must not be empty")
        for entry in entries:
            for key in ("node_id", "version"):
                if not entry.get(key):
                    return fail(
                        op,
                        "INVALID_CONTENT",
                        f"Every entry must have {key}: {key} is required",
                    )
        if len(entries) > MAX_BATCH_SIZE:
            return fail(
                op,
                "BATCH_TOO_LARGE",
                f"Batch size exceeds maximum {MAX_BATCH_SIZE} features",
                size=len(entries),
            )

        uploaded = 0
        total_steps = 0
        errors: list[dict[str, str]] = []
        for entry in entries:
            node_id = entry["node_id"]
            filename = entry.get("filename", "")
            content = entry.get("content", "")
            if not self._repos.nodes.exists(node_id):
                errors.append({"filename": filename, "error": f"Component not found: {node_id}"})
                continue
            problem = _entry_problem(filename, content)
            if problem is not None:
                errors.append({"filename": filename or "(unknown)", "error": problem})
                continue
            feature = self._build(node_id, entry["version"], filename, content)
            self._repos.features.save(feature)
            uploaded += 1
            total_steps += feature.step_count

        return ServiceResult(
            ok=True,
            op=op,
            data={"uploaded": uploaded, "total_steps": total_steps, "errors": errors},
            warnings=[f"{len(errors)} feature(s) rejected"] if errors else [],
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @traced
    def list_features(self, node_id: str, version: str | None = None) -> ServiceResult:
        """Features of a node, optionally one version, with step totals by keyword."""
        op = "list_features"
        if not self._repos.nodes.exists(node_id):
            return not_found(op, "Node", node_id)

        if version is None:
            features = self._repos.features.find_by_node(node_id)
        else:
            features = self._repos.features.find_by_node_and_version(node_id, version)

        items: list[dict[str, Any]] = []
        totals = {
            "total_features": len(features),
            "total_scenarios": 0,
            "total_steps": 0,
            "total_given_steps": 0,
            "total_when_steps": 0,
            "total_then_steps": 0,
        }
        for feature in features:
            scenarios = count_scenarios(feature.content)
            by_keyword = count_by_keyword(feature.content)
            totals["total_scenarios"] += scenarios
            totals["total_steps"] += feature.step_count
            for keyword, count in by_keyword.items():
                totals[f"total_{keyword}_steps"] += count
            items.append(
                {
                    "filename": feature.filename,
                    "version": feature.version,
                    "title": feature.title,
                    "step_count": feature.step_count,
                    "scenario_count": scenarios,
                    "updated_at": feature.updated_at,
                }
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"node_id": node_id, "version": version, "items": items, "totals": totals},
        )

    @traced
    def get_feature(self, node_id: str, version: str, filename: str) -> ServiceResult:
        op = "get_feature"
        if not self._repos.nodes.exists(node_id):
            return not_found(op, "Node", node_id)
        for feature in self._repos.features.find_by_node_and_version(node_id, version):
            if feature.filename == filename:
                return ServiceResult(ok=True, op=op, data=feature.to_dict())
        return fail(
            op,
            "NOT_FOUND",
            f"Feature not found: {filename} for {node_id}@{version}",
            id=node_id,
            version=version,
            filename=filename,
        )

    @traced
    def step_totals(self, node_id: str, version: str) -> ServiceResult:
        summary = self._repos.features.get_step_count_summary(node_id, version)
        return ServiceResult(
            ok=True,
            op="step_totals",
            data={
                "node_id": node_id,
                "version": version,
                "total_steps": summary.total_steps,
                "feature_count": summary.feature_count,
            },
        )

    @traced
    def search_features(
        self,
        query: str,
        version: str | None = None,
        limit: int = 50,
    ) -> ServiceResult:
        """Case-insensitive substring search over feature content."""
        op = "search_features"
        if not query or not query.strip():
            return fail(op, "EMPTY_QUERY", "Search query must not be empty")

        with trace_span("search") as span:
            matches = self._repos.features.search(query, version, limit)
            if span:
                span.annotate(matches=len(matches))

        items = [
            {
                "node_id": f.node_id,
                "filename": f.filename,
                "version": f.version,
                "title": f.title,
                "step_count": f.step_count,
                "snippet": snippet(f.content or "", query),
            }
            for f in matches
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"query": query, "count": len(items), "items": items},
        )

    # ------------------------------------------------------------------
    # Deletes
    # ------------------------------------------------------------------

    @traced
    def delete_feature(
        self,
        node_id: str,
        filename: str,
        version: str | None = None,
    ) -> ServiceResult:
        """Delete one file; without *version*, the filename under every version."""
        op = "delete_feature"
        if not self._repos.nodes.exists(node_id):
            return not_found(op, "Node", node_id)

        if version is None:
            deleted = self._repos.features.delete_by_node_and_filename(node_id, filename)
        else:
            deleted = self._repos.features.delete_by_node_version_and_filename(
                node_id, version, filename
            )
        if not deleted:
            return not_found(op, "Feature", filename)
        return ServiceResult(
            ok=True,
            op=op,
            data={"node_id": node_id, "filename": filename, "version": version},
        )

    @traced
    def delete_version_features(self, node_id: str, version: str) -> ServiceResult:
        op = "delete_version_features"
        if not self._repos.nodes.exists(node_id):
            return not_found(op, "Node", node_id)
        deleted = self._repos.features.delete_by_node_and_version(node_id, version)
        return ServiceResult(
            ok=True,
            op=op,
            data={"node_id": node_id, "version": version, "deleted": deleted},
        )

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    @traced
    def export_features(self, output_dir: Path, component: str | None = None) -> ServiceResult:
        """Write files to ``<output_dir>/components/<node_id>/features/<filename>``."""
        op = "export_features"
        if component is not None:
            features = self._repos.features.find_by_node(component)
        else:
            features = self._repos.features.find_all()

        exported = 0
        try:
            for feature in features:
                target_dir = output_dir / "components" / feature.node_id / "features"
                target_dir.mkdir(parents=True, exist_ok=True)
                (target_dir / feature.filename).write_text(feature.content or "", encoding="utf-8")
                exported += 1
        except OSError as exc:
            return fail(op, "EXPORT_FAILED", f"Cannot write features to {output_dir}: {exc}")

        logger.info("Exported %d feature file(s) to %s", exported, output_dir)
        return ServiceResult(
            ok=True,
            op=op,
            data={"output_dir": str(output_dir), "component": component, "exported": exported},
        )
