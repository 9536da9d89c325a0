"""ArchitectureService: the enriched whole-graph view and its summaries.

``get_architecture`` is the payload a viewer or exporter consumes: every
node joined with its versions and features, layers carrying their
children, relationship edges, and the app progression tree.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from archmap.domain.nodes import Node
from archmap.domain.types import EdgeType
from archmap.domain.versions import STANDARD_TAGS, Version
from archmap.services._helpers import fail, not_found, now_iso
from archmap.services.base import BaseService
from archmap.services.contracts import ArchitectureStats, dump_validated
from archmap.services.result import ServiceResult
from archmap.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

_PHASE_FEATURE_KEYS = tuple(t for t in STANDARD_TAGS if t != "overview")


class ArchitectureService(BaseService):
    """Read models over the complete architecture."""

    # ------------------------------------------------------------------
    # get_architecture
    # ------------------------------------------------------------------

    @traced
    def get_architecture(self) -> ServiceResult:
        """Assemble layers, nodes, edges, progression tree, and stats.

        Version records are reported as stored. Progress derived from
        ``current_version`` is written when the component is updated.
        """
        with trace_span("load") as span:
            nodes = self._repos.nodes.find_all()
            edges = self._repos.edges.find_all()
            versions = self._repos.versions.find_all()
            features = self._repos.features.find_all()
            if span:
                span.annotate(nodes=len(nodes), edges=len(edges))

        versions_by_node: dict[str, dict[str, dict[str, Any]]] = {}
        for record in versions:
            versions_by_node.setdefault(record.node_id, {})[record.version] = record.summary()

        features_by_key: dict[str, list[dict[str, Any]]] = {}
        for feature in features:
            key = f"{feature.node_id}:{feature.version}"
            features_by_key.setdefault(key, []).append(feature.summary())

        with trace_span("enrich"):
            enriched = [self._enrich(n, versions_by_node, features_by_key) for n in nodes]

        layers = [
            {
                **self._enrich(layer, versions_by_node, {}),
                "children": [
                    e for e in enriched if e["layer"] == layer.id and e["type"] != "layer"
                ],
            }
            for layer in nodes
            if layer.is_layer()
        ]

        app_ids = {n.id for n in nodes if n.is_app()}
        progression_edges = [
            {
                "source_id": e.source_id,
                "target_id": e.target_id,
                "type": str(e.type),
                "label": e.label,
            }
            for e in edges
            if e.type == EdgeType.DEPENDS_ON and e.source_id in app_ids and e.target_id in app_ids
        ]

        stats = {
            "total_nodes": len(nodes),
            "total_edges": len(edges),
            "total_versions": len(versions),
            "total_features": len(features),
        }

        return ServiceResult(
            ok=True,
            op="get_architecture",
            data={
                "generated_at": now_iso(),
                "layers": layers,
                "nodes": enriched,
                "edges": [e.to_dict() for e in edges if not e.is_containment()],
                "progression_tree": {
                    "nodes": [e for e in enriched if e["id"] in app_ids],
                    "edges": progression_edges,
                },
                "stats": dump_validated(ArchitectureStats, stats),
            },
        )

    @staticmethod
    def _enrich(
        node: Node,
        versions_by_node: dict[str, dict[str, dict[str, Any]]],
        features_by_key: dict[str, list[dict[str, Any]]],
    ) -> dict[str, Any]:
        node_versions = versions_by_node.get(node.id, {})

        # Tag order: the node's own versions, the standard phases, then any
        # tag that only features use.
        tags: dict[str, None] = dict.fromkeys(node_versions)
        tags.update(dict.fromkeys(_PHASE_FEATURE_KEYS))
        prefix = f"{node.id}:"
        for key in features_by_key:
            if key.startswith(prefix):
                tags[key[len(prefix) :]] = None

        node_features = {
            tag: features_by_key[f"{node.id}:{tag}"]
            for tag in tags
            if f"{node.id}:{tag}" in features_by_key
        }
        return {
            **node.to_dict(),
            "display_state": node.display_state(),
            "versions": node_versions,
            "features": node_features,
        }

    # ------------------------------------------------------------------
    # export_architecture
    # ------------------------------------------------------------------

    @traced
    def export_architecture(self, output_path: Path) -> ServiceResult:
        """Write :meth:`get_architecture` as JSON to *output_path*."""
        op = "export_architecture"
        result = self.get_architecture()
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(json.dumps(result.data, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            return fail(op, "EXPORT_FAILED", f"Cannot write {output_path}: {exc}")

        logger.info("Exported architecture to %s", output_path)
        return ServiceResult(
            ok=True,
            op=op,
            data={"path": str(output_path), "stats": result.data["stats"]},
        )

    # ------------------------------------------------------------------
    # Planning summaries
    # ------------------------------------------------------------------

    @traced
    def layer_overview(self) -> ServiceResult:
        """Per layer: component count, mvp/v1 completions, mean progress.

        ``overall_progress`` averages, over children that have any
        non-overview version, each child's mean non-overview progress.
        """
        by_node: dict[str, list[Version]] = {}
        for record in self._repos.versions.find_all():
            by_node.setdefault(record.node_id, []).append(record)

        items: list[dict[str, Any]] = []
        for layer in self._repos.nodes.find_by_type("layer"):
            children = self._repos.nodes.find_by_layer(layer.id)
            completed = {"mvp": 0, "v1": 0}
            child_means: list[float] = []
            for child in children:
                records = by_node.get(child.id, [])
                for record in records:
                    if record.version in completed and record.progress == 100:
                        completed[record.version] += 1
                progresses = [r.progress for r in records if r.version != "overview"]
                if progresses:
                    child_means.append(sum(progresses) / len(progresses))

            overall = round(sum(child_means) / len(child_means)) if child_means else 0
            items.append(
                {
                    "layer_id": layer.id,
                    "layer_name": layer.name,
                    "total_components": len(children),
                    "completed_mvp": completed["mvp"],
                    "completed_v1": completed["v1"],
                    "overall_progress": overall,
                }
            )

        return ServiceResult(
            ok=True,
            op="layer_overview",
            data={"count": len(items), "items": items},
        )

    @traced
    def components_by_status(self, version: str) -> ServiceResult:
        """Classify non-layer nodes by progress and step coverage for *version*.

        - complete: progress 100 and at least one step
        - in_progress: progress above 0 and at least one step
        - planned: everything else
        """
        progress = {
            r.node_id: r.progress for r in self._repos.versions.find_all() if r.version == version
        }
        coverage: dict[str, dict[str, int]] = {}
        for feature in self._repos.features.find_all():
            if feature.version != version:
                continue
            entry = coverage.setdefault(feature.node_id, {"total_steps": 0, "feature_count": 0})
            entry["total_steps"] += feature.step_count
            entry["feature_count"] += 1

        buckets: dict[str, list[dict[str, Any]]] = {
            "complete": [],
            "in_progress": [],
            "planned": [],
        }
        for node in self._repos.nodes.find_all():
            if node.is_layer():
                continue
            entry = coverage.get(node.id, {"total_steps": 0, "feature_count": 0})
            own = progress.get(node.id, 0)
            info = {"id": node.id, "name": node.name, **entry}
            if own == 100 and entry["total_steps"] > 0:
                buckets["complete"].append(info)
            elif own > 0 and entry["total_steps"] > 0:
                buckets["in_progress"].append(info)
            else:
                buckets["planned"].append(info)

        return ServiceResult(
            ok=True,
            op="components_by_status",
            data={"version": version, **buckets},
        )

    @traced
    def component_context(self, node_id: str) -> ServiceResult:
        """Everything needed to work on one component, in one payload."""
        op = "component_context"
        node = self._repos.nodes.find_by_id(node_id)
        if node is None:
            return not_found(op, "Node", node_id)

        versions = self._repos.versions.find_by_node(node_id)
        features = self._repos.features.find_by_node(node_id)
        all_nodes = {n.id: n for n in self._repos.nodes.find_all()}

        def ref(other_id: str) -> dict[str, str]:
            other = all_nodes.get(other_id)
            return other.summary() if other else {"id": other_id}

        dependencies = [
            ref(e.target_id)
            for e in self._repos.edges.find_by_source(node_id)
            if e.type == EdgeType.DEPENDS_ON
        ]
        dependents = [
            ref(e.source_id)
            for e in self._repos.edges.find_by_target(node_id)
            if e.type == EdgeType.DEPENDS_ON
        ]

        layer_info: dict[str, str] | None = None
        siblings: list[dict[str, str]] = []
        if node.layer:
            layer = all_nodes.get(node.layer)
            if layer is not None:
                layer_info = layer.summary()
            siblings = [
                n.summary() for n in self._repos.nodes.find_by_layer(node.layer) if n.id != node_id
            ]

        features_by_version: dict[str, list[dict[str, Any]]] = {}
        for feature in features:
            features_by_version.setdefault(feature.version, []).append(
                {
                    "filename": feature.filename,
                    "title": feature.title,
                    "step_count": feature.step_count,
                }
            )

        version_rows: list[dict[str, Any]] = []
        progress: dict[str, dict[str, Any]] = {}
        for record in versions:
            summary = self._repos.features.get_step_count_summary(node_id, record.version)
            version_rows.append(
                {
                    "version": record.version,
                    "progress": record.progress,
                    "status": str(record.status),
                    "total_steps": summary.total_steps,
                    "feature_count": summary.feature_count,
                }
            )
            progress[record.version] = {
                "total_steps": summary.total_steps,
                "feature_count": summary.feature_count,
                "status": str(record.status),
                "progress": record.progress,
            }

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "component": {
                    "id": node.id,
                    "name": node.name,
                    "type": str(node.type),
                    "layer": node.layer,
                    "description": node.description,
                    "tags": list(node.tags),
                    "current_version": node.current_version,
                    "display_state": node.display_state(),
                },
                "versions": version_rows,
                "features": features_by_version,
                "dependencies": dependencies,
                "dependents": dependents,
                "layer": layer_info,
                "siblings": siblings,
                "progress": progress,
            },
        )
