"""SQLAlchemy Core repositories over the archmap SQLite schema.

Every ``find_all``/``find_by_*`` orders by primary key (or rowid for
``nodes``), which equals insertion order. Writes run inside
``engine.begin()`` so each call is its own transaction.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, insert, literal_column, or_, select, update
from sqlalchemy.engine import Engine

from archmap.domain.api_keys import ApiKey
from archmap.domain.edges import Edge
from archmap.domain.features import Feature
from archmap.domain.nodes import Node
from archmap.domain.repositories import (
    ApiKeyRepository,
    EdgeRepository,
    FeatureRepository,
    NodeRepository,
    Repositories,
    StepCountSummary,
    VersionRepository,
)
from archmap.domain.types import EdgeType
from archmap.domain.versions import Version
from archmap.infrastructure.database.schema import (
    api_keys,
    edges,
    features,
    node_versions,
    nodes,
)

_ROWID = literal_column("rowid")


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlNodeRepository(NodeRepository):
    """Nodes table access."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _select(self, *where: Any) -> list[Node]:
        stmt = select(nodes).where(*where).order_by(_ROWID)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [Node.model_validate(dict(row)) for row in rows]

    def find_all(self) -> list[Node]:
        return self._select()

    def find_by_id(self, node_id: str) -> Node | None:
        found = self._select(nodes.c.id == node_id)
        return found[0] if found else None

    def find_by_type(self, node_type: str) -> list[Node]:
        return self._select(nodes.c.type == node_type)

    def find_by_layer(self, layer_id: str) -> list[Node]:
        return self._select(nodes.c.layer == layer_id)

    def exists(self, node_id: str) -> bool:
        stmt = select(nodes.c.id).where(nodes.c.id == node_id)
        with self._engine.connect() as conn:
            return conn.execute(stmt).first() is not None

    def save(self, node: Node) -> None:
        values = {
            "name": node.name,
            "type": str(node.type),
            "layer": node.layer,
            "color": node.color,
            "icon": node.icon,
            "description": node.description,
            "tags": node.tags_json(),
            "sort_order": node.sort_order,
            "current_version": node.current_version,
        }
        with self._engine.begin() as conn:
            existing = conn.execute(select(nodes.c.id).where(nodes.c.id == node.id)).first()
            if existing is None:
                conn.execute(insert(nodes).values(id=node.id, **values))
            else:
                conn.execute(update(nodes).where(nodes.c.id == node.id).values(**values))

    def delete(self, node_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(nodes).where(nodes.c.id == node_id))


class SqlEdgeRepository(EdgeRepository):
    """Edges table access."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _select(self, *where: Any) -> list[Edge]:
        stmt = select(edges).where(*where).order_by(edges.c.id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [Edge.model_validate(dict(row)) for row in rows]

    def find_all(self) -> list[Edge]:
        return self._select()

    def find_by_id(self, edge_id: int) -> Edge | None:
        found = self._select(edges.c.id == edge_id)
        return found[0] if found else None

    def find_by_source(self, source_id: str) -> list[Edge]:
        return self._select(edges.c.source_id == source_id)

    def find_by_target(self, target_id: str) -> list[Edge]:
        return self._select(edges.c.target_id == target_id)

    def find_by_type(self, edge_type: str) -> list[Edge]:
        return self._select(edges.c.type == edge_type)

    def find_relationships(self) -> list[Edge]:
        return self._select(edges.c.type != EdgeType.CONTAINS.value)

    def exists(self, source_id: str, target_id: str, edge_type: str) -> bool:
        stmt = select(edges.c.id).where(
            edges.c.source_id == source_id,
            edges.c.target_id == target_id,
            edges.c.type == edge_type,
        )
        with self._engine.connect() as conn:
            return conn.execute(stmt).first() is not None

    def save(self, edge: Edge) -> Edge:
        with self._engine.begin() as conn:
            result = conn.execute(
                insert(edges).values(
                    source_id=edge.source_id,
                    target_id=edge.target_id,
                    type=str(edge.type),
                    label=edge.label,
                    metadata=edge.metadata,
                )
            )
            edge_id = result.inserted_primary_key[0]
        return edge.model_copy(update={"id": int(edge_id)})

    def delete(self, edge_id: int) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(edges).where(edges.c.id == edge_id))


class SqlVersionRepository(VersionRepository):
    """Node-versions table access."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _select(self, *where: Any) -> list[Version]:
        stmt = select(node_versions).where(*where).order_by(node_versions.c.id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [Version.model_validate(dict(row)) for row in rows]

    def find_all(self) -> list[Version]:
        return self._select()

    def find_by_node(self, node_id: str) -> list[Version]:
        return self._select(node_versions.c.node_id == node_id)

    def find_by_node_and_version(self, node_id: str, version: str) -> Version | None:
        found = self._select(
            node_versions.c.node_id == node_id,
            node_versions.c.version == version,
        )
        return found[0] if found else None

    def save(self, version: Version) -> None:
        values = {
            "content": version.content,
            "progress": version.progress,
            "status": str(version.status),
            "updated_at": version.updated_at,
        }
        key = (
            node_versions.c.node_id == version.node_id,
            node_versions.c.version == version.version,
        )
        with self._engine.begin() as conn:
            existing = conn.execute(select(node_versions.c.id).where(*key)).first()
            if existing is None:
                conn.execute(
                    insert(node_versions).values(
                        node_id=version.node_id, version=version.version, **values
                    )
                )
            else:
                conn.execute(update(node_versions).where(*key).values(**values))

    def delete_by_node(self, node_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(node_versions).where(node_versions.c.node_id == node_id))


class SqlFeatureRepository(FeatureRepository):
    """Features table access."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _select(self, *where: Any, limit: int | None = None) -> list[Feature]:
        stmt = select(features).where(*where).order_by(features.c.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [Feature.model_validate(dict(row)) for row in rows]

    def find_all(self) -> list[Feature]:
        return self._select()

    def find_by_node(self, node_id: str) -> list[Feature]:
        return self._select(features.c.node_id == node_id)

    def find_by_node_and_version(self, node_id: str, version: str) -> list[Feature]:
        return self._select(features.c.node_id == node_id, features.c.version == version)

    def get_step_count_summary(self, node_id: str, version: str) -> StepCountSummary:
        stmt = select(
            func.coalesce(func.sum(features.c.step_count), 0),
            func.count(features.c.id),
        ).where(features.c.node_id == node_id, features.c.version == version)
        with self._engine.connect() as conn:
            total, count = conn.execute(stmt).one()
        return StepCountSummary(total_steps=int(total or 0), feature_count=int(count or 0))

    def search(self, query: str, version: str | None = None, limit: int = 50) -> list[Feature]:
        pattern = f"%{_escape_like(query.lower())}%"
        where: list[Any] = [
            or_(
                func.lower(features.c.content).like(pattern, escape="\\"),
                func.lower(features.c.title).like(pattern, escape="\\"),
            )
        ]
        if version is not None:
            where.append(features.c.version == version)
        return self._select(*where, limit=limit)

    def save(self, feature: Feature) -> None:
        values = {
            "title": feature.title,
            "content": feature.content,
            "step_count": feature.step_count,
            "updated_at": feature.updated_at,
        }
        key = (
            features.c.node_id == feature.node_id,
            features.c.version == feature.version,
            features.c.filename == feature.filename,
        )
        with self._engine.begin() as conn:
            existing = conn.execute(select(features.c.id).where(*key)).first()
            if existing is None:
                conn.execute(
                    insert(features).values(
                        node_id=feature.node_id,
                        version=feature.version,
                        filename=feature.filename,
                        **values,
                    )
                )
            else:
                conn.execute(update(features).where(*key).values(**values))

    def _delete(self, *where: Any) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(delete(features).where(*where))
        return int(result.rowcount or 0)

    def delete_all(self) -> None:
        self._delete()

    def delete_by_node(self, node_id: str) -> None:
        self._delete(features.c.node_id == node_id)

    def delete_by_node_and_filename(self, node_id: str, filename: str) -> bool:
        return self._delete(features.c.node_id == node_id, features.c.filename == filename) > 0

    def delete_by_node_and_version(self, node_id: str, version: str) -> int:
        return self._delete(features.c.node_id == node_id, features.c.version == version)

    def delete_by_node_version_and_filename(
        self, node_id: str, version: str, filename: str
    ) -> bool:
        deleted = self._delete(
            features.c.node_id == node_id,
            features.c.version == version,
            features.c.filename == filename,
        )
        return deleted > 0


class SqlApiKeyRepository(ApiKeyRepository):
    """API-keys table access."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _select(self, *where: Any) -> list[ApiKey]:
        stmt = select(api_keys).where(*where).order_by(api_keys.c.id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [ApiKey.model_validate(dict(row)) for row in rows]

    def find_all(self) -> list[ApiKey]:
        return self._select()

    def find_by_id(self, key_id: int) -> ApiKey | None:
        found = self._select(api_keys.c.id == key_id)
        return found[0] if found else None

    def find_by_name(self, name: str) -> ApiKey | None:
        found = self._select(api_keys.c.name == name)
        return found[0] if found else None

    def save(self, key: ApiKey) -> ApiKey:
        with self._engine.begin() as conn:
            result = conn.execute(
                insert(api_keys).values(
                    name=key.name,
                    key_hash=key.key_hash,
                    salt=key.salt,
                    scopes=key.scopes_json(),
                    created_at=key.created_at,
                    expires_at=key.expires_at,
                    last_used_at=key.last_used_at,
                    is_active=1 if key.is_active else 0,
                )
            )
            key_id = result.inserted_primary_key[0]
        return key.model_copy(update={"id": int(key_id)})

    def revoke(self, key_id: int) -> None:
        with self._engine.begin() as conn:
            conn.execute(update(api_keys).where(api_keys.c.id == key_id).values(is_active=0))

    def update_last_used(self, key_id: int, timestamp: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                update(api_keys).where(api_keys.c.id == key_id).values(last_used_at=timestamp)
            )


def sql_repositories(engine: Engine) -> Repositories:
    """Build the repository bundle over *engine*."""
    return Repositories(
        nodes=SqlNodeRepository(engine),
        edges=SqlEdgeRepository(engine),
        versions=SqlVersionRepository(engine),
        features=SqlFeatureRepository(engine),
        api_keys=SqlApiKeyRepository(engine),
    )
