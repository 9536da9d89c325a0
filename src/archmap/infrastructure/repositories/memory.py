"""In-memory repositories backed by dicts and lists.

Used by the service tests. Insertion order is preserved,
and an upsert keeps the record's original position.
"""

from __future__ import annotations

from collections.abc import Callable

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


class MemoryNodeRepository(NodeRepository):
    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}

    def find_all(self) -> list[Node]:
        return list(self._nodes.values())

    def find_by_id(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def find_by_type(self, node_type: str) -> list[Node]:
        return [n for n in self._nodes.values() if n.type == node_type]

    def find_by_layer(self, layer_id: str) -> list[Node]:
        return [n for n in self._nodes.values() if n.layer == layer_id]

    def exists(self, node_id: str) -> bool:
        return node_id in self._nodes

    def save(self, node: Node) -> None:
        self._nodes[node.id] = node

    def delete(self, node_id: str) -> None:
        self._nodes.pop(node_id, None)


class MemoryEdgeRepository(EdgeRepository):
    def __init__(self) -> None:
        self._edges: dict[int, Edge] = {}
        self._next_id = 1

    def find_all(self) -> list[Edge]:
        return list(self._edges.values())

    def find_by_id(self, edge_id: int) -> Edge | None:
        return self._edges.get(edge_id)

    def find_by_source(self, source_id: str) -> list[Edge]:
        return [e for e in self._edges.values() if e.source_id == source_id]

    def find_by_target(self, target_id: str) -> list[Edge]:
        return [e for e in self._edges.values() if e.target_id == target_id]

    def find_by_type(self, edge_type: str) -> list[Edge]:
        return [e for e in self._edges.values() if e.type == edge_type]

    def find_relationships(self) -> list[Edge]:
        return [e for e in self._edges.values() if e.type != EdgeType.CONTAINS]

    def exists(self, source_id: str, target_id: str, edge_type: str) -> bool:
        key = (source_id, target_id, edge_type)
        return any(e.key() == key for e in self._edges.values())

    def save(self, edge: Edge) -> Edge:
        stored = edge.model_copy(update={"id": self._next_id})
        self._edges[self._next_id] = stored
        self._next_id += 1
        return stored

    def delete(self, edge_id: int) -> None:
        self._edges.pop(edge_id, None)


class MemoryVersionRepository(VersionRepository):
    def __init__(self) -> None:
        self._versions: dict[tuple[str, str], Version] = {}
        self._next_id = 1

    def find_all(self) -> list[Version]:
        return list(self._versions.values())

    def find_by_node(self, node_id: str) -> list[Version]:
        return [v for v in self._versions.values() if v.node_id == node_id]

    def find_by_node_and_version(self, node_id: str, version: str) -> Version | None:
        return self._versions.get((node_id, version))

    def save(self, version: Version) -> None:
        key = (version.node_id, version.version)
        existing = self._versions.get(key)
        if existing is None:
            self._versions[key] = version.model_copy(update={"id": self._next_id})
            self._next_id += 1
        else:
            self._versions[key] = version.model_copy(update={"id": existing.id})

    def delete_by_node(self, node_id: str) -> None:
        for key in [k for k in self._versions if k[0] == node_id]:
            del self._versions[key]


class MemoryFeatureRepository(FeatureRepository):
    def __init__(self) -> None:
        self._features: dict[tuple[str, str, str], Feature] = {}
        self._next_id = 1

    def find_all(self) -> list[Feature]:
        return list(self._features.values())

    def find_by_node(self, node_id: str) -> list[Feature]:
        return [f for f in self._features.values() if f.node_id == node_id]

    def find_by_node_and_version(self, node_id: str, version: str) -> list[Feature]:
        return [
            f for f in self._features.values() if f.node_id == node_id and f.version == version
        ]

    def get_step_count_summary(self, node_id: str, version: str) -> StepCountSummary:
        found = self.find_by_node_and_version(node_id, version)
        return StepCountSummary(
            total_steps=sum(f.step_count for f in found),
            feature_count=len(found),
        )

    def search(self, query: str, version: str | None = None, limit: int = 50) -> list[Feature]:
        needle = query.lower()
        hits: list[Feature] = []
        for feature in self._features.values():
            if version is not None and feature.version != version:
                continue
            haystacks = (feature.content or "", feature.title)
            if any(needle in h.lower() for h in haystacks):
                hits.append(feature)
                if len(hits) >= limit:
                    break
        return hits

    def save(self, feature: Feature) -> None:
        key = (feature.node_id, feature.version, feature.filename)
        existing = self._features.get(key)
        if existing is None:
            self._features[key] = feature.model_copy(update={"id": self._next_id})
            self._next_id += 1
        else:
            self._features[key] = feature.model_copy(update={"id": existing.id})

    def _delete_where(self, predicate: Callable[[Feature], bool]) -> int:
        doomed = [k for k, f in self._features.items() if predicate(f)]
        for key in doomed:
            del self._features[key]
        return len(doomed)

    def delete_all(self) -> None:
        self._features.clear()

    def delete_by_node(self, node_id: str) -> None:
        self._delete_where(lambda f: f.node_id == node_id)

    def delete_by_node_and_filename(self, node_id: str, filename: str) -> bool:
        return self._delete_where(lambda f: f.node_id == node_id and f.filename == filename) > 0

    def delete_by_node_and_version(self, node_id: str, version: str) -> int:
        return self._delete_where(lambda f: f.node_id == node_id and f.version == version)

    def delete_by_node_version_and_filename(
        self, node_id: str, version: str, filename: str
    ) -> bool:
        return self._features.pop((node_id, version, filename), None) is not None


class MemoryApiKeyRepository(ApiKeyRepository):
    def __init__(self) -> None:
        self._keys: dict[int, ApiKey] = {}
        self._next_id = 1

    def find_all(self) -> list[ApiKey]:
        return list(self._keys.values())

    def find_by_id(self, key_id: int) -> ApiKey | None:
        return self._keys.get(key_id)

    def find_by_name(self, name: str) -> ApiKey | None:
        return next((k for k in self._keys.values() if k.name == name), None)

    def save(self, key: ApiKey) -> ApiKey:
        stored = key.model_copy(update={"id": self._next_id})
        self._keys[self._next_id] = stored
        self._next_id += 1
        return stored

    def revoke(self, key_id: int) -> None:
        key = self._keys.get(key_id)
        if key is not None:
            self._keys[key_id] = key.model_copy(update={"is_active": False})

    def update_last_used(self, key_id: int, timestamp: str) -> None:
        key = self._keys.get(key_id)
        if key is not None:
            self._keys[key_id] = key.model_copy(update={"last_used_at": timestamp})


def memory_repositories() -> Repositories:
    """Build an empty in-memory repository bundle."""
    return Repositories(
        nodes=MemoryNodeRepository(),
        edges=MemoryEdgeRepository(),
        versions=MemoryVersionRepository(),
        features=MemoryFeatureRepository(),
        api_keys=MemoryApiKeyRepository(),
    )
