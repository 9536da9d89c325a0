"""Repository contracts consumed by the service layer.

Each contract is an ABC implemented twice: SQLAlchemy Core over SQLite
(``infrastructure.repositories.sql``) and plain in-memory collections
(``infrastructure.repositories.memory``).

INVARIANT: ``find_all`` returns records in insertion order. Graph
traversals rely on it for deterministic tie-breaking.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from archmap.domain.api_keys import ApiKey
from archmap.domain.edges import Edge
from archmap.domain.features import Feature
from archmap.domain.nodes import Node
from archmap.domain.versions import Version


@dataclass(frozen=True)
class StepCountSummary:
    """Aggregated step counts for one node and version."""

    total_steps: int
    feature_count: int


class NodeRepository(ABC):
    """Read/write access to nodes."""

    @abstractmethod
    def find_all(self) -> list[Node]: ...

    @abstractmethod
    def find_by_id(self, node_id: str) -> Node | None: ...

    @abstractmethod
    def find_by_type(self, node_type: str) -> list[Node]: ...

    @abstractmethod
    def find_by_layer(self, layer_id: str) -> list[Node]: ...

    @abstractmethod
    def exists(self, node_id: str) -> bool: ...

    @abstractmethod
    def save(self, node: Node) -> None:
        """Insert or replace the node with the same id."""
        ...

    @abstractmethod
    def delete(self, node_id: str) -> None: ...


class EdgeRepository(ABC):
    """Read/write access to edges."""

    @abstractmethod
    def find_all(self) -> list[Edge]: ...

    @abstractmethod
    def find_by_id(self, edge_id: int) -> Edge | None: ...

    @abstractmethod
    def find_by_source(self, source_id: str) -> list[Edge]: ...

    @abstractmethod
    def find_by_target(self, target_id: str) -> list[Edge]: ...

    @abstractmethod
    def find_by_type(self, edge_type: str) -> list[Edge]: ...

    @abstractmethod
    def find_relationships(self) -> list[Edge]:
        """All edges except ``CONTAINS``."""
        ...

    @abstractmethod
    def exists(self, source_id: str, target_id: str, edge_type: str) -> bool: ...

    @abstractmethod
    def save(self, edge: Edge) -> Edge:
        """Persist *edge* and return it with its assigned id."""
        ...

    @abstractmethod
    def delete(self, edge_id: int) -> None: ...


class VersionRepository(ABC):
    """Read/write access to version records."""

    @abstractmethod
    def find_all(self) -> list[Version]: ...

    @abstractmethod
    def find_by_node(self, node_id: str) -> list[Version]: ...

    @abstractmethod
    def find_by_node_and_version(self, node_id: str, version: str) -> Version | None: ...

    @abstractmethod
    def save(self, version: Version) -> None:
        """Upsert on ``(node_id, version)``."""
        ...

    @abstractmethod
    def delete_by_node(self, node_id: str) -> None: ...


class FeatureRepository(ABC):
    """Read/write access to feature files."""

    @abstractmethod
    def find_all(self) -> list[Feature]: ...

    @abstractmethod
    def find_by_node(self, node_id: str) -> list[Feature]: ...

    @abstractmethod
    def find_by_node_and_version(self, node_id: str, version: str) -> list[Feature]: ...

    @abstractmethod
    def get_step_count_summary(self, node_id: str, version: str) -> StepCountSummary: ...

    @abstractmethod
    def search(self, query: str, version: str | None = None, limit: int = 50) -> list[Feature]:
        """Case-insensitive substring match on content (or title)."""
        ...

    @abstractmethod
    def save(self, feature: Feature) -> None:
        """Upsert on ``(node_id, version, filename)``."""
        ...

    @abstractmethod
    def delete_all(self) -> None: ...

    @abstractmethod
    def delete_by_node(self, node_id: str) -> None: ...

    @abstractmethod
    def delete_by_node_and_filename(self, node_id: str, filename: str) -> bool: ...

    @abstractmethod
    def delete_by_node_and_version(self, node_id: str, version: str) -> int: ...

    @abstractmethod
    def delete_by_node_version_and_filename(
        self, node_id: str, version: str, filename: str
    ) -> bool: ...


class ApiKeyRepository(ABC):
    """Read/write access to API keys."""

    @abstractmethod
    def find_all(self) -> list[ApiKey]: ...

    @abstractmethod
    def find_by_id(self, key_id: int) -> ApiKey | None: ...

    @abstractmethod
    def find_by_name(self, name: str) -> ApiKey | None: ...

    @abstractmethod
    def save(self, key: ApiKey) -> ApiKey:
        """Insert a new key and return it with its assigned id."""
        ...

    @abstractmethod
    def revoke(self, key_id: int) -> None: ...

    @abstractmethod
    def update_last_used(self, key_id: int, timestamp: str) -> None: ...


@dataclass(frozen=True)
class Repositories:
    """The repository bundle injected into every service."""

    nodes: NodeRepository
    edges: EdgeRepository
    versions: VersionRepository
    features: FeatureRepository
    api_keys: ApiKeyRepository
