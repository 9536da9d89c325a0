"""Typed payload contracts for service results.

Graph-query payloads are validated before they leave the service layer so
shape regressions (a missing ``edges`` key, a ``cycle`` next to an
``order``) fail fast in tests.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

T = TypeVar("T", bound=BaseModel)


def dump_validated(
    model_cls: type[T],
    data: dict[str, Any],
    *,
    exclude_none: bool = False,
) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python", exclude_none=exclude_none)


class NodeRef(BaseModel):
    """``{id, name, type}`` as returned by every graph query."""

    id: str
    name: str
    type: str


class EdgeRef(BaseModel):
    """``{source_id, target_id, type}``."""

    source_id: str
    target_id: str
    type: str


class ShortestPathData(BaseModel):
    """Payload contract for ``GraphService.shortest_path``."""

    from_id: str
    to_id: str
    path: list[NodeRef]
    edges: list[EdgeRef]

    @model_validator(mode="after")
    def _path_matches_edges(self) -> ShortestPathData:
        if self.path and len(self.path) != len(self.edges) + 1:
            msg = "path must have exactly one more node than edges"
            raise ValueError(msg)
        if not self.path and self.edges:
            msg = "edges without a path"
            raise ValueError(msg)
        return self


class TreeItem(NodeRef):
    """One dependency-tree entry; ``dependencies`` only above max depth."""

    dependencies: list[TreeItem] | None = None


class DependencyTreeData(BaseModel):
    """Payload contract for ``GraphService.dependency_tree``."""

    node_id: str
    max_depth: int
    count: int
    items: list[TreeItem]


class NeighbourhoodData(BaseModel):
    """Payload contract for ``GraphService.neighbourhood``."""

    node_id: str
    hops: int
    nodes: list[NodeRef]
    edges: list[EdgeRef]


class ImplementationOrderData(BaseModel):
    """Exactly one of ``order`` or ``cycle``."""

    order: list[str] | None = None
    cycle: list[str] | None = None

    @model_validator(mode="after")
    def _one_of(self) -> ImplementationOrderData:
        if (self.order is None) == (self.cycle is None):
            msg = "exactly one of order or cycle must be set"
            raise ValueError(msg)
        return self


class DependentsData(BaseModel):
    node_id: str
    count: int
    items: list[NodeRef]


class ImplementableItem(NodeRef):
    model_config = ConfigDict(extra="forbid")

    progress: int
    total_steps: int


class NextImplementableData(BaseModel):
    """Payload contract for ``GraphService.next_implementable``."""

    version: str
    count: int
    items: list[ImplementableItem]


class ArchitectureStats(BaseModel):
    total_nodes: int
    total_edges: int
    total_versions: int
    total_features: int
