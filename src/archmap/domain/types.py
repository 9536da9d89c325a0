"""Classification enums for nodes, edges, versions, and API keys."""

from __future__ import annotations

from enum import StrEnum


class NodeType(StrEnum):
    """Vertex kinds in the architecture graph."""

    LAYER = "layer"
    COMPONENT = "component"
    STORE = "store"
    EXTERNAL = "external"
    PHASE = "phase"
    APP = "app"
    MCP = "mcp"


class EdgeType(StrEnum):
    """Typed relationships between two nodes.

    ``CONTAINS`` expresses layer membership and is excluded from
    relationship views. ``DEPENDS_ON`` drives every dependency traversal.
    """

    CONTAINS = "CONTAINS"
    CONTROLS = "CONTROLS"
    DEPENDS_ON = "DEPENDS_ON"
    READS_FROM = "READS_FROM"
    WRITES_TO = "WRITES_TO"
    DISPATCHES_TO = "DISPATCHES_TO"
    ESCALATES_TO = "ESCALATES_TO"
    PROXIES = "PROXIES"
    SANITISES = "SANITISES"
    GATES = "GATES"
    SEQUENCE = "SEQUENCE"


class VersionStatus(StrEnum):
    """Lifecycle status of a version record."""

    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


class ApiKeyScope(StrEnum):
    """Access scopes granted to an API key."""

    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


NODE_TYPES: tuple[str, ...] = tuple(t.value for t in NodeType)
EDGE_TYPES: tuple[str, ...] = tuple(t.value for t in EdgeType)
VERSION_STATUSES: tuple[str, ...] = tuple(s.value for s in VersionStatus)
API_KEY_SCOPES: tuple[str, ...] = tuple(s.value for s in ApiKeyScope)
