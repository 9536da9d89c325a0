"""Node entity: a vertex in the architecture graph.

A node belongs to a layer (via its ``layer`` field) and can own versioned
documentation, feature files, and typed edges. The entity is a passive
record: referential checks (layer exists, id unique) live in the services.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, field_validator

from archmap.domain.ids import leading_major
from archmap.domain.types import NodeType


class Node(BaseModel):
    """Immutable node record."""

    model_config = {"frozen": True}

    id: str
    name: str
    type: NodeType
    layer: str | None = None
    color: str | None = None
    icon: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    sort_order: int = 0
    current_version: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _decode_tags(cls, value: Any) -> Any:
        """Accept the JSON text form used by storage."""
        if value is None:
            return []
        if isinstance(value, str):
            return json.loads(value) if value else []
        return value

    @field_validator("sort_order", mode="before")
    @classmethod
    def _default_sort_order(cls, value: Any) -> Any:
        return 0 if value is None else value

    def is_layer(self) -> bool:
        return self.type == NodeType.LAYER

    def is_app(self) -> bool:
        return self.type in (NodeType.APP, NodeType.MCP)

    def display_state(self) -> str:
        """Human label derived from ``current_version``.

        ``None`` → ``"Concept"``; major < 1 → ``"MVP"``; otherwise ``"vN"``.
        """
        if not self.current_version:
            return "Concept"
        major = leading_major(self.current_version)
        if major is None or major < 1:
            return "MVP"
        return f"v{major}"

    def visual_state(self) -> str:
        """Progression-tree state: ``locked``, ``in-progress`` or ``complete``."""
        if not self.current_version:
            return "locked"
        major = leading_major(self.current_version)
        if major is None or major < 1:
            return "in-progress"
        return "complete"

    def tags_json(self) -> str:
        return json.dumps(self.tags)

    def summary(self) -> dict[str, str]:
        """Compact ``{id, name, type}`` form used by graph query results."""
        return {"id": self.id, "name": self.name, "type": str(self.type)}

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
