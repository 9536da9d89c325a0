"""Edge entity: a typed, directed relationship between two nodes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from archmap.domain.types import EdgeType


class Edge(BaseModel):
    """Immutable edge record. ``id`` is None until persisted."""

    model_config = {"frozen": True}

    id: int | None = None
    source_id: str
    target_id: str
    type: EdgeType
    label: str | None = None
    metadata: str | None = None

    def is_containment(self) -> bool:
        return self.type == EdgeType.CONTAINS

    def key(self) -> tuple[str, str, str]:
        """The ``(source_id, target_id, type)`` uniqueness key."""
        return self.source_id, self.target_id, str(self.type)

    def summary(self) -> dict[str, str]:
        """Compact ``{source_id, target_id, type}`` form used by graph results."""
        return {
            "source_id": self.source_id,
            "target_id": self.target_id,
            "type": str(self.type),
        }

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
