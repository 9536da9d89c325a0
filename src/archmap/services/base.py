"""BaseService: shared foundation for archmap services.

Every service receives a :class:`Repositories` bundle at construction
time; SQL-backed in the CLI, in-memory in tests. Services hold no other
state, so one instance may serve any number of calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from archmap.infrastructure.graph.engine import GraphSnapshot

if TYPE_CHECKING:
    from archmap.domain.repositories import Repositories


class BaseService:
    """Base for the service-layer classes.

    Usage::

        class EdgeService(BaseService):
            def delete_edge(self, edge_id: int) -> ServiceResult:
                if self._repos.edges.find_by_id(edge_id) is None:
                    return not_found(...)
    """

    def __init__(self, repos: Repositories) -> None:
        self._repos = repos

    def _snapshot(self) -> GraphSnapshot:
        """Fresh graph over the current nodes and edges."""
        return GraphSnapshot.load(self._repos)
