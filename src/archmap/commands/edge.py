"""Command group: relationships between nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from archmap.commands._base import ArchGroup
from archmap.domain.types import EDGE_TYPES
from archmap.services.edges import EdgeService

if TYPE_CHECKING:
    from archmap.commands._context import AppContext

_EDGE_EXAMPLES = """\
  archmap edge add api-gateway auth DEPENDS_ON
  archmap edge add web-app api-gateway CONTROLS --label "REST"
  archmap edge remove 12"""


@click.group(cls=ArchGroup, examples=_EDGE_EXAMPLES)
@click.pass_obj
def edge(app: AppContext) -> None:
    """Add and remove typed edges."""


@edge.command(
    examples="""\
  archmap edge add api-gateway auth DEPENDS_ON
  archmap edge add worker queue WRITES_TO --label "jobs" --metadata '{"async": true}'"""
)
@click.argument("source_id")
@click.argument("target_id")
@click.argument("edge_type", type=click.Choice(EDGE_TYPES, case_sensitive=False))
@click.option("--label", default=None, help="Short label shown on the edge.")
@click.option("--metadata", default=None, help="Opaque metadata string (often JSON).")
@click.pass_obj
def add(
    app: AppContext,
    source_id: str,
    target_id: str,
    edge_type: str,
    label: str | None,
    metadata: str | None,
) -> None:
    """Connect two nodes."""
    app.emit(
        EdgeService(app.repos).create_edge(
            source_id,
            target_id,
            edge_type.upper(),
            label=label,
            metadata=metadata,
        )
    )


@edge.command(
    examples="""\
  archmap edge remove 12"""
)
@click.argument("edge_id", type=int)
@click.pass_obj
def remove(app: AppContext, edge_id: int) -> None:
    """Delete an edge by id."""
    app.emit(EdgeService(app.repos).delete_edge(edge_id))
