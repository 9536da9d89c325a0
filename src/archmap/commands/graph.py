"""Command group: graph traversal and planning queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from archmap.commands._base import ArchGroup
from archmap.services.graph import GraphService

if TYPE_CHECKING:
    from archmap.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  archmap graph path api-gateway user-store
  archmap graph tree api-gateway --depth 3
  archmap graph neighbourhood auth --hops 2
  archmap graph order
  archmap graph dependents auth
  archmap graph next mvp"""


@click.group(cls=ArchGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Traverse the architecture graph."""


@graph.command(
    examples="""\
  archmap graph path api-gateway user-store
  archmap --json graph path web-app billing"""
)
@click.argument("from_id")
@click.argument("to_id")
@click.pass_obj
def path(app: AppContext, from_id: str, to_id: str) -> None:
    """Find the fewest-hop path between two nodes (any edge, either direction)."""
    app.emit(GraphService(app.repos).shortest_path(from_id, to_id))


@graph.command(
    examples="""\
  archmap graph tree api-gateway
  archmap graph tree api-gateway --depth 3"""
)
@click.argument("node_id")
@click.option(
    "--depth",
    type=click.IntRange(1, 10),
    default=None,
    help="Maximum depth (1-10). Defaults to [graph].tree_depth.",
)
@click.pass_obj
def tree(app: AppContext, node_id: str, depth: int | None) -> None:
    """Show what a node depends on, transitively."""
    max_depth = depth if depth is not None else app.settings.graph.tree_depth
    app.emit(GraphService(app.repos).dependency_tree(node_id, max_depth, strict=True))


@graph.command(
    examples="""\
  archmap graph neighbourhood auth
  archmap graph neighbourhood auth --hops 2"""
)
@click.argument("node_id")
@click.option(
    "--hops",
    type=click.IntRange(1, 5),
    default=None,
    help="Undirected hops (1-5). Defaults to [graph].neighbourhood_hops.",
)
@click.pass_obj
def neighbourhood(app: AppContext, node_id: str, hops: int | None) -> None:
    """Show the subgraph within N hops of a node."""
    n = hops if hops is not None else app.settings.graph.neighbourhood_hops
    app.emit(GraphService(app.repos).neighbourhood(node_id, n, strict=True))


@graph.command(
    examples="""\
  archmap graph order
  archmap -q graph order"""
)
@click.pass_obj
def order(app: AppContext) -> None:
    """List components in build order, dependencies first."""
    app.emit(GraphService(app.repos).implementation_order())


@graph.command(
    examples="""\
  archmap graph dependents auth"""
)
@click.argument("node_id")
@click.pass_obj
def dependents(app: AppContext, node_id: str) -> None:
    """List nodes that depend directly on a node."""
    app.emit(GraphService(app.repos).dependents(node_id, strict=True))


@graph.command(
    name="next",
    examples="""\
  archmap graph next mvp
  archmap --json graph next v1""",
)
@click.argument("version", default="mvp")
@click.pass_obj
def next_implementable(app: AppContext, version: str) -> None:
    """List unfinished components whose dependencies are complete."""
    app.emit(GraphService(app.repos).next_implementable(version))
