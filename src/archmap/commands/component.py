"""Command group: component lifecycle."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from archmap.commands._base import ArchGroup, split_csv
from archmap.domain.types import NODE_TYPES, NodeType
from archmap.services.architecture import ArchitectureService
from archmap.services.components import ComponentService

if TYPE_CHECKING:
    from archmap.commands._context import AppContext

_COMPONENT_TYPES = [t for t in NODE_TYPES if t != NodeType.LAYER]

_COMPONENT_EXAMPLES = """\
  archmap component create auth "Auth Service" --layer core
  archmap component update auth --version 1.2.0 --tags security,identity
  archmap component move auth platform
  archmap component show auth
  archmap component delete auth"""


@click.group(cls=ArchGroup, examples=_COMPONENT_EXAMPLES)
@click.pass_obj
def component(app: AppContext) -> None:
    """Create, update, move, and delete components."""


@component.command(
    examples="""\
  archmap component create auth "Auth Service" --layer core
  archmap component create billing Billing --layer core --type store --version 0.2.0
  archmap component create web "Web App" --layer apps --type app --tags ui,react"""
)
@click.argument("node_id")
@click.argument("name")
@click.option("--layer", "layer_id", required=True, help="Parent layer id.")
@click.option(
    "--type",
    "node_type",
    type=click.Choice(_COMPONENT_TYPES),
    default="component",
    show_default=True,
    help="Node type.",
)
@click.option("--description", default=None, help="Free-text description.")
@click.option("--tags", default=None, callback=split_csv, help="Comma-separated tags.")
@click.option("--color", default=None, help="Display color.")
@click.option("--icon", default=None, help="Display icon.")
@click.option("--sort-order", type=int, default=0, show_default=True, help="Position in layer.")
@click.option("--version", "current_version", default=None, help="Current semver.")
@click.pass_obj
def create(
    app: AppContext,
    node_id: str,
    name: str,
    layer_id: str,
    node_type: str,
    description: str | None,
    tags: list[str] | None,
    color: str | None,
    icon: str | None,
    sort_order: int,
    current_version: str | None,
) -> None:
    """Create a component in a layer with its default versions."""
    app.emit(
        ComponentService(app.repos).create_component(
            node_id,
            name,
            node_type,
            layer_id,
            description=description,
            tags=tags,
            color=color,
            icon=icon,
            sort_order=sort_order,
            current_version=current_version,
        )
    )


@component.command(
    examples="""\
  archmap component update auth --name "Identity Service"
  archmap component update auth --version 1.0.0"""
)
@click.argument("node_id")
@click.option("--name", default=None, help="New display name.")
@click.option("--description", default=None, help="New description.")
@click.option("--tags", default=None, callback=split_csv, help="Replace tags (comma-separated).")
@click.option("--sort-order", type=int, default=None, help="New position in layer.")
@click.option(
    "--version",
    "current_version",
    default=None,
    help="New current semver; recomputes phase progress.",
)
@click.pass_obj
def update(
    app: AppContext,
    node_id: str,
    name: str | None,
    description: str | None,
    tags: list[str] | None,
    sort_order: int | None,
    current_version: str | None,
) -> None:
    """Change selected fields of a component."""
    app.emit(
        ComponentService(app.repos).update_component(
            node_id,
            name=name,
            description=description,
            tags=tags,
            sort_order=sort_order,
            current_version=current_version,
        )
    )


@component.command(
    examples="""\
  archmap component move auth platform"""
)
@click.argument("node_id")
@click.argument("layer_id")
@click.pass_obj
def move(app: AppContext, node_id: str, layer_id: str) -> None:
    """Move a component to another layer."""
    app.emit(ComponentService(app.repos).move_component(node_id, layer_id))


@component.command(
    examples="""\
  archmap component delete auth
  archmap component delete auth --yes"""
)
@click.argument("node_id")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def delete(app: AppContext, node_id: str, yes: bool) -> None:
    """Delete a node with its versions, features, and edges."""
    if not yes and not app.settings.json_output:
        click.confirm(f"Delete {node_id} and everything attached to it?", abort=True)
    app.emit(ComponentService(app.repos).delete_component(node_id))


@component.command(
    examples="""\
  archmap component show auth
  archmap --json component show auth"""
)
@click.argument("node_id")
@click.pass_obj
def show(app: AppContext, node_id: str) -> None:
    """Show a component with versions, features, and neighbours."""
    app.emit(ArchitectureService(app.repos).component_context(node_id))
