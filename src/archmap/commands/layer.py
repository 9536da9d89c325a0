"""Command group: architecture layers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from archmap.commands._base import ArchGroup
from archmap.services.architecture import ArchitectureService
from archmap.services.components import ComponentService

if TYPE_CHECKING:
    from archmap.commands._context import AppContext

_LAYER_EXAMPLES = """\
  archmap layer create core "Core Services" --sort-order 1
  archmap layer list
  archmap layer show core
  archmap layer overview"""


@click.group(cls=ArchGroup, examples=_LAYER_EXAMPLES)
@click.pass_obj
def layer(app: AppContext) -> None:
    """Create and inspect layers."""


@layer.command(
    examples="""\
  archmap layer create core "Core Services"
  archmap layer create data Data --color "#3366ff" --sort-order 2"""
)
@click.argument("layer_id")
@click.argument("name")
@click.option("--description", default=None, help="Free-text description.")
@click.option("--color", default=None, help="Display color.")
@click.option("--icon", default=None, help="Display icon.")
@click.option("--sort-order", type=int, default=0, show_default=True, help="Display position.")
@click.pass_obj
def create(
    app: AppContext,
    layer_id: str,
    name: str,
    description: str | None,
    color: str | None,
    icon: str | None,
    sort_order: int,
) -> None:
    """Create a layer."""
    app.emit(
        ComponentService(app.repos).create_layer(
            layer_id,
            name,
            color=color,
            icon=icon,
            description=description,
            sort_order=sort_order,
        )
    )


@layer.command(
    name="list",
    examples="""\
  archmap layer list
  archmap -q layer list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List layers in display order with component counts."""
    app.emit(ComponentService(app.repos).list_layers())


@layer.command(
    examples="""\
  archmap layer show core"""
)
@click.argument("layer_id")
@click.pass_obj
def show(app: AppContext, layer_id: str) -> None:
    """Show a layer and its components."""
    app.emit(ComponentService(app.repos).get_layer(layer_id))


@layer.command(
    examples="""\
  archmap layer overview
  archmap --json layer overview"""
)
@click.pass_obj
def overview(app: AppContext) -> None:
    """Per-layer completion and mean progress."""
    app.emit(ArchitectureService(app.repos).layer_overview())
