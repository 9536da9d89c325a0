"""Command: project initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from archmap.commands._base import ArchCommand

if TYPE_CHECKING:
    from archmap.commands._context import AppContext

_INIT_EXAMPLES = """\
  archmap init
  archmap init /path/to/project
  archmap init . --layer core="Core Services" --layer data=Data
  archmap init --db var/arch.db"""


def _parse_layer(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> list[tuple[str, str]]:
    """``("core=Core Services", "data")`` → ``[("core", "Core Services"), ("data", "data")]``."""
    layers: list[tuple[str, str]] = []
    for raw in values:
        layer_id, _, name = raw.partition("=")
        layer_id = layer_id.strip()
        if not layer_id:
            raise click.BadParameter(f"expected ID or ID=NAME, got {raw!r}")
        layers.append((layer_id, name.strip() or layer_id))
    return layers


@click.command("init", cls=ArchCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--db", "db_path", default=None, help="Database path relative to the project.")
@click.option(
    "--layer",
    "layers",
    multiple=True,
    callback=_parse_layer,
    help="Seed a layer as ID or ID=NAME (repeatable, in display order).",
)
@click.pass_obj
def init_cmd(
    app: AppContext,
    path: str,
    db_path: str | None,
    layers: list[tuple[str, str]],
) -> None:
    """Initialize a new archmap project."""
    from archmap.services.init import InitService

    app.emit(InitService.init_project(Path(path).resolve(), db_path=db_path, layers=layers))
