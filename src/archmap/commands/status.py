"""Command: project progress at a glance."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from archmap.commands._base import ArchCommand
from archmap.services.architecture import ArchitectureService

if TYPE_CHECKING:
    from archmap.commands._context import AppContext


@click.command(
    cls=ArchCommand,
    examples="""\
  archmap status
  archmap status --version mvp
  archmap --json status --version v1""",
)
@click.option(
    "--version",
    "version_tag",
    default=None,
    help="Classify components as complete / in progress / planned for this version.",
)
@click.pass_obj
def status(app: AppContext, version_tag: str | None) -> None:
    """Show per-layer progress, or component status for one version."""
    svc = ArchitectureService(app.repos)
    if version_tag is None:
        app.emit(svc.layer_overview())
    else:
        app.emit(svc.components_by_status(version_tag))
