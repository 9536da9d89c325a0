"""Command group: per-node version records."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from archmap.commands._base import ArchGroup
from archmap.domain.types import VERSION_STATUSES
from archmap.services.versions import VersionService

if TYPE_CHECKING:
    from archmap.commands._context import AppContext

_VERSION_EXAMPLES = """\
  archmap version set auth mvp --content "Login and sessions" --progress 40
  archmap version set auth v1 --file docs/auth-v1.md --status in-progress
  archmap version show auth mvp
  archmap version list auth
  archmap version clear auth --yes"""


@click.group(cls=ArchGroup, examples=_VERSION_EXAMPLES)
@click.pass_obj
def version(app: AppContext) -> None:
    """Read and write version records."""


@version.command(
    name="set",
    examples="""\
  archmap version set auth mvp --content "Login and sessions"
  archmap version set auth mvp --content "Done" --progress 100 --status complete
  archmap version set auth overview --file docs/auth.md""",
)
@click.argument("node_id")
@click.argument("version_tag")
@click.option("--content", default=None, help="Version description text.")
@click.option(
    "--file",
    "content_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read content from a file.",
)
@click.option("--progress", type=int, default=None, help="Progress percentage (0-100).")
@click.option("--status", type=click.Choice(VERSION_STATUSES), default=None, help="Status.")
@click.pass_obj
def set_cmd(
    app: AppContext,
    node_id: str,
    version_tag: str,
    content: str | None,
    content_file: Path | None,
    progress: int | None,
    status: str | None,
) -> None:
    """Create or replace a version record."""
    if content_file is not None:
        content = content_file.read_text(encoding="utf-8")
    app.emit(
        VersionService(app.repos).update_version(
            node_id,
            version_tag,
            content,
            progress=progress,
            status=status,
        )
    )


@version.command(
    examples="""\
  archmap version show auth mvp"""
)
@click.argument("node_id")
@click.argument("version_tag")
@click.pass_obj
def show(app: AppContext, node_id: str, version_tag: str) -> None:
    """Show one version record with its step coverage."""
    app.emit(VersionService(app.repos).get_version(node_id, version_tag))


@version.command(
    name="list",
    examples="""\
  archmap version list auth""",
)
@click.argument("node_id")
@click.pass_obj
def list_cmd(app: AppContext, node_id: str) -> None:
    """List every version record of a node."""
    app.emit(VersionService(app.repos).list_versions(node_id))


@version.command(
    examples="""\
  archmap version clear auth --yes"""
)
@click.argument("node_id")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def clear(app: AppContext, node_id: str, yes: bool) -> None:
    """Delete every version record of a node."""
    if not yes and not app.settings.json_output:
        click.confirm(f"Delete all versions of {node_id}?", abort=True)
    app.emit(VersionService(app.repos).delete_all_versions(node_id))
