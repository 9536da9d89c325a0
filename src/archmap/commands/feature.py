"""Command group: Gherkin feature files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from archmap.commands._base import ArchGroup
from archmap.domain.features import version_from_filename
from archmap.services.features import FeatureService

if TYPE_CHECKING:
    from archmap.commands._context import AppContext

_FEATURE_EXAMPLES = """\
  archmap feature upload auth features/login.feature
  archmap feature upload auth features/ --version v1
  archmap feature list auth --version mvp
  archmap feature show auth mvp login.feature
  archmap feature search "password reset"
  archmap feature totals auth mvp"""


def _collect(paths: tuple[Path, ...]) -> list[Path]:
    """Expand directories to their ``*.feature`` files, sorted by name."""
    files: list[Path] = []
    for p in paths:
        if p.is_dir():
            files.extend(sorted(p.glob("*.feature")))
        else:
            files.append(p)
    return files


@click.group(cls=ArchGroup, examples=_FEATURE_EXAMPLES)
@click.pass_obj
def feature(app: AppContext) -> None:
    """Upload, list, search, and delete feature files."""


@feature.command(
    examples="""\
  archmap feature upload auth login.feature
  archmap feature upload auth v1-sso.feature
  archmap feature upload auth features/ --version mvp
  archmap feature upload auth a.feature v2-b.feature"""
)
@click.argument("node_id")
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--version",
    "version_tag",
    default=None,
    help="Version tag for every file. Default: from a vN- filename prefix, else mvp.",
)
@click.pass_obj
def upload(app: AppContext, node_id: str, paths: tuple[Path, ...], version_tag: str | None) -> None:
    """Attach feature files to a component.

    One file is uploaded directly. Several files (or a directory) go up
    as a batch of at most 50; invalid files are reported and skipped.
    """
    files = _collect(paths)
    if not files:
        raise click.UsageError("No .feature files found.")
    svc = FeatureService(app.repos)

    if len(files) == 1:
        f = files[0]
        app.emit(svc.upload_feature(node_id, f.name, f.read_text(encoding="utf-8"), version_tag))
        return

    if version_tag is not None:
        entries = [{"filename": f.name, "content": f.read_text(encoding="utf-8")} for f in files]
        app.emit(svc.batch_upload(node_id, version_tag, entries))
        return

    entries = [
        {
            "node_id": node_id,
            "version": version_from_filename(f.name),
            "filename": f.name,
            "content": f.read_text(encoding="utf-8"),
        }
        for f in files
    ]
    app.emit(svc.batch_upload_cross_component(entries))


@feature.command(
    name="list",
    examples="""\
  archmap feature list auth
  archmap feature list auth --version v1""",
)
@click.argument("node_id")
@click.option("--version", "version_tag", default=None, help="Only this version tag.")
@click.pass_obj
def list_cmd(app: AppContext, node_id: str, version_tag: str | None) -> None:
    """List a component's features with scenario and step totals."""
    app.emit(FeatureService(app.repos).list_features(node_id, version_tag))


@feature.command(
    examples="""\
  archmap feature show auth mvp login.feature"""
)
@click.argument("node_id")
@click.argument("version_tag")
@click.argument("filename")
@click.pass_obj
def show(app: AppContext, node_id: str, version_tag: str, filename: str) -> None:
    """Print one feature file."""
    app.emit(FeatureService(app.repos).get_feature(node_id, version_tag, filename))


@feature.command(
    examples="""\
  archmap feature delete auth login.feature
  archmap feature delete auth login.feature --version v1
  archmap feature delete auth --all-of v1"""
)
@click.argument("node_id")
@click.argument("filename", required=False)
@click.option("--version", "version_tag", default=None, help="Only under this version tag.")
@click.option("--all-of", "all_of", default=None, help="Delete every feature of this version.")
@click.pass_obj
def delete(
    app: AppContext,
    node_id: str,
    filename: str | None,
    version_tag: str | None,
    all_of: str | None,
) -> None:
    """Delete one feature file, or all files of a version."""
    svc = FeatureService(app.repos)
    if all_of is not None:
        app.emit(svc.delete_version_features(node_id, all_of))
        return
    if filename is None:
        raise click.UsageError("Give a FILENAME or --all-of VERSION.")
    app.emit(svc.delete_feature(node_id, filename, version_tag))


@feature.command(
    examples="""\
  archmap feature search login
  archmap feature search "Given a user" --version mvp --limit 10"""
)
@click.argument("query")
@click.option("--version", "version_tag", default=None, help="Only this version tag.")
@click.option("--limit", type=click.IntRange(1, 500), default=50, show_default=True)
@click.pass_obj
def search(app: AppContext, query: str, version_tag: str | None, limit: int) -> None:
    """Search feature text (case-insensitive substring)."""
    app.emit(FeatureService(app.repos).search_features(query, version_tag, limit))


@feature.command(
    examples="""\
  archmap feature totals auth mvp"""
)
@click.argument("node_id")
@click.argument("version_tag")
@click.pass_obj
def totals(app: AppContext, node_id: str, version_tag: str) -> None:
    """Total steps and feature count for one component version."""
    app.emit(FeatureService(app.repos).step_totals(node_id, version_tag))
