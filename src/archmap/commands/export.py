"""Command group: export the architecture and feature files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from archmap.commands._base import ArchGroup
from archmap.services.architecture import ArchitectureService
from archmap.services.features import FeatureService

if TYPE_CHECKING:
    from archmap.commands._context import AppContext

_EXPORT_EXAMPLES = """\
  archmap export architecture
  archmap export architecture --output build/architecture.json
  archmap export features --output-dir web
  archmap export features --component auth"""


@click.group(cls=ArchGroup, examples=_EXPORT_EXAMPLES)
@click.pass_obj
def export(app: AppContext) -> None:
    """Write the architecture or feature files to disk."""


@export.command(
    examples="""\
  archmap export architecture
  archmap export architecture -o site/data.json"""
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output JSON file. Defaults to [export].architecture_path.",
)
@click.pass_obj
def architecture(app: AppContext, output: Path | None) -> None:
    """Write the enriched architecture as JSON."""
    target = output or app.settings.resolve(app.settings.export.architecture_path)
    app.emit(ArchitectureService(app.repos).export_architecture(target))


@export.command(
    examples="""\
  archmap export features
  archmap export features --output-dir web --component auth"""
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Root directory. Defaults to [export].features_dir.",
)
@click.option("--component", default=None, help="Only this component's features.")
@click.pass_obj
def features(app: AppContext, output_dir: Path | None, component: str | None) -> None:
    """Write feature files to components/<id>/features/."""
    target = output_dir or app.settings.resolve(app.settings.export.features_dir)
    app.emit(FeatureService(app.repos).export_features(target, component))
