"""Root CLI group for archmap with global flags and command registration."""

from __future__ import annotations

import click

from archmap import __version__
from archmap.commands import register_commands
from archmap.commands._base import ArchGroup
from archmap.commands._context import AppContext
from archmap.config.settings import ArchSettings

_ROOT_EXAMPLES = """\
  archmap init --layer core=Core --layer api=API
  archmap component create auth "Auth Service" --layer core --version 0.3.0
  archmap edge add api auth DEPENDS_ON
  archmap graph order
  archmap --json graph next mvp
  archmap status"""


@click.group(cls=ArchGroup, invoke_without_command=True, examples=_ROOT_EXAMPLES)
@click.version_option(version=__version__, prog_name="archmap")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (ids only).")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """archmap: architecture graph, versions, and feature coverage."""
    settings = ArchSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
