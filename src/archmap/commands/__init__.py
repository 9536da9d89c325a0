"""Subcommand modules for archmap.

Provides register_commands() which uses deferred imports to keep
``archmap --help`` fast as the codebase grows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    8 groups (have subcommands) + 3 standalone commands.
    """
    # --- Groups ---
    from archmap.commands.component import component
    from archmap.commands.edge import edge
    from archmap.commands.export import export
    from archmap.commands.feature import feature
    from archmap.commands.graph import graph
    from archmap.commands.keys import keys
    from archmap.commands.layer import layer
    from archmap.commands.version import version

    cli.add_command(component)
    cli.add_command(layer)
    cli.add_command(edge)
    cli.add_command(version)
    cli.add_command(feature)
    cli.add_command(graph)
    cli.add_command(export)
    cli.add_command(keys)

    # --- Standalone commands ---
    from archmap.commands.init_cmd import init_cmd
    from archmap.commands.status import status
    from archmap.commands.upgrade import upgrade

    cli.add_command(init_cmd)
    cli.add_command(upgrade)
    cli.add_command(status)
