"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy store initialization, service
construction, and centralized result emission (stdout/stderr routing and
exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from archmap.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from archmap.config.settings import ArchSettings
    from archmap.domain.repositories import Repositories
    from archmap.infrastructure.store import ArchitectureStore
    from archmap.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The store is lazily
    initialized on first use so ``--help``, ``--version`` and ``init``
    never open a database.
    """

    def __init__(self, settings: ArchSettings) -> None:
        self.settings = settings
        self._store: ArchitectureStore | None = None

        from archmap.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from archmap.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> ArchitectureStore:
        """The store instance (created lazily on first access)."""
        if self._store is None:
            from archmap.infrastructure.store import ArchitectureStore

            self._store = ArchitectureStore(self.settings)
        return self._store

    @property
    def repos(self) -> Repositories:
        return self.store.repos

    def close(self) -> None:
        """Dispose of the store's engine, if one was opened."""
        if self._store is not None:
            self._store.dispose()
            self._store = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
