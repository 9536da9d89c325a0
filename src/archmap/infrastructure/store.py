"""ArchitectureStore: the persistent backing for every service.

Constructed once at CLI startup from :class:`ArchSettings` and kept on the
click context. It owns the SQLite engine and hands services the
repository bundle built over it.
"""

from __future__ import annotations

import logging
import shutil
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from archmap.infrastructure.database.engine import init_database
from archmap.infrastructure.repositories.sql import sql_repositories

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from archmap.config.settings import ArchSettings
    from archmap.domain.repositories import Repositories

logger = logging.getLogger(__name__)


class ArchitectureStore:
    """SQLite engine plus the repositories that read and write it."""

    def __init__(self, settings: ArchSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(settings.db_path)
        self._repos = sql_repositories(self._engine)

    @property
    def root(self) -> Path:
        return self._settings.project_root

    @property
    def db_path(self) -> Path:
        return self._settings.db_path

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def repos(self) -> Repositories:
        return self._repos

    @property
    def settings(self) -> ArchSettings:
        return self._settings

    def backup(self) -> Path:
        """Copy the database file to ``backups/`` beside it; return the copy."""
        backup_dir = self.db_path.parent / "backups"
        backup_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
        target = backup_dir / f"{self.db_path.stem}-{stamp}{self.db_path.suffix}"
        shutil.copy2(self.db_path, target)
        logger.debug("Database backed up to %s", target)
        return target

    def dispose(self) -> None:
        self._engine.dispose()
