"""UpgradeService: database migration with Alembic.

Pipeline: BACKUP, then MIGRATE (or STAMP for databases created before
revision tracking), then REPORT.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from alembic.util.exc import CommandError
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from archmap.infrastructure.database.migrations import build_config
from archmap.services._helpers import fail
from archmap.services.result import ServiceResult
from archmap.services.telemetry import traced

if TYPE_CHECKING:
    from alembic.config import Config

    from archmap.infrastructure.store import ArchitectureStore

logger = logging.getLogger(__name__)

_MIGRATION_ERRORS = (CommandError, SQLAlchemyError, OSError)


class UpgradeService:
    """Schema migrations for the store's SQLite database."""

    def __init__(self, store: ArchitectureStore) -> None:
        self._store = store

    def _config(self) -> Config:
        return build_config(f"sqlite:///{self._store.db_path}")

    def _tables_exist(self) -> bool:
        return "nodes" in inspect(self._store.engine).get_table_names()

    @traced
    def check_pending(self) -> ServiceResult:
        """List pending migrations without applying them."""
        op = "upgrade"
        try:
            script = ScriptDirectory.from_config(self._config())
            head = script.get_current_head()
            with self._store.engine.connect() as conn:
                current = MigrationContext.configure(conn).get_current_revision()
        except _MIGRATION_ERRORS as exc:
            return fail(op, "UPGRADE_FAILED", f"Failed to check migrations: {exc}")

        # Walk from head down to the current revision.
        pending: list[dict[str, Any]] = []
        if current != head and head is not None:
            rev = script.get_revision(head)
            while rev is not None and rev.revision != current:
                pending.append({"revision": rev.revision, "description": rev.doc or ""})
                if rev.down_revision is None:
                    break
                rev = script.get_revision(str(rev.down_revision))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "pending_count": len(pending),
                "pending": pending,
                "current": current,
                "head": head,
            },
        )

    @traced
    def apply(self) -> ServiceResult:
        """Back up the database, then bring it to the head revision."""
        op = "upgrade"
        check = self.check_pending()
        if not check.ok:
            return check

        pending_count = check.data["pending_count"]
        if pending_count == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": check.data["head"],
                    "message": "Database is already up to date",
                },
            )

        try:
            backup_path = self._store.backup()
        except OSError as exc:
            return fail(op, "UPGRADE_FAILED", f"Backup failed: {exc}")

        stamped = False
        try:
            cfg = self._config()
            if check.data["current"] is None and self._tables_exist():
                # Tables were created directly; record them as the head schema.
                command.stamp(cfg, "head")
                stamped = True
            else:
                command.upgrade(cfg, "head")
        except _MIGRATION_ERRORS as exc:
            return fail(
                op,
                "UPGRADE_FAILED",
                f"Migration failed: {exc}. Backup at: {backup_path}",
                backup_path=str(backup_path),
            )

        logger.info("Database upgraded to %s", check.data["head"])
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "applied_count": pending_count,
                "current": check.data["head"],
                "stamped": stamped,
                "backup_path": str(backup_path),
            },
        )

    @traced
    def stamp_current(self) -> ServiceResult:
        """Record the database as at head without running migrations."""
        op = "upgrade"
        try:
            cfg = self._config()
            command.stamp(cfg, "head")
            head = ScriptDirectory.from_config(cfg).get_current_head()
        except _MIGRATION_ERRORS as exc:
            return fail(op, "UPGRADE_FAILED", f"Failed to stamp database: {exc}")
        return ServiceResult(ok=True, op=op, data={"stamped": True, "current": head})
