"""Tests for UpgradeService: database migration with Alembic."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

from sqlalchemy import create_engine

from archmap.infrastructure.store import ArchitectureStore
from archmap.services.upgrade import UpgradeService

# ---------------------------------------------------------------------------
# check_pending()
# ---------------------------------------------------------------------------


class TestCheckPending:
    def test_check_pending_on_stamped_store(self, store: ArchitectureStore) -> None:
        """A store stamped at head has 0 pending."""
        svc = UpgradeService(store)
        svc.stamp_current()

        result = svc.check_pending()
        assert result.ok
        assert result.data["pending_count"] == 0
        assert result.data["current"] == result.data["head"]

    def test_check_pending_unstamped_db(self, store: ArchitectureStore) -> None:
        """Tables created directly (no alembic_version) show pending migrations."""
        result = UpgradeService(store).check_pending()
        assert result.ok
        assert result.data["current"] is None
        assert result.data["pending_count"] > 0
        assert result.data["pending"][0]["revision"] == "001_baseline"

    def test_check_pending_reports_head_revision(self, store: ArchitectureStore) -> None:
        result = UpgradeService(store).check_pending()
        assert result.ok
        assert result.data["head"] == "001_baseline"


# ---------------------------------------------------------------------------
# apply()
# ---------------------------------------------------------------------------


class TestApply:
    def test_apply_already_current(self, store: ArchitectureStore) -> None:
        svc = UpgradeService(store)
        svc.stamp_current()

        result = svc.apply()
        assert result.ok
        assert result.data["applied_count"] == 0
        assert "already up to date" in result.data["message"].lower()

    def test_apply_existing_tables_stamps(self, store: ArchitectureStore) -> None:
        """Existing tables without a revision are stamped rather than migrated."""
        result = UpgradeService(store).apply()
        assert result.ok
        assert result.data["applied_count"] > 0
        assert result.data["stamped"] is True
        assert UpgradeService(store).check_pending().data["pending_count"] == 0

    def test_apply_creates_backup(self, store: ArchitectureStore) -> None:
        result = UpgradeService(store).apply()
        assert result.ok
        backup = Path(result.data["backup_path"])
        assert backup.exists()
        assert backup.parent == store.db_path.parent / "backups"

    def test_apply_keeps_data(self, store: ArchitectureStore) -> None:
        from tests.conftest import add_layer

        add_layer(store.repos, "core")
        assert UpgradeService(store).apply().ok
        assert store.repos.nodes.exists("core")


# ---------------------------------------------------------------------------
# stamp_current()
# ---------------------------------------------------------------------------


class TestStampCurrent:
    def test_stamp_current(self, store: ArchitectureStore) -> None:
        result = UpgradeService(store).stamp_current()
        assert result.ok
        assert result.data["stamped"] is True
        assert result.data["current"] == "001_baseline"


# ---------------------------------------------------------------------------
# _tables_exist()
# ---------------------------------------------------------------------------


class TestTablesExist:
    def test_tables_exist_true(self, store: ArchitectureStore) -> None:
        assert UpgradeService(store)._tables_exist() is True

    def test_tables_exist_false_on_empty_db(self, tmp_path: Path) -> None:
        mock_store = MagicMock()
        mock_store.engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        mock_store.db_path = tmp_path / "empty.db"
        assert UpgradeService(mock_store)._tables_exist() is False
