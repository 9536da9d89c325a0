"""Tests for ArchitectureStore: engine ownership and backups."""

from __future__ import annotations

from pathlib import Path

from archmap.config.settings import ArchSettings
from archmap.infrastructure.store import ArchitectureStore
from tests.conftest import add_layer


class TestArchitectureStore:
    def test_db_path_under_project_root(self, store: ArchitectureStore, project_root: Path) -> None:
        assert store.root == project_root
        assert store.db_path == project_root / "db" / "architecture.db"
        assert store.db_path.is_file()

    def test_configured_db_path(self, tmp_path: Path) -> None:
        (tmp_path / "archmap.toml").write_text('[database]\npath = "data/x.db"\n', encoding="utf-8")
        s = ArchitectureStore(ArchSettings.from_cli(project_root=tmp_path))
        try:
            assert s.db_path == tmp_path / "data" / "x.db"
            assert s.db_path.is_file()
        finally:
            s.dispose()

    def test_repos_persist_across_stores(self, project_root: Path) -> None:
        settings = ArchSettings.from_cli(project_root=project_root)
        first = ArchitectureStore(settings)
        add_layer(first.repos, "core")
        first.dispose()

        second = ArchitectureStore(settings)
        try:
            assert second.repos.nodes.exists("core")
        finally:
            second.dispose()

    def test_backup_copies_database(self, store: ArchitectureStore) -> None:
        add_layer(store.repos, "core")
        backup = store.backup()
        assert backup.is_file()
        assert backup.parent == store.db_path.parent / "backups"
        assert backup.name.startswith("architecture-")
        assert backup.suffix == ".db"
