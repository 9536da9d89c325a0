"""Tests for database engine setup and initialization."""

from pathlib import Path

from sqlalchemy import inspect, select, text
from sqlalchemy.engine import Engine

from archmap.infrastructure.database.engine import create_db_engine, init_database
from archmap.infrastructure.database.schema import nodes


class TestCreateDbEngine:
    def test_creates_engine(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        assert engine is not None

    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            result = conn.execute(text("PRAGMA journal_mode")).scalar()
            assert result == "wal"

    def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            result = conn.execute(text("PRAGMA foreign_keys")).scalar()
            assert result == 1


class TestInitDatabase:
    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        init_database(tmp_path / "nested" / "db" / "architecture.db")
        assert (tmp_path / "nested" / "db").is_dir()

    def test_creates_db_file(self, tmp_path: Path) -> None:
        db_path = tmp_path / "architecture.db"
        init_database(db_path)
        assert db_path.exists()

    def test_creates_all_tables(self, db_engine: Engine) -> None:
        table_names = set(inspect(db_engine).get_table_names())
        assert {"nodes", "edges", "node_versions", "features", "api_keys"} <= table_names

    def test_idempotent(self, tmp_path: Path) -> None:
        """Calling init_database twice keeps existing rows."""
        db_path = tmp_path / "architecture.db"
        engine = init_database(db_path)
        with engine.begin() as conn:
            conn.execute(nodes.insert().values(id="core", name="Core", type="layer"))
        engine.dispose()

        engine2 = init_database(db_path)
        with engine2.connect() as conn:
            rows = conn.execute(select(nodes.c.id)).fetchall()
        engine2.dispose()
        assert [r.id for r in rows] == ["core"]
