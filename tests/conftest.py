"""Shared pytest fixtures and test helpers for archmap tests."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from archmap.config.settings import ArchSettings
from archmap.domain.repositories import Repositories
from archmap.infrastructure.database.engine import init_database
from archmap.infrastructure.repositories.memory import memory_repositories
from archmap.infrastructure.store import ArchitectureStore


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "db" / "architecture.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project directory marked by an empty ``archmap.toml``."""
    (tmp_path / "archmap.toml").write_text("", encoding="utf-8")
    return tmp_path


@pytest.fixture
def store(project_root: Path) -> Iterator[ArchitectureStore]:
    """SQLite-backed store rooted at a temporary project."""
    settings = ArchSettings.from_cli(project_root=project_root)
    s = ArchitectureStore(settings)
    try:
        yield s
    finally:
        s.dispose()


@pytest.fixture
def memory_repos() -> Repositories:
    """Fresh in-memory repository bundle."""
    return memory_repositories()


@pytest.fixture(params=["memory", "sql"])
def any_repos(request: pytest.FixtureRequest) -> Repositories:
    """Run a test against both repository implementations."""
    if request.param == "memory":
        return memory_repositories()
    return request.getfixturevalue("store").repos


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project root so the CLI uses an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.chdir(project_root)
    monkeypatch.delenv("ARCHMAP_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service and command test modules)
# ---------------------------------------------------------------------------


def add_layer(repos: Repositories, layer_id: str, **kwargs: Any) -> dict[str, Any]:
    """Create a layer via ComponentService, asserting success."""
    from archmap.services.components import ComponentService

    name = kwargs.pop("name", layer_id.title())
    result = ComponentService(repos).create_layer(layer_id, name, **kwargs)
    assert result.ok, result.error
    return result.data


def add_component(
    repos: Repositories,
    node_id: str,
    layer: str = "core",
    **kwargs: Any,
) -> dict[str, Any]:
    """Create a component via ComponentService, asserting success."""
    from archmap.services.components import ComponentService

    name = kwargs.pop("name", node_id.replace("-", " ").title())
    node_type = kwargs.pop("node_type", "component")
    result = ComponentService(repos).create_component(node_id, name, node_type, layer, **kwargs)
    assert result.ok, result.error
    return result.data


def depends_on(repos: Repositories, source: str, target: str) -> dict[str, Any]:
    """Add a DEPENDS_ON edge via EdgeService, asserting success."""
    from archmap.services.edges import EdgeService

    result = EdgeService(repos).create_edge(source, target, "DEPENDS_ON")
    assert result.ok, result.error
    return result.data


def set_progress(repos: Repositories, node_id: str, version: str, progress: int) -> None:
    """Write a version record with explicit progress, asserting success."""
    from archmap.services.versions import VersionService

    result = VersionService(repos).update_version(node_id, version, "", progress=progress)
    assert result.ok, result.error


FEATURE_LOGIN = """\
Feature: User login

  Scenario: Successful login
    Given a registered user
    And the login page is open
    When the user submits valid credentials
    Then the dashboard is shown
    But no warning is displayed

  Scenario Outline: Rejected login
    Given a registered user
    When the user submits <password>
    Then an error is shown
"""


def invoke_json(runner: CliRunner, args: list[str], *, exit_code: int = 0) -> dict[str, Any]:
    """Invoke the CLI with ``--json`` and return the parsed payload."""
    from archmap.cli import cli

    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code == exit_code, result.output
    return json.loads(result.output)  # type: ignore[no-any-return]


def seed_project(runner: CliRunner) -> None:
    """Seed layer ``core`` with components api -> auth -> db through the CLI."""
    invoke_json(runner, ["layer", "create", "core", "Core"])
    invoke_json(
        runner, ["component", "create", "db", "Database", "--layer", "core", "--type", "store"]
    )
    invoke_json(runner, ["component", "create", "auth", "Auth", "--layer", "core"])
    invoke_json(runner, ["component", "create", "api", "API", "--layer", "core"])
    invoke_json(runner, ["edge", "add", "auth", "db", "DEPENDS_ON"])
    invoke_json(runner, ["edge", "add", "api", "auth", "DEPENDS_ON"])
