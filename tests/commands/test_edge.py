"""Tests for the edge command group."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from archmap.cli import cli
from tests.conftest import invoke_json, seed_project


@pytest.mark.usefixtures("_isolated_project")
class TestEdgeCommands:
    def test_add_case_insensitive_type(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        data = invoke_json(cli_runner, ["edge", "add", "api", "db", "reads_from", "--label", "sql"])
        assert data["data"]["type"] == "READS_FROM"
        assert data["data"]["label"] == "sql"

    def test_unknown_type_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["edge", "add", "api", "db", "LIKES"])
        assert result.exit_code == 2

    def test_self_reference(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        data = invoke_json(cli_runner, ["edge", "add", "api", "api", "CONTROLS"], exit_code=1)
        assert data["error"]["code"] == "SELF_REFERENCE"

    def test_duplicate(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        data = invoke_json(cli_runner, ["edge", "add", "api", "auth", "DEPENDS_ON"], exit_code=1)
        assert data["error"]["code"] == "ALREADY_EXISTS"

    def test_remove(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        edge_id = invoke_json(cli_runner, ["edge", "add", "api", "db", "WRITES_TO"])["data"]["id"]
        data = invoke_json(cli_runner, ["edge", "remove", str(edge_id)])
        assert data["op"] == "delete_edge"
        missing = invoke_json(cli_runner, ["edge", "remove", str(edge_id)], exit_code=1)
        assert missing["error"]["code"] == "NOT_FOUND"
