"""Tests for the status command."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from archmap.cli import cli
from tests.conftest import invoke_json, seed_project


@pytest.mark.usefixtures("_isolated_project")
class TestStatusCommand:
    def test_overview(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        invoke_json(
            cli_runner, ["version", "set", "db", "mvp", "--content", "x", "--progress", "100"]
        )
        data = invoke_json(cli_runner, ["status"])
        assert data["op"] == "layer_overview"
        (row,) = data["data"]["items"]
        assert row["completed_mvp"] == 1

    def test_overview_human(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        result = cli_runner.invoke(cli, ["status"])
        assert result.exit_code == 0
        assert "core" in result.output
        assert "Progress" in result.output

    def test_by_version(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        data = invoke_json(cli_runner, ["status", "--version", "mvp"])
        assert data["op"] == "components_by_status"
        assert {c["id"] for c in data["data"]["planned"]} == {"db", "auth", "api"}
        assert data["data"]["complete"] == []

    def test_empty_project(self, cli_runner: CliRunner) -> None:
        data = invoke_json(cli_runner, ["status"])
        assert data["data"]["items"] == []
