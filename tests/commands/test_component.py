"""Tests for the component command group."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from archmap.cli import cli
from tests.conftest import invoke_json, seed_project


@pytest.mark.usefixtures("_isolated_project")
class TestComponentCreate:
    def test_create(self, cli_runner: CliRunner) -> None:
        invoke_json(cli_runner, ["layer", "create", "core", "Core"])
        data = invoke_json(
            cli_runner,
            [
                "component",
                "create",
                "auth",
                "Auth Service",
                "--layer",
                "core",
                "--tags",
                "security, identity",
                "--version",
                "0.3.0",
            ],
        )
        assert data["op"] == "create_component"
        assert data["data"]["id"] == "auth"
        assert data["data"]["tags"] == ["security", "identity"]
        assert data["data"]["versions"] == ["overview", "mvp", "v1", "v2"]

    def test_human_output(self, cli_runner: CliRunner) -> None:
        invoke_json(cli_runner, ["layer", "create", "core", "Core"])
        result = cli_runner.invoke(cli, ["component", "create", "auth", "Auth", "--layer", "core"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "create_component" in result.output

    def test_unknown_layer_exits_1(self, cli_runner: CliRunner) -> None:
        data = invoke_json(
            cli_runner, ["component", "create", "auth", "Auth", "--layer", "nope"], exit_code=1
        )
        assert data["ok"] is False
        assert data["error"]["code"] == "INVALID_LAYER"

    def test_layer_type_rejected_by_click(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["component", "create", "x", "X", "--layer", "core", "--type", "layer"]
        )
        assert result.exit_code == 2

    def test_layer_required(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["component", "create", "x", "X"])
        assert result.exit_code == 2
        assert "--layer" in result.output


@pytest.mark.usefixtures("_isolated_project")
class TestComponentChanges:
    def test_update_version(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        data = invoke_json(cli_runner, ["component", "update", "auth", "--version", "1.2.0"])
        assert data["data"]["fields_changed"] == ["current_version"]
        assert data["data"]["recalculated_versions"] == ["mvp", "v1", "v2"]

    def test_update_missing(self, cli_runner: CliRunner) -> None:
        data = invoke_json(cli_runner, ["component", "update", "ghost", "--name", "X"], exit_code=1)
        assert data["error"]["code"] == "NOT_FOUND"

    def test_move(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        invoke_json(cli_runner, ["layer", "create", "platform", "Platform"])
        data = invoke_json(cli_runner, ["component", "move", "auth", "platform"])
        assert data["data"]["layer"] == "platform"
        layer = invoke_json(cli_runner, ["layer", "show", "platform"])
        assert [c["id"] for c in layer["data"]["children"]] == ["auth"]

    def test_delete_with_yes(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        result = cli_runner.invoke(cli, ["component", "delete", "auth", "--yes"])
        assert result.exit_code == 0
        assert "deleted_edges" in result.output
        missing = invoke_json(cli_runner, ["component", "show", "auth"], exit_code=1)
        assert missing["error"]["code"] == "NOT_FOUND"

    def test_delete_prompts(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        result = cli_runner.invoke(cli, ["component", "delete", "auth"], input="n\n")
        assert result.exit_code == 1
        assert "Aborted" in result.output
        invoke_json(cli_runner, ["component", "show", "auth"])

    def test_show_context(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        data = invoke_json(cli_runner, ["component", "show", "auth"])
        assert data["op"] == "component_context"
        assert [d["id"] for d in data["data"]["dependencies"]] == ["db"]
        assert [d["id"] for d in data["data"]["dependents"]] == ["api"]

    def test_show_human(self, cli_runner: CliRunner) -> None:
        seed_project(cli_runner)
        result = cli_runner.invoke(cli, ["component", "show", "auth"])
        assert result.exit_code == 0
        assert "auth: Auth" in result.output
        assert "dependencies:" in result.output
