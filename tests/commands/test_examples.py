"""Tests for --examples flag on CLI commands.

Parametrized to cover all commands that define examples text.
"""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from archmap.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    ([], ["archmap init", "archmap graph order"]),
    (["component"], ["archmap component create", "archmap component move"]),
    (["component", "create"], ["--type store"]),
    (["component", "update"], ["--version 1.0.0"]),
    (["component", "delete"], ["--yes"]),
    (["layer"], ["archmap layer overview"]),
    (["layer", "create"], ["--sort-order 2"]),
    (["edge"], ["archmap edge add"]),
    (["edge", "add"], ["--metadata"]),
    (["version"], ["archmap version set"]),
    (["version", "set"], ["--file docs/auth.md"]),
    (["feature"], ["archmap feature upload", "archmap feature search"]),
    (["feature", "upload"], ["features/ --version mvp"]),
    (["feature", "delete"], ["--all-of v1"]),
    (["graph"], ["archmap graph path", "archmap graph next mvp"]),
    (["graph", "tree"], ["--depth 3"]),
    (["graph", "neighbourhood"], ["--hops 2"]),
    (["export"], ["archmap export architecture"]),
    (["keys"], ["archmap keys generate"]),
    (["keys", "generate"], ["--scopes read,write,admin"]),
    (["init"], ["archmap init"]),
    (["upgrade"], ["upgrade --check"]),
    (["status"], ["archmap status --version mvp"]),
]


def _examples_id(item: tuple[list[str], list[str]]) -> str:
    """Generate a readable test ID from args."""
    args, _ = item
    return "_".join(args) or "root"


@pytest.mark.parametrize(
    "args,expected_keywords",
    EXAMPLES_COMMANDS,
    ids=[_examples_id(item) for item in EXAMPLES_COMMANDS],
)
def test_examples_flag(
    cli_runner: CliRunner, args: list[str], expected_keywords: list[str]
) -> None:
    result = cli_runner.invoke(cli, [*args, "--examples"])
    assert result.exit_code == 0
    assert "Examples for" in result.output
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in examples output for {args}"


class TestExamplesInHelp:
    """Test that --examples appears in --help output for commands that have it."""

    @pytest.mark.parametrize(
        "args",
        [
            ["--help"],
            ["component", "--help"],
            ["component", "create", "--help"],
            ["graph", "tree", "--help"],
            ["feature", "upload", "--help"],
            ["keys", "check", "--help"],
            ["status", "--help"],
        ],
    )
    def test_examples_in_help(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "--examples" in result.output


class TestExamplesEagerExit:
    """Test that --examples exits before validation (eager option)."""

    @pytest.mark.parametrize(
        "args",
        [
            ["component", "create", "--examples"],
            ["edge", "add", "--examples"],
            ["feature", "upload", "--examples"],
            ["version", "set", "--examples"],
        ],
    )
    def test_examples_skips_required_args(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "Examples for" in result.output
