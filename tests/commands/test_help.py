"""Tests for --help and --examples on every command."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from xcclean.cli import cli

COMMANDS = ["status", "scan", "clean", "list", "history", "interactive", "completions"]


@pytest.mark.parametrize("name", COMMANDS)
def test_help(cli_runner: CliRunner, name: str) -> None:
    result = cli_runner.invoke(cli, [name, "--help"])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize("name", ["scan", "clean", "history", "completions"])
def test_examples(cli_runner: CliRunner, name: str) -> None:
    result = cli_runner.invoke(cli, [name, "--examples"])
    assert result.exit_code == 0
    assert "Examples for" in result.output
    assert f"xcclean {name}" in result.output


def test_help_points_to_examples(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["scan", "--help"])
    assert "--examples" in result.output
    assert "Run with --examples to see usage examples." in result.output


def test_no_examples_no_hint(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["interactive", "--help"])
    assert result.exit_code == 0
    assert "--examples" not in result.output
