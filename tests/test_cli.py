"""Tests for the root wikiweave CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from wikiweave import __version__
from wikiweave.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "wikiweave" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flags_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_root_must_exist(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["--root", str(tmp_path / "missing"), "graph", "orphans"])
    assert result.exit_code == 2


def test_missing_config_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(tmp_path / "nope.toml"), "graph", "orphans"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_subcommands_registered() -> None:
    assert set(cli.commands) == {"show", "backlinks", "blocks", "embed", "refs", "graph"}
