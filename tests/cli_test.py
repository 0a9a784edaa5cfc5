"""Tests for the command-line interface."""

from __future__ import annotations

from click.testing import CliRunner

from zookeeper_operator import __version__
from zookeeper_operator.cli import main


def test_help() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["help"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "run" in result.output

    result = runner.invoke(main, ["help", "run"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "--namespace" in result.output
    assert "--config-path" in result.output


def test_version() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["--version"], catch_exceptions=False)
    assert result.exit_code == 0
    assert result.output.strip() == __version__
