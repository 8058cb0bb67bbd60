"""Tests for the optimize command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from refnet.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestOptimize:
    def test_default_model(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "optimize", "--days", "10", "--target", "500"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "50"

    def test_saturation_bonus(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            ["--json", "optimize", "--days", "10", "--target", "500", "--saturation-bonus", "300"],
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["bonus"] == 150

    def test_unreachable(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "optimize", "--days", "5", "--target", "600"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["bonus"] is None
        assert data["reachable"] is False

    def test_invalid_days(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["optimize", "--days", "0", "--target", "500"])
        assert result.exit_code == 1
        assert "INVALID_PARAMETER" in result.output

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["optimize", "--examples"])
        assert result.exit_code == 0
        assert "refnet optimize" in result.output
