"""Tests for the layers CLI command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from pluginval.cli import cli
from tests.conftest import WriteFile


@pytest.fixture
def _seeded(write_file: WriteFile) -> None:
    write_file("plugins/demo/commands/run.md", "Run.")
    write_file("plugins/demo/agents/worker.md", "Work.\nMore work.")
    write_file("plugins/demo/skills/core/SKILL.md", "Core.")
    write_file("plugins/tools/skills/SKILL.md", "Tools.")


@pytest.mark.usefixtures("_isolated_repo", "_seeded")
class TestLayersCommand:
    def test_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["layers"])
        assert result.exit_code == 0
        assert "plugins/demo/agents/worker.md" in result.output
        assert "count: 4" in result.output

    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "layers"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["count"] == 4
        worker = next(i for i in data["items"] if i["path"].endswith("worker.md"))
        assert worker["layer"] == "agent"
        assert worker["lines"] == 2

    def test_layer_filter_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "layers", "--layer", "skill"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "plugins/demo/skills/core/SKILL.md",
            "plugins/tools/skills/SKILL.md",
        ]

    def test_plugin_filter(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "layers", "--plugin", "tools"])
        items = json.loads(result.output)["data"]["items"]
        assert [i["path"] for i in items] == ["plugins/tools/skills/SKILL.md"]

    def test_invalid_layer(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["layers", "--layer", "unknown"])
        assert result.exit_code == 2
