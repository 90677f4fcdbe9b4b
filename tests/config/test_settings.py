"""Tests for PluginvalSettings — CLI flags, env vars and TOML merged."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from pluginval.config.discovery import CONFIG_ENV_VAR, CONFIG_FILENAME
from pluginval.config.settings import PluginvalSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv("PLUGINVAL_REPO_ROOT", raising=False)
    monkeypatch.delenv("PLUGINVAL_ARCHITECTURE__MIN_NGRAMS", raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = PluginvalSettings.from_cli(repo_root=tmp_path)
        assert settings.repo_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.architecture.similarity_threshold == 0.30
        assert settings.report.min_severity == "warning"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = PluginvalSettings.from_cli(repo_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_repo_root_defaults_to_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        settings = PluginvalSettings.from_cli()
        assert settings.repo_root.resolve() == tmp_path.resolve()


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(
            "[architecture]\ncommand_max_lines = 400\n[report]\nshow_passed = true\n"
        )
        settings = PluginvalSettings.from_cli(repo_root=tmp_path)
        assert settings.architecture.command_max_lines == 400
        assert settings.architecture.command_warn_lines == 300
        assert settings.report.show_passed is True
        assert settings.config_path == tmp_path / CONFIG_FILENAME

    def test_repo_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        nested = tmp_path / "plugins" / "demo"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        settings = PluginvalSettings.from_cli()
        assert settings.repo_root.resolve() == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "conf" / "strict.toml"
        custom.parent.mkdir()
        custom.write_text('[report]\nmin_severity = "error"\n')

        settings = PluginvalSettings.from_cli(config_path=str(custom), repo_root=tmp_path)
        assert settings.report.min_severity == "error"
        assert settings.config_path == custom

    def test_explicit_config_keeps_cwd_root(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        custom = tmp_path / "conf" / "strict.toml"
        custom.parent.mkdir()
        custom.write_text("")
        monkeypatch.chdir(tmp_path)

        settings = PluginvalSettings.from_cli(config_path=str(custom))
        assert settings.repo_root.resolve() == tmp_path.resolve()

    def test_invalid_toml_raises_click_error(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[architecture\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            PluginvalSettings.from_cli(repo_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[architecture]\nmin_ngrams = 40\n")
        monkeypatch.setenv("PLUGINVAL_ARCHITECTURE__MIN_NGRAMS", "5")

        settings = PluginvalSettings.from_cli(repo_root=tmp_path)
        assert settings.architecture.min_ngrams == 5

    def test_cli_flags_override_everything(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PLUGINVAL_QUIET", "false")
        settings = PluginvalSettings.from_cli(repo_root=tmp_path, quiet=True, json_output=True)
        assert settings.quiet is True
        assert settings.json_output is True


class TestForRepoRoot:
    def test_rediscovers_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        here = tmp_path / "here"
        here.mkdir()
        other = tmp_path / "other"
        other.mkdir()
        (other / CONFIG_FILENAME).write_text("[architecture]\ncommand_max_lines = 400\n")
        monkeypatch.chdir(here)

        base = PluginvalSettings.from_cli(quiet=True)
        rebased = base.for_repo_root(other)

        assert base.architecture.command_max_lines == 500
        assert rebased.architecture.command_max_lines == 400
        assert rebased.config_path == other / CONFIG_FILENAME
        assert rebased.repo_root == other
        assert rebased.quiet is True
