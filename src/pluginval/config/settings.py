"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PLUGINVAL_*`` prefix
  3. TOML file    — ``pluginval.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`pluginval.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pluginval.config.discovery import find_config
from pluginval.config.models import ArchitectureConfig, ReportConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``pluginval.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class PluginvalSettings(BaseSettings):
    """Unified settings for the pluginval CLI.

    Attributes:
        repo_root: Repository to validate (parent of ``pluginval.toml``,
            or CWD if no config found). A positional CLI argument wins.
        config_path: The TOML file that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PLUGINVAL_",
        "env_nested_delimiter": "__",
    }

    repo_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    architecture: ArchitectureConfig = Field(default_factory=ArchitectureConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        repo_root: Path | None = None,
        **cli_flags: Any,
    ) -> PluginvalSettings:
        """Construct settings from CLI invocation.

        Discovers ``pluginval.toml`` via walk-up (or explicit *config_path*),
        resolves *repo_root* from the discovered file's parent directory,
        and merges CLI flags as highest-priority overrides. An explicit
        *config_path* may live anywhere, so it never moves the root.
        """
        toml_path: Path | None = None
        discovered: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = discovered = find_config(repo_root)

        resolved_root = repo_root
        if resolved_root is None:
            resolved_root = discovered.parent if discovered else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                repo_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    def for_repo_root(self, repo_root: Path) -> PluginvalSettings:
        """Settings re-discovered from *repo_root*, keeping the CLI flags.

        Used when a command names its repository explicitly, so that
        repository's own ``pluginval.toml`` applies rather than the one
        found from the working directory.
        """
        return type(self).from_cli(
            repo_root=repo_root,
            json_output=self.json_output,
            quiet=self.quiet,
            verbose=self.verbose,
            log_json=self.log_json,
        )
