"""BaseService — foundation for pluginval services.

Every service receives the resolved :class:`PluginvalSettings` at
construction time and resolves repository roots against it.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pluginval.config.settings import PluginvalSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ArchitectureService(BaseService):
            def validate(self, repo_root: Path | None = None) -> ServiceResult:
                root = self._resolve_root(repo_root)
                ...
    """

    def __init__(self, settings: PluginvalSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> PluginvalSettings:
        return self._settings

    def _resolve_root(self, repo_root: Path | str | None) -> Path:
        """Absolute repository root: explicit argument, else the configured one."""
        root = Path(repo_root) if repo_root is not None else self._settings.repo_root
        return root.resolve()
