"""Shared pytest fixtures and test helpers for pluginval tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from pluginval.architecture.models import Layer, LayeredFile
from pluginval.domain.markdown import Frontmatter
from pluginval.services.telemetry import disable_telemetry

WriteFile = Callable[[str, str], Path]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Temporary repository root with an empty ``plugins/`` directory."""
    (tmp_path / "plugins").mkdir()
    return tmp_path


@pytest.fixture
def write_file(repo_root: Path) -> WriteFile:
    """Write a file relative to the repo root, creating parent directories."""

    def _write(rel_path: str, content: str) -> Path:
        path = repo_root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``pluginval -v`` enables telemetry for the rest of the context."""
    yield
    disable_telemetry()


@pytest.fixture
def _isolated_repo(repo_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp repo root so the CLI validates it by default.

    Use via ``@pytest.mark.usefixtures("_isolated_repo")`` on command test
    classes.
    """
    monkeypatch.delenv("PLUGINVAL_CONFIG", raising=False)
    monkeypatch.chdir(repo_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def markdown(body: str, **frontmatter: object) -> str:
    """Build a markdown document with simple ``key: value`` frontmatter."""
    lines = ["---"]
    for key, value in frontmatter.items():
        if isinstance(value, list):
            lines.append(f"{key}: [{', '.join(str(v) for v in value)}]")
        else:
            lines.append(f"{key}: {value}")
    lines.append("---")
    return "\n".join(lines) + "\n" + body


def layered(
    body: str,
    layer: Layer,
    *,
    plugin: str = "demo",
    rel_path: str | None = None,
    frontmatter: dict[str, object] | None = None,
) -> LayeredFile:
    """Build a LayeredFile in memory, without touching the filesystem."""
    if rel_path is None:
        rel_path = {
            Layer.COMMAND: f"plugins/{plugin}/commands/run.md",
            Layer.AGENT: f"plugins/{plugin}/agents/worker.md",
            Layer.SKILL: f"plugins/{plugin}/skills/core/SKILL.md",
        }[layer]
    return LayeredFile(
        path=Path("/repo") / rel_path,
        rel_path=rel_path,
        layer=layer,
        plugin=plugin,
        body=body,
        lines=tuple(body.split("\n")),
        frontmatter=Frontmatter(frontmatter) if frontmatter is not None else None,
    )


# Distinct prose blocks, each comfortably above the minimum n-gram count.
PROSE_A = "\n".join(
    [
        "The review workflow collects every changed file in the branch.",
        "Each file is summarized with its purpose and the risks it introduces.",
        "Summaries are grouped by module so reviewers can scan related changes.",
        "Open questions are listed at the end together with suggested owners.",
        "The final report is written in plain language for the whole team.",
    ]
)

PROSE_B = "\n".join(
    [
        "Gardening notes require patience because seedlings grow slowly.",
        "Water tomatoes early morning when soil temperature remains cool.",
        "Compost piles benefit from mixing green clippings with brown leaves.",
        "Prune raspberry canes after harvest to encourage vigorous shoots.",
        "Mulch keeps moisture locked beneath strawberries during hot summers.",
    ]
)
