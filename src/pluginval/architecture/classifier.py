"""File classifier — discover layer files and tag them.

Layer is decided purely by directory location. Two SKILL.md shapes are
accepted and both must keep working, because skill names (and therefore
the skill registry) are derived from the path:

- ``plugins/<plugin>/skills/<skill>/SKILL.md`` → skill name ``<skill>``
- ``plugins/<plugin>/skills/SKILL.md`` → skill name ``<plugin>``
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from pluginval.architecture.models import Layer, LayeredFile
from pluginval.domain.markdown import parse_markdown

logger = logging.getLogger(__name__)

PLUGINS_DIR = "plugins"
SKILL_FILENAME = "SKILL.md"

# Glob pattern (relative to the repo root) → layer.
LAYER_PATTERNS: dict[str, Layer] = {
    "plugins/*/commands/*.md": Layer.COMMAND,
    "plugins/*/skills/*/SKILL.md": Layer.SKILL,
    "plugins/*/skills/SKILL.md": Layer.SKILL,
    "plugins/*/agents/*.md": Layer.AGENT,
}


def collect_layer_files(repo_root: Path) -> list[LayeredFile]:
    """Discover and parse every command, agent and skill file.

    Files that cannot be read or decoded are skipped without a finding.
    Glob results are sorted so repeated runs see the same order.
    """
    files: list[LayeredFile] = []

    for pattern, layer in LAYER_PATTERNS.items():
        for full_path in sorted(repo_root.glob(pattern)):
            if not full_path.is_file():
                continue
            try:
                parsed = parse_markdown(full_path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.debug("Skipping unparseable file %s: %s", full_path, exc)
                continue

            body = parsed.body or parsed.content
            rel_path = full_path.relative_to(repo_root).as_posix()
            files.append(
                LayeredFile(
                    path=full_path,
                    rel_path=rel_path,
                    layer=layer,
                    plugin=extract_plugin_name(rel_path),
                    body=body,
                    lines=tuple(body.split("\n")),
                    frontmatter=parsed.frontmatter,
                )
            )

    logger.debug("Collected %d layer files under %s", len(files), repo_root)
    return files


def extract_plugin_name(rel_path: str) -> str:
    """Plugin name from a path like ``plugins/develop-workflow/commands/flow.md``."""
    parts = PurePosixPath(rel_path.replace("\\", "/")).parts
    if len(parts) >= 2 and parts[0] == PLUGINS_DIR:
        return parts[1]
    return "unknown"


def extract_skill_name(path: Path | str) -> str:
    """Skill name for a SKILL.md path, or ``""`` if the path has neither shape.

    >>> extract_skill_name("plugins/team-claude/skills/feedback-routing/SKILL.md")
    'feedback-routing'
    >>> extract_skill_name("plugins/git-utils/skills/SKILL.md")
    'git-utils'
    """
    parts = PurePosixPath(str(path).replace("\\", "/")).parts

    for i, part in enumerate(parts):
        if part != "skills":
            continue
        if i + 2 < len(parts) and parts[i + 2] == SKILL_FILENAME:
            return parts[i + 1]
        if i + 1 < len(parts) and parts[i + 1] == SKILL_FILENAME:
            if i >= 2 and parts[i - 2] == PLUGINS_DIR:
                return parts[i - 1]

    return ""


def short_path(path: Path | str, repo_root: Path) -> str:
    """Display path relative to *repo_root*, or the path itself if outside it."""
    try:
        return Path(path).relative_to(repo_root).as_posix()
    except ValueError:
        return str(path)
