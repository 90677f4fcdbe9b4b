"""Skill reference checker — agent ``skills:`` frontmatter vs. real skills."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from pathlib import Path

from pluginval.architecture.classifier import PLUGINS_DIR, extract_skill_name
from pluginval.architecture.models import (
    CHECK_SKILL_COVERAGE,
    CHECK_SKILL_REFERENCE,
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    Finding,
    Layer,
    LayeredFile,
    Results,
)

SKILLS_KEY = "skills"


def build_skill_registry(files: Iterable[LayeredFile]) -> dict[str, Path]:
    """Map ``"plugin/skill-name"`` to the skill file path."""
    registry: dict[str, Path] = {}
    for file in files:
        if file.layer != Layer.SKILL:
            continue
        name = extract_skill_name(file.rel_path)
        if name:
            registry[f"{file.plugin}/{name}"] = file.path
    return registry


def declared_skills(file: LayeredFile) -> list[str]:
    if file.frontmatter is None:
        return []
    return file.frontmatter.get_string_list(SKILLS_KEY)


def find_skill_suggestion(skill_name: str, registry: dict[str, Path]) -> str:
    """``plugins/<plugin>`` of the first plugin (sorted) that has *skill_name*."""
    for key in sorted(registry):
        plugin, _, name = key.partition("/")
        if name == skill_name:
            return f"{PLUGINS_DIR}/{plugin}"
    return ""


def validate_skill_references(files: Sequence[LayeredFile], results: Results) -> None:
    """Record one ``skill-reference`` finding per agent that declares skills."""
    registry = build_skill_registry(files)

    for file in files:
        if file.layer != Layer.AGENT:
            continue
        declared = declared_skills(file)
        if not declared:
            continue

        errors: list[str] = []
        for raw_name in declared:
            skill_name = raw_name.strip()
            if not skill_name:
                continue
            if f"{file.plugin}/{skill_name}" in registry:
                continue
            msg = (
                f'agent declares skill "{skill_name}" but it does not exist at '
                f"{PLUGINS_DIR}/{file.plugin}/skills/{skill_name}/SKILL.md"
            )
            suggestion = find_skill_suggestion(skill_name, registry)
            if suggestion:
                msg += f" (found in {suggestion})"
            errors.append(msg)

        results.add(
            Finding(
                file=file.rel_path,
                type=CHECK_SKILL_REFERENCE,
                valid=not errors,
                severity=SEVERITY_ERROR,
                errors=errors,
            )
        )


def find_skill_dirs(repo_root: Path, plugin: str) -> list[str]:
    """Names of directories physically present under ``plugins/<plugin>/skills``."""
    skills_dir = repo_root / PLUGINS_DIR / plugin / "skills"
    try:
        entries = list(skills_dir.iterdir())
    except OSError:
        return []
    return sorted(e.name for e in entries if e.is_dir())


def validate_skill_coverage(
    files: Sequence[LayeredFile],
    repo_root: Path,
    results: Results,
) -> None:
    """Warn when a plugin has skills but none of its agents declare any.

    Advisory only: the finding is filed under ``failed`` with warning
    severity and never fails a run on its own.
    """
    agents_by_plugin: dict[str, list[LayeredFile]] = defaultdict(list)
    skills_by_plugin: dict[str, list[str]] = defaultdict(list)
    for file in files:
        if file.layer == Layer.AGENT:
            agents_by_plugin[file.plugin].append(file)
        elif file.layer == Layer.SKILL:
            name = extract_skill_name(file.rel_path)
            if name:
                skills_by_plugin[file.plugin].append(name)

    for plugin in sorted(agents_by_plugin):
        agents = agents_by_plugin[plugin]
        skills = skills_by_plugin.get(plugin, [])
        if not skills or not agents:
            continue
        if any(declared_skills(agent) for agent in agents):
            continue
        if not find_skill_dirs(repo_root, plugin):
            continue

        agent_names = [agent.name for agent in agents]
        results.failed.append(
            Finding(
                file=f"{PLUGINS_DIR}/{plugin}/agents/",
                type=CHECK_SKILL_COVERAGE,
                valid=False,
                severity=SEVERITY_WARNING,
                errors=[
                    f"plugin has {len(skills)} skill(s) [{', '.join(skills)}] but none of "
                    f"{len(agents)} agent(s) [{', '.join(agent_names)}] declare skills in "
                    "frontmatter — consider adding skills: [...] to agent YAML"
                ],
            )
        )
