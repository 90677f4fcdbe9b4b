"""Tests for dependency-direction detection."""

from __future__ import annotations

import itertools

import pytest

from pluginval.architecture.dependency import (
    detect_references,
    detect_upward_refs,
    format_violation,
    is_violation,
    validate_layer_dependencies,
)
from pluginval.architecture.models import CHECK_LAYER_DEPENDENCY, Layer, Reference, Results
from pluginval.architecture.patterns import SLASH_COMMAND
from tests.conftest import layered

_LAYERS = (Layer.COMMAND, Layer.AGENT, Layer.SKILL)


class TestIsViolation:
    @pytest.mark.parametrize(("source", "target"), list(itertools.product(_LAYERS, _LAYERS)))
    def test_violation_iff_source_below_target(self, source: Layer, target: Layer) -> None:
        assert is_violation(source, target) is (source > target)

    def test_allowed_directions(self) -> None:
        assert not is_violation(Layer.COMMAND, Layer.AGENT)
        assert not is_violation(Layer.COMMAND, Layer.SKILL)
        assert not is_violation(Layer.AGENT, Layer.SKILL)

    def test_forbidden_directions(self) -> None:
        assert is_violation(Layer.SKILL, Layer.AGENT)
        assert is_violation(Layer.SKILL, Layer.COMMAND)
        assert is_violation(Layer.AGENT, Layer.COMMAND)


class TestDetectUpwardRefs:
    def test_skill_slash_command(self) -> None:
        refs = detect_upward_refs("Run /git-utils:commit now", 7, Layer.SKILL)
        assert refs == [
            Reference(
                target_layer=Layer.COMMAND,
                matched="/git-utils:commit",
                line=7,
                kind="slash-command",
            )
        ]

    def test_every_slash_command_reported(self) -> None:
        refs = detect_upward_refs("/a-b:one then /a-b:two", 1, Layer.AGENT)
        assert [r.matched for r in refs] == ["/a-b:one", "/a-b:two"]

    def test_skill_task_call(self) -> None:
        refs = detect_upward_refs('Task(subagent_type="reviewer")', 3, Layer.SKILL)
        kinds = [r.kind for r in refs]
        assert kinds.count("task-call") == 1
        assert all(r.target_layer == Layer.AGENT for r in refs)

    def test_agent_may_reference_skills_and_agents(self) -> None:
        line = "Use skills/lint-check and agents/helper-bot via agent call"
        assert detect_upward_refs(line, 1, Layer.AGENT) == []

    def test_command_checks_nothing(self) -> None:
        assert detect_upward_refs("/x-y:zz agents/helper-bot", 1, Layer.COMMAND) == []

    def test_skill_referencing_skill_is_fine(self) -> None:
        assert detect_upward_refs("See skills/other-skill/SKILL.md", 1, Layer.SKILL) == []


class TestDetectReferences:
    def test_command_file_returns_nothing(self) -> None:
        f = layered("Run /x-y:zz", Layer.COMMAND)
        assert detect_references(f) == []

    def test_line_numbers(self) -> None:
        f = layered("intro\n\nRun /x-y:zz here", Layer.SKILL)
        (ref,) = detect_references(f)
        assert ref.line == 3

    def test_code_block_suppressed(self) -> None:
        body = "Intro\n```\nTask(subagent_type='a')\n/x-y:zz\n```\nDone"
        assert detect_references(layered(body, Layer.SKILL)) == []

    def test_example_block_suppressed(self) -> None:
        body = "```markdown example\nagent call\n```"
        assert detect_references(layered(body, Layer.SKILL)) == []

    def test_unsuppressed_line_reported(self) -> None:
        (ref,) = detect_references(layered("Invoke /x-y:zz", Layer.AGENT))
        assert ref.matched == "/x-y:zz"
        assert ref.target_layer == Layer.COMMAND

    def test_documentation_suppressed(self) -> None:
        body = "| /x-y:zz | command |\nCommand → /x-y:zz"
        assert detect_references(layered(body, Layer.AGENT)) == []

    def test_ignore_marker_suppressed(self) -> None:
        body = "Invoke /x-y:zz <!-- arch-ignore -->"
        assert detect_references(layered(body, Layer.AGENT)) == []

    def test_suppression_is_per_line(self) -> None:
        body = "Invoke /x-y:zz <!-- arch-ignore -->\n| /x-y:zz |\nThen /x-y:zz"
        (ref,) = detect_references(layered(body, Layer.AGENT))
        assert ref.line == 3


class TestFormatViolation:
    def test_message(self) -> None:
        ref = Reference(
            target_layer=Layer.COMMAND,
            matched="/git-utils:commit",
            line=4,
            kind="slash-command",
        )
        assert format_violation(Layer.SKILL, ref) == (
            "line 4: skill references command layer (/git-utils:commit) "
            "— violates command → skill direction"
        )

    def test_uses_reference_template(self) -> None:
        ref = Reference(
            target_layer=Layer.AGENT,
            matched="agent call",
            line=2,
            kind="agent-invocation",
            message="{source} calls {target} ({matched})",
        )
        assert format_violation(Layer.SKILL, ref) == (
            "line 2: skill calls agent (agent call) — violates agent → skill direction"
        )

    def test_template_copied_from_pattern(self) -> None:
        (ref,) = detect_upward_refs("Run /a-b:cd", 1, Layer.AGENT)
        assert ref.message == SLASH_COMMAND.message


class TestValidateLayerDependencies:
    def test_one_finding_per_file(self) -> None:
        files = [
            layered("clean", Layer.COMMAND),
            layered("clean", Layer.AGENT),
            layered("clean", Layer.SKILL),
        ]
        results = Results()
        validate_layer_dependencies(files, results)

        assert len(results.passed) == 3
        assert results.failed == []
        assert {f.type for f in results.passed} == {CHECK_LAYER_DEPENDENCY}

    def test_violation_is_error(self) -> None:
        results = Results()
        validate_layer_dependencies(
            [layered("Run /git-utils:commit\nthen agent invoke", Layer.SKILL)], results
        )

        (finding,) = results.failed
        assert finding.severity == "error"
        assert finding.valid is False
        assert finding.file == "plugins/demo/skills/core/SKILL.md"
        assert len(finding.errors) == 2
        assert finding.errors[0].startswith("line 1: skill references command layer")
        assert finding.errors[1].startswith("line 2: skill references agent layer")

    def test_agent_referencing_command(self) -> None:
        results = Results()
        validate_layer_dependencies(
            [layered("Hand off to commands/deploy-app", Layer.AGENT)], results
        )

        (finding,) = results.failed
        assert "(commands/deploy-app)" in finding.errors[0]
        assert "violates command → agent direction" in finding.errors[0]

    def test_fenced_reference_passes(self) -> None:
        results = Results()
        validate_layer_dependencies(
            [layered("```\n/git-utils:commit\n```", Layer.SKILL)], results
        )
        assert results.failed == []
        assert len(results.passed) == 1
