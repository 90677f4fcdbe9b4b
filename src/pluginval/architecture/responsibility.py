"""Responsibility checker — per-layer role heuristics.

- Skills must not orchestrate (agent layer) or talk to the user (command layer).
- Agents must not talk to the user.
- Commands must stay thin: a line budget and a cap on business-logic phrasing
  (the Fat Controller anti-pattern).
"""

from __future__ import annotations

from collections.abc import Iterable

from pluginval.architecture.models import (
    CHECK_RESPONSIBILITY,
    SEVERITY_WARNING,
    Finding,
    Layer,
    LayeredFile,
    Results,
)
from pluginval.architecture.patterns import (
    BUSINESS_LOGIC_PATTERNS,
    ORCHESTRATION_PATTERNS,
    USER_INTERACTION_PATTERNS,
    match_any,
    scan_lines,
)

COMMAND_MAX_LINES = 500
COMMAND_WARN_LINES = 300
BUSINESS_LOGIC_MAX = 10


def check_skill_responsibility(file: LayeredFile) -> list[str]:
    violations: list[str] = []
    for line_no, line in scan_lines(file.lines, honor_ignore=False):
        for m in match_any(ORCHESTRATION_PATTERNS, line):
            violations.append(
                f"line {line_no}: skill contains orchestration logic ({m.text}) "
                "— delegate to agent layer"
            )
        for m in match_any(USER_INTERACTION_PATTERNS, line):
            violations.append(
                f"line {line_no}: skill contains user interaction ({m.text}) "
                "— delegate to command layer"
            )
    return violations


def check_agent_responsibility(file: LayeredFile) -> list[str]:
    violations: list[str] = []
    for line_no, line in scan_lines(file.lines, honor_ignore=False):
        for m in match_any(USER_INTERACTION_PATTERNS, line):
            violations.append(
                f"line {line_no}: agent contains user interaction ({m.text}) "
                "— delegate to command layer"
            )
    return violations


def count_business_logic(lines: Iterable[str]) -> int:
    """Matching (line, pattern) pairs outside code blocks."""
    return sum(
        len(match_any(BUSINESS_LOGIC_PATTERNS, line))
        for _, line in scan_lines(list(lines), skip_docs=False, honor_ignore=False)
    )


def check_command_responsibility(
    file: LayeredFile,
    *,
    max_lines: int = COMMAND_MAX_LINES,
    warn_lines: int = COMMAND_WARN_LINES,
    business_logic_max: int = BUSINESS_LOGIC_MAX,
) -> list[str]:
    violations: list[str] = []

    line_count = len(file.lines)
    if line_count > max_lines:
        violations.append(
            f"command has {line_count} lines (max recommended: {max_lines}) "
            "— consider extracting logic to agent/skill layers (Fat Controller anti-pattern)"
        )
    elif line_count > warn_lines:
        violations.append(
            f"command has {line_count} lines (warning threshold: {warn_lines}) "
            "— review if business logic should move to agent/skill layers"
        )

    business_logic = count_business_logic(file.lines)
    if business_logic > business_logic_max:
        violations.append(
            f"command contains {business_logic} business logic patterns "
            "— consider extracting evaluation/analysis logic to agent layer"
        )

    return violations


def validate_responsibilities(
    files: Iterable[LayeredFile],
    results: Results,
    *,
    command_max_lines: int = COMMAND_MAX_LINES,
    command_warn_lines: int = COMMAND_WARN_LINES,
    business_logic_max: int = BUSINESS_LOGIC_MAX,
) -> None:
    """Record one ``responsibility`` warning finding per file."""
    for file in files:
        if file.layer == Layer.SKILL:
            violations = check_skill_responsibility(file)
        elif file.layer == Layer.AGENT:
            violations = check_agent_responsibility(file)
        elif file.layer == Layer.COMMAND:
            violations = check_command_responsibility(
                file,
                max_lines=command_max_lines,
                warn_lines=command_warn_lines,
                business_logic_max=business_logic_max,
            )
        else:
            continue

        results.add(
            Finding(
                file=file.rel_path,
                type=CHECK_RESPONSIBILITY,
                valid=not violations,
                severity=SEVERITY_WARNING,
                errors=violations,
            )
        )
