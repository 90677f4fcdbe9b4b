"""Text pattern matchers and the line scanner shared by all checks.

Matchers are rows of a table (:class:`PatternSpec`) rather than inline
expressions, so each one can be exercised on its own. Korean phrasing is
matched alongside English wherever plugin authors write in both.

Line suppression rules, applied by :func:`scan_lines` in this order:

1. fenced code blocks (the fence lines included) are skipped;
2. a fence whose header mentions "example" / "예시" also marks an example
   section, which stays skipped until the next fence;
3. documentation lines (diagrams, table rows, HTML comment delimiters);
4. lines carrying the ``<!-- arch-ignore -->`` marker.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from pluginval.architecture.models import UPWARD_REFERENCE_MESSAGE, Layer, ReferenceKind

# ---------------------------------------------------------------------------
# Pattern table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PatternMatch:
    """A successful match: the pattern name plus the matched substring."""

    name: str
    text: str


@dataclass(frozen=True)
class PatternSpec:
    """One named recognizer.

    ``target_layer``, ``kind`` and the ``message`` template are only
    meaningful for reference patterns; orchestration/interaction/business-logic
    patterns leave them unset.
    """

    name: str
    regex: re.Pattern[str]
    target_layer: Layer = Layer.UNKNOWN
    kind: ReferenceKind | None = None
    message: str = ""

    def match(self, line: str) -> PatternMatch | None:
        m = self.regex.search(line)
        if m is None:
            return None
        return PatternMatch(name=self.name, text=m.group(0))

    def find_all(self, line: str) -> list[PatternMatch]:
        return [PatternMatch(name=self.name, text=m.group(0)) for m in self.regex.finditer(line)]


def _p(expr: str, *, ignore_case: bool = False) -> re.Pattern[str]:
    return re.compile(expr, re.IGNORECASE if ignore_case else 0)


# Kebab-case names only: real file references, not prose like "agents/".
AGENT_PATH = PatternSpec(
    "agent-path",
    _p(r"(?:\./?)?agents/[a-z][a-z0-9-]+"),
    Layer.AGENT,
    "path",
    UPWARD_REFERENCE_MESSAGE,
)
COMMAND_PATH = PatternSpec(
    "command-path",
    _p(r"(?:\./?)?commands/[a-z][a-z0-9-]+"),
    Layer.COMMAND,
    "path",
    UPWARD_REFERENCE_MESSAGE,
)
SKILL_PATH = PatternSpec(
    "skill-path",
    _p(r"(?:\./?)?skills/[a-z][a-z0-9-]+"),
    Layer.SKILL,
    "path",
    UPWARD_REFERENCE_MESSAGE,
)

# /plugin:command
SLASH_COMMAND = PatternSpec(
    "slash-command",
    _p(r"/[a-z][\w-]+:[a-z][\w-]+"),
    Layer.COMMAND,
    "slash-command",
    UPWARD_REFERENCE_MESSAGE,
)
TASK_CALL = PatternSpec(
    "task-call",
    _p(r"Task\s*\(.*subagent", ignore_case=True),
    Layer.AGENT,
    "task-call",
    UPWARD_REFERENCE_MESSAGE,
)
SUBAGENT_TYPE = PatternSpec(
    "subagent-type",
    _p(r"subagent_type\s*[=:]\s*[\"']?\w+", ignore_case=True),
    Layer.AGENT,
    "agent-invocation",
    UPWARD_REFERENCE_MESSAGE,
)
AGENT_CALL = PatternSpec(
    "agent-call",
    _p(r"(?:에이전트|agent)\s+(?:호출|실행|call|invoke|spawn|launch)", ignore_case=True),
    Layer.AGENT,
    "agent-invocation",
    UPWARD_REFERENCE_MESSAGE,
)

# Order matters: it is the order references are reported in.
UPWARD_REFERENCE_PATTERNS: dict[Layer, tuple[PatternSpec, ...]] = {
    Layer.SKILL: (SLASH_COMMAND, COMMAND_PATH, TASK_CALL, SUBAGENT_TYPE, AGENT_CALL, AGENT_PATH),
    Layer.AGENT: (SLASH_COMMAND, COMMAND_PATH),
    Layer.COMMAND: (),
}

# Patterns reported once per occurrence rather than once per line.
MULTI_MATCH_PATTERNS = frozenset({SLASH_COMMAND.name})

ORCHESTRATION_PATTERNS: tuple[PatternSpec, ...] = (
    PatternSpec("task-invocation", _p(r"Task\s*\(", ignore_case=True)),
    PatternSpec("subagent-type", _p(r"subagent_type", ignore_case=True)),
    PatternSpec(
        "delegation",
        _p(r"(?:spawn|launch|delegate)\s+(?:agent|에이전트|worker)", ignore_case=True),
    ),
    PatternSpec("parallel-ko", _p(r"병렬\s*(?:실행|처리|에이전트)", ignore_case=True)),
    PatternSpec(
        "parallel",
        _p(r"parallel\s+(?:execution|agents?|workers?)", ignore_case=True),
    ),
)

USER_INTERACTION_PATTERNS: tuple[PatternSpec, ...] = (
    PatternSpec(
        "user-input",
        _p(r"(?:사용자|user)\s*(?:입력|input|확인|confirm)", ignore_case=True),
    ),
    PatternSpec("ask-user", _p(r"(?:ask|prompt)\s+(?:the\s+)?user", ignore_case=True)),
    PatternSpec("argument-hint", _p(r"argument-hint", ignore_case=True)),
    PatternSpec("magic-keyword", _p(r"Magic\s+Keyword", ignore_case=True)),
)

BUSINESS_LOGIC_PATTERNS: tuple[PatternSpec, ...] = (
    PatternSpec(
        "evaluation-criteria",
        _p(
            r"(?:평가|evaluate|분석|analyze|검토|review)\s+(?:기준|criteria|항목|점수|score)",
            ignore_case=True,
        ),
    ),
    PatternSpec("score-comparison", _p(r"(?:점수|score)\s*[><=]+\s*\d+", ignore_case=True)),
    PatternSpec(
        "conditional-branch",
        _p(r"(?:if|else|switch|case)\s+.*(?:then|do|→)", ignore_case=True),
    ),
)

ARCH_IGNORE = re.compile(r"<!--\s*arch-ignore\s*-->")


def match_any(patterns: Iterable[PatternSpec], line: str) -> list[PatternMatch]:
    """Every pattern in *patterns* that matches *line*, one match each."""
    matches: list[PatternMatch] = []
    for spec in patterns:
        m = spec.match(line)
        if m is not None:
            matches.append(m)
    return matches


# ---------------------------------------------------------------------------
# Line scanning
# ---------------------------------------------------------------------------

_FENCE = "```"
_EXAMPLE_MARKERS = ("example", "예시")
_DIAGRAM_CHARS = ("───", "│", "┌", "└", "├", "→")


@dataclass
class ScanState:
    """Per-file scanner flags. Create a fresh one for every file."""

    in_code_block: bool = False
    in_example_block: bool = False

    def feed_fence(self, stripped: str) -> None:
        """Update flags for a fence line (``stripped`` starts with ```)."""
        self.in_code_block = not self.in_code_block
        if self.in_code_block and any(m in stripped.lower() for m in _EXAMPLE_MARKERS):
            self.in_example_block = True
        if not self.in_code_block:
            self.in_example_block = False


def is_fence(stripped: str) -> bool:
    return stripped.startswith(_FENCE)


def is_documentation_line(stripped: str) -> bool:
    """Diagram, table row, or HTML comment delimiter."""
    if any(ch in stripped for ch in _DIAGRAM_CHARS):
        return True
    if stripped.startswith("|") and stripped.endswith("|"):
        return True
    return stripped.startswith("<!--") or stripped.startswith("-->")


def has_ignore_marker(line: str) -> bool:
    return ARCH_IGNORE.search(line) is not None


def scan_lines(
    lines: Sequence[str],
    *,
    skip_docs: bool = True,
    honor_ignore: bool = True,
    state: ScanState | None = None,
) -> Iterator[tuple[int, str]]:
    """Yield ``(line_no, line)`` for lines that survive suppression.

    Line numbers are 1-based. ``skip_docs`` and ``honor_ignore`` turn off
    rules 3 and 4 for checks that only care about code blocks.
    """
    state = state if state is not None else ScanState()

    for i, line in enumerate(lines, start=1):
        stripped = line.strip()

        if is_fence(stripped):
            state.feed_fence(stripped)
            continue
        if state.in_code_block:
            continue
        if skip_docs and is_documentation_line(stripped):
            continue
        if honor_ignore and has_ignore_marker(line):
            continue
        if state.in_example_block:
            continue

        yield i, line
