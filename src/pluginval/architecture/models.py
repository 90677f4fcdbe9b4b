"""Types shared by the architecture checks.

INVARIANT: every LayeredFile carries exactly one of COMMAND, AGENT or
SKILL. ``Layer.UNKNOWN`` exists only as a sentinel for unclassifiable
paths; such files never enter the working set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from pluginval.domain.markdown import Frontmatter

# ---------------------------------------------------------------------------
# Finding type tags and severities
# ---------------------------------------------------------------------------

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CHECK_LAYER_DEPENDENCY = "layer-dependency"
CHECK_CONTENT_SIMILARITY = "content-similarity"
CHECK_RESPONSIBILITY = "responsibility"
CHECK_SKILL_REFERENCE = "skill-reference"
CHECK_SKILL_COVERAGE = "skill-coverage"

Severity = Literal["error", "warning"]
ReferenceKind = Literal["path", "slash-command", "agent-invocation", "task-call"]

# Violation text for upward references; filled by format_violation().
UPWARD_REFERENCE_MESSAGE = "{source} references {target} layer ({matched})"


class Layer(IntEnum):
    """Architectural layer. Lower rank may depend on higher rank only."""

    COMMAND = 0  # user entry point
    AGENT = 1  # orchestration
    SKILL = 2  # single responsibility
    UNKNOWN = 3

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class LayeredFile:
    """A discovered markdown file tagged with its layer and plugin."""

    path: Path
    rel_path: str
    layer: Layer
    plugin: str
    body: str
    lines: tuple[str, ...]
    frontmatter: Frontmatter | None = None

    @property
    def name(self) -> str:
        return self.path.stem


@dataclass(frozen=True)
class Reference:
    """A cross-layer reference found on one line of a file."""

    target_layer: Layer
    matched: str
    line: int
    kind: ReferenceKind
    message: str = UPWARD_REFERENCE_MESSAGE


@dataclass(frozen=True)
class SimilarityPair:
    """Two cross-layer files whose n-gram overlap reached the threshold."""

    file_a: Path
    layer_a: Layer
    file_b: Path
    layer_b: Layer
    similarity: float
    shared: tuple[str, ...] = ()


class Finding(BaseModel):
    """A single check outcome for one file (or one plugin)."""

    model_config = {"frozen": True}

    file: str
    type: str
    valid: bool
    severity: Severity
    errors: list[str] = Field(default_factory=list)
    detail: dict[str, Any] = Field(default_factory=dict)


@dataclass
class Results:
    """Findings of one validation run, bucketed by outcome.

    Owned by the caller of :func:`~pluginval.architecture.validator.validate`;
    checkers append to it and never keep a reference.
    """

    passed: list[Finding] = field(default_factory=list)
    failed: list[Finding] = field(default_factory=list)
    warnings: list[Finding] = field(default_factory=list)

    def add(self, finding: Finding) -> None:
        """File *finding* into the bucket its outcome and severity select."""
        if finding.valid:
            self.passed.append(finding)
        elif finding.severity == SEVERITY_ERROR:
            self.failed.append(finding)
        else:
            self.warnings.append(finding)

    def all(self) -> list[Finding]:
        return [*self.failed, *self.warnings, *self.passed]

    def counts(self) -> dict[str, int]:
        return {
            "passed": len(self.passed),
            "failed": len(self.failed),
            "warnings": len(self.warnings),
        }

    @property
    def error_count(self) -> int:
        """Failed findings that carry error severity."""
        return sum(1 for f in self.failed if f.severity == SEVERITY_ERROR)

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": [f.model_dump() for f in self.passed],
            "failed": [f.model_dump() for f in self.failed],
            "warnings": [f.model_dump() for f in self.warnings],
        }
