"""Dependency direction checker.

Allowed: command → agent, command → skill, agent → skill.
Violations: skill → agent, skill → command, agent → command.
"""

from __future__ import annotations

from collections.abc import Iterable

from pluginval.architecture.models import (
    CHECK_LAYER_DEPENDENCY,
    SEVERITY_ERROR,
    Finding,
    Layer,
    LayeredFile,
    Reference,
    Results,
)
from pluginval.architecture.patterns import (
    MULTI_MATCH_PATTERNS,
    UPWARD_REFERENCE_PATTERNS,
    scan_lines,
)


def is_violation(source: Layer, target: Layer) -> bool:
    """True when *source* references a layer above it (lower rank)."""
    return source > target


def detect_upward_refs(line: str, line_no: int, source: Layer) -> list[Reference]:
    """References on *line* to layers that *source* may not depend on."""
    refs: list[Reference] = []
    for spec in UPWARD_REFERENCE_PATTERNS.get(source, ()):
        if spec.kind is None:
            continue
        if spec.name in MULTI_MATCH_PATTERNS:
            matches = spec.find_all(line)
        else:
            first = spec.match(line)
            matches = [first] if first is not None else []
        for m in matches:
            refs.append(
                Reference(
                    target_layer=spec.target_layer,
                    matched=m.text,
                    line=line_no,
                    kind=spec.kind,
                    message=spec.message,
                )
            )
    return refs


def detect_references(file: LayeredFile) -> list[Reference]:
    """Scan *file* for cross-layer references, honoring every suppression rule."""
    if file.layer == Layer.COMMAND:
        return []
    refs: list[Reference] = []
    for line_no, line in scan_lines(file.lines):
        refs.extend(detect_upward_refs(line, line_no, file.layer))
    return refs


def format_violation(source: Layer, ref: Reference) -> str:
    text = ref.message.format(source=source, target=ref.target_layer, matched=ref.matched)
    return (
        f"line {ref.line}: {text} "
        f"— violates {ref.target_layer} → {source} direction"
    )


def validate_layer_dependencies(files: Iterable[LayeredFile], results: Results) -> None:
    """Record one ``layer-dependency`` finding per file."""
    for file in files:
        violations = [
            format_violation(file.layer, ref)
            for ref in detect_references(file)
            if is_violation(file.layer, ref.target_layer)
        ]
        results.add(
            Finding(
                file=file.rel_path,
                type=CHECK_LAYER_DEPENDENCY,
                valid=not violations,
                severity=SEVERITY_ERROR,
                errors=violations,
            )
        )
