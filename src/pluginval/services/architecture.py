"""ArchitectureService — layered-architecture validation for a plugin repo.

Three read-only operations:

- ``validate``: run every architecture check and report findings.
- ``layers``: list classified layer files.
- ``skills``: list the skill registry.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pluginval.architecture.classifier import collect_layer_files, extract_skill_name
from pluginval.architecture.models import Finding, Layer
from pluginval.architecture.references import build_skill_registry, declared_skills
from pluginval.architecture.validator import validate
from pluginval.services.base import BaseService
from pluginval.services.result import ServiceError, ServiceResult
from pluginval.services.telemetry import get_current_span, trace_span, traced

logger = logging.getLogger(__name__)

_SEVERITY_RANK = {"warning": 0, "error": 1}


def _finding_dict(finding: Finding, bucket: str) -> dict[str, Any]:
    return {"bucket": bucket, **finding.model_dump()}


class ArchitectureService(BaseService):
    """Runs the architecture checks against a repository root."""

    def _missing_root(self, op: str, root: Path) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code="NO_REPO",
                message=f"Repository root not found: {root}",
                detail={"repo_root": str(root)},
            ),
        )

    @traced
    def validate(
        self,
        repo_root: Path | str | None = None,
        *,
        min_severity: str | None = None,
    ) -> ServiceResult:
        """Run all checks; ``ok`` is False when any error-severity finding failed.

        *min_severity* hides reported issues below the given severity; it
        never changes the pass/fail outcome.
        """
        root = self._resolve_root(repo_root)
        if not root.is_dir():
            return self._missing_root("validate", root)

        threshold = min_severity or self._settings.report.min_severity
        options = self._settings.architecture.to_options()
        results = validate(root, options, instrument=trace_span)

        span = get_current_span()
        if span is not None:
            span.annotate("findings", len(results.all()))

        issues = [
            _finding_dict(f, bucket)
            for bucket, findings in (("failed", results.failed), ("warnings", results.warnings))
            for f in findings
            if _SEVERITY_RANK[f.severity] >= _SEVERITY_RANK[threshold]
        ]
        error_count = results.error_count
        data: dict[str, Any] = {
            "repo_root": str(root),
            "issues": issues,
            "count": len(issues),
            "error_count": error_count,
            "warning_count": sum(1 for f in results.all() if not f.valid) - error_count,
            "passed_count": len(results.passed),
            "counts": results.counts(),
            "passed": [_finding_dict(f, "passed") for f in results.passed],
        }

        if error_count:
            logger.debug("Architecture validation found %d error(s)", error_count)
            return ServiceResult(
                ok=False,
                op="validate",
                data=data,
                error=ServiceError(
                    code="ARCHITECTURE_VIOLATIONS",
                    message=f"{error_count} architecture check(s) failed",
                    detail={"error_count": error_count},
                ),
            )
        return ServiceResult(ok=True, op="validate", data=data)

    @traced
    def layers(
        self,
        repo_root: Path | str | None = None,
        *,
        layer: str | None = None,
        plugin: str | None = None,
    ) -> ServiceResult:
        """List classified files, optionally filtered by layer and plugin."""
        root = self._resolve_root(repo_root)
        if not root.is_dir():
            return self._missing_root("layers", root)

        with trace_span("classify"):
            files = collect_layer_files(root)

        wanted = Layer[layer.upper()] if layer else None
        items = [
            {
                "path": f.rel_path,
                "layer": str(f.layer),
                "plugin": f.plugin,
                "lines": len(f.lines),
            }
            for f in files
            if (wanted is None or f.layer == wanted) and (plugin is None or f.plugin == plugin)
        ]
        items.sort(key=lambda item: (item["plugin"], item["layer"], item["path"]))
        return ServiceResult(ok=True, op="layers", data={"items": items, "count": len(items)})

    @traced
    def skills(self, repo_root: Path | str | None = None) -> ServiceResult:
        """List the skill registry and which agents declare each skill."""
        root = self._resolve_root(repo_root)
        if not root.is_dir():
            return self._missing_root("skills", root)

        with trace_span("classify"):
            files = collect_layer_files(root)
        registry = build_skill_registry(files)

        declared_by: dict[str, list[str]] = {}
        for f in files:
            if f.layer != Layer.AGENT:
                continue
            for name in declared_skills(f):
                declared_by.setdefault(f"{f.plugin}/{name.strip()}", []).append(f.name)

        items = [
            {
                "skill": key,
                "name": extract_skill_name(path.relative_to(root).as_posix()),
                "path": path.relative_to(root).as_posix(),
                "agents": sorted(declared_by.get(key, [])),
            }
            for key, path in sorted(registry.items())
        ]
        return ServiceResult(ok=True, op="skills", data={"items": items, "count": len(items)})

