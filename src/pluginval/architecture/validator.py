"""Architecture validation entry point.

Classifies files once, then runs each check as an independent read-only
pass over the same list:

1. layer dependency direction
2. content similarity across layers
3. responsibility heuristics
4. skill references (agent → skill existence)
5. skill coverage advisory
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pluginval.architecture.classifier import collect_layer_files
from pluginval.architecture.dependency import validate_layer_dependencies
from pluginval.architecture.models import Results
from pluginval.architecture.references import validate_skill_coverage, validate_skill_references
from pluginval.architecture.responsibility import (
    BUSINESS_LOGIC_MAX,
    COMMAND_MAX_LINES,
    COMMAND_WARN_LINES,
    validate_responsibilities,
)
from pluginval.architecture.similarity import (
    MIN_NGRAMS,
    NGRAM_SIZE,
    SIMILARITY_THRESHOLD,
    validate_content_similarity,
)

logger = logging.getLogger(__name__)

Instrument = Callable[[str], AbstractContextManager[Any]]


@dataclass(frozen=True)
class CheckOptions:
    """Tunable thresholds. Defaults are the module constants."""

    ngram_size: int = NGRAM_SIZE
    similarity_threshold: float = SIMILARITY_THRESHOLD
    min_ngrams: int = MIN_NGRAMS
    command_max_lines: int = COMMAND_MAX_LINES
    command_warn_lines: int = COMMAND_WARN_LINES
    business_logic_max: int = BUSINESS_LOGIC_MAX


def _no_instrument(_name: str) -> AbstractContextManager[Any]:
    return nullcontext()


def validate(
    repo_root: Path,
    options: CheckOptions | None = None,
    *,
    instrument: Instrument | None = None,
) -> Results:
    """Run every architecture check under *repo_root*.

    Args:
        repo_root: Repository root containing a ``plugins/`` directory.
        options: Threshold overrides; defaults when None.
        instrument: Optional factory wrapping each pass in a context
            manager (used for telemetry spans).
    """
    opts = options or CheckOptions()
    span = instrument or _no_instrument
    results = Results()

    with span("classify"):
        files = collect_layer_files(repo_root)
    if not files:
        logger.debug("No layer files found under %s", repo_root)
        return results

    with span("layer_dependency"):
        validate_layer_dependencies(files, results)
    with span("content_similarity"):
        validate_content_similarity(
            files,
            results,
            ngram_size=opts.ngram_size,
            threshold=opts.similarity_threshold,
            min_ngrams=opts.min_ngrams,
        )
    with span("responsibility"):
        validate_responsibilities(
            files,
            results,
            command_max_lines=opts.command_max_lines,
            command_warn_lines=opts.command_warn_lines,
            business_logic_max=opts.business_logic_max,
        )
    with span("skill_reference"):
        validate_skill_references(files, results)
    with span("skill_coverage"):
        validate_skill_coverage(files, repo_root, results)

    logger.debug("Architecture validation finished: %s", results.counts())
    return results
