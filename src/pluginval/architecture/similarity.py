"""Content similarity engine — cross-layer duplication inside a plugin.

Prose copy-pasted into both a command and the skill it uses belongs in
one place (the lower layer). Files are compared as sets of word
trigrams with Jaccard similarity; only files in different layers of the
same plugin are compared.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from pluginval.architecture.models import (
    CHECK_CONTENT_SIMILARITY,
    SEVERITY_WARNING,
    Finding,
    LayeredFile,
    Results,
    SimilarityPair,
)
from pluginval.architecture.patterns import is_fence

logger = logging.getLogger(__name__)

NGRAM_SIZE = 3
# 30% shared trigrams catches substantial duplication.
SIMILARITY_THRESHOLD = 0.30
# Files with fewer trigrams are too short to compare meaningfully.
MIN_NGRAMS = 20
MIN_LINE_LENGTH = 10
SHARED_SAMPLE_SIZE = 5

_STRUCTURAL_MARKERS = frozenset({"---", "==="})
_LIST_MARKERS = ("- ", "* ", "- [ ] ", "- [x] ")


def clean_for_similarity(text: str) -> str:
    """Drop code, structure and short lines; lowercase and join what remains."""
    cleaned: list[str] = []
    in_code_block = False

    for line in text.split("\n"):
        stripped = line.strip()

        if is_fence(stripped):
            in_code_block = not in_code_block
            continue
        if in_code_block or not stripped or stripped in _STRUCTURAL_MARKERS:
            continue

        if stripped.startswith("#"):
            stripped = stripped.lstrip("# ")
        # Each marker is stripped at most once, in order.
        for marker in _LIST_MARKERS:
            stripped = stripped.removeprefix(marker)

        if len(stripped) < MIN_LINE_LENGTH:
            continue
        cleaned.append(stripped.lower())

    return " ".join(cleaned)


def tokenize(text: str) -> list[str]:
    """Split on whitespace, keep letters, digits, ``-`` and ``_``."""
    words: list[str] = []
    for raw in text.split():
        word = "".join(ch for ch in raw if ch.isalpha() or ch.isdigit() or ch in "-_")
        if len(word) >= 2:
            words.append(word)
    return words


def extract_ngrams(text: str, n: int = NGRAM_SIZE) -> set[str]:
    """Set of space-joined word n-grams of the cleaned *text*."""
    words = tokenize(clean_for_similarity(text))
    if len(words) < n:
        return set()
    return {" ".join(words[i : i + n]) for i in range(len(words) - n + 1)}


def jaccard_similarity(a: set[str], b: set[str]) -> float:
    """``|a ∩ b| / |a ∪ b|``; 0.0 when either set is empty."""
    if not a or not b:
        return 0.0
    intersection = len(a & b)
    union = len(a) + len(b) - intersection
    return intersection / union if union else 0.0


def sample_shared_ngrams(a: set[str], b: set[str], limit: int = SHARED_SAMPLE_SIZE) -> list[str]:
    """Up to *limit* shared n-grams, sorted for stable output."""
    return sorted(a & b)[:limit]


def detect_similar_pairs(
    files: Sequence[LayeredFile],
    *,
    ngram_size: int = NGRAM_SIZE,
    threshold: float = SIMILARITY_THRESHOLD,
    min_ngrams: int = MIN_NGRAMS,
) -> list[SimilarityPair]:
    """Cross-layer pairs among *files* whose similarity reaches *threshold*."""
    candidates: list[tuple[LayeredFile, set[str]]] = []
    for f in files:
        grams = extract_ngrams(f.body, ngram_size)
        if len(grams) >= min_ngrams:
            candidates.append((f, grams))

    pairs: list[SimilarityPair] = []
    for i, (file_a, grams_a) in enumerate(candidates):
        for file_b, grams_b in candidates[i + 1 :]:
            if file_a.layer == file_b.layer:
                continue
            sim = jaccard_similarity(grams_a, grams_b)
            if sim >= threshold:
                pairs.append(
                    SimilarityPair(
                        file_a=file_a.path,
                        layer_a=file_a.layer,
                        file_b=file_b.path,
                        layer_b=file_b.layer,
                        similarity=sim,
                        shared=tuple(sample_shared_ngrams(grams_a, grams_b)),
                    )
                )
    return pairs


def group_by_plugin(files: Iterable[LayeredFile]) -> dict[str, list[LayeredFile]]:
    """Files grouped by plugin, plugins in sorted order."""
    groups: dict[str, list[LayeredFile]] = defaultdict(list)
    for f in files:
        groups[f.plugin].append(f)
    return {plugin: groups[plugin] for plugin in sorted(groups)}


def validate_content_similarity(
    files: Iterable[LayeredFile],
    results: Results,
    *,
    ngram_size: int = NGRAM_SIZE,
    threshold: float = SIMILARITY_THRESHOLD,
    min_ngrams: int = MIN_NGRAMS,
) -> None:
    """Record similarity findings per plugin.

    A plugin with no flagged pair still gets one passing finding.
    """
    for plugin, plugin_files in group_by_plugin(files).items():
        pairs = detect_similar_pairs(
            plugin_files,
            ngram_size=ngram_size,
            threshold=threshold,
            min_ngrams=min_ngrams,
        )
        if not pairs:
            results.add(
                Finding(
                    file=f"plugins/{plugin}",
                    type=CHECK_CONTENT_SIMILARITY,
                    valid=True,
                    severity=SEVERITY_WARNING,
                )
            )
            continue

        rel_paths = {f.path: f.rel_path for f in plugin_files}
        for pair in pairs:
            logger.debug(
                "Similar content in %s: %s ~ %s (%.2f)",
                plugin,
                pair.file_a,
                pair.file_b,
                pair.similarity,
            )
            results.add(
                Finding(
                    file=rel_paths[pair.file_a],
                    type=CHECK_CONTENT_SIMILARITY,
                    valid=False,
                    severity=SEVERITY_WARNING,
                    errors=[
                        f"{pair.similarity * 100:.0f}% content overlap with "
                        f"{rel_paths[pair.file_b]} ({pair.layer_a}↔{pair.layer_b} layer) "
                        "— consider extracting shared content to a lower layer"
                    ],
                    detail={
                        "similarity": round(pair.similarity, 4),
                        "other": rel_paths[pair.file_b],
                        "shared": list(pair.shared),
                    },
                )
            )
