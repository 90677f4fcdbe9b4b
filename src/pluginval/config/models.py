"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pluginval.toml only contains
overrides. A repository needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from pluginval.architecture.responsibility import (
    BUSINESS_LOGIC_MAX,
    COMMAND_MAX_LINES,
    COMMAND_WARN_LINES,
)
from pluginval.architecture.similarity import MIN_NGRAMS, NGRAM_SIZE, SIMILARITY_THRESHOLD
from pluginval.architecture.validator import CheckOptions


class ArchitectureConfig(BaseModel):
    """[architecture] section."""

    model_config = {"frozen": True}

    ngram_size: int = Field(default=NGRAM_SIZE, ge=1)
    similarity_threshold: float = Field(default=SIMILARITY_THRESHOLD, ge=0.0, le=1.0)
    min_ngrams: int = Field(default=MIN_NGRAMS, ge=0)
    command_max_lines: int = Field(default=COMMAND_MAX_LINES, ge=1)
    command_warn_lines: int = Field(default=COMMAND_WARN_LINES, ge=1)
    business_logic_max: int = Field(default=BUSINESS_LOGIC_MAX, ge=0)

    def to_options(self) -> CheckOptions:
        return CheckOptions(**self.model_dump())


class ReportConfig(BaseModel):
    """[report] section."""

    model_config = {"frozen": True}

    min_severity: Literal["warning", "error"] = "warning"
    show_passed: bool = False

