"""Layered-architecture validation for plugin packages.

Files are classified into three layers with a strict dependency direction::

    command (0) → agent (1) → skill (2)

A layer may reference layers with a higher rank, never the reverse.
The checkers in this package are independent read-only passes over the
same classified file list; each appends findings to a caller-owned
:class:`~pluginval.architecture.models.Results`.
"""

from pluginval.architecture.models import Finding, Layer, LayeredFile, Results
from pluginval.architecture.validator import validate

__all__ = ["Finding", "Layer", "LayeredFile", "Results", "validate"]
