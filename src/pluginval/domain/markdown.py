"""Markdown + YAML frontmatter parsing.

Pure parsing lives in :func:`split_frontmatter`; :func:`parse_markdown`
adds the file read. The architecture checks only need three things from a
document: the raw content, the body after the frontmatter block, and a
read-only view over the frontmatter keys (:class:`Frontmatter`).

A frontmatter block whose YAML fails to parse is not an exception:
the returned :class:`Frontmatter` carries the parser message under
:data:`PARSE_ERROR_KEY` so callers can report it or ignore it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

PARSE_ERROR_KEY = "_parse_error"

_FRONTMATTER_DELIMITER = "---"


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel.yaml's YAML object is stateful; a new instance per call keeps
    a failed load from leaking into the next file.
    """
    y = YAML()
    y.preserve_quotes = True
    return y


class Frontmatter(Mapping[str, Any]):
    """Read-only mapping over parsed frontmatter keys.

    Typed getters never raise on a type mismatch; they return an empty
    value instead, matching how loosely plugin authors write YAML.
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Frontmatter({self._data!r})"

    @property
    def parse_error(self) -> str | None:
        """The YAML error message, if the block failed to parse."""
        value = self._data.get(PARSE_ERROR_KEY)
        return value if isinstance(value, str) else None

    def get_string(self, key: str) -> str:
        value = self._data.get(key)
        return value if isinstance(value, str) else ""

    def get_string_list(self, key: str) -> list[str]:
        """Return the string items of a list value.

        Non-list values yield ``[]``; non-string items are dropped.
        """
        value = self._data.get(key)
        if not self.is_list(key):
            return []
        return [item for item in value if isinstance(item, str)]

    def is_list(self, key: str) -> bool:
        return isinstance(self._data.get(key), list)


@dataclass(frozen=True)
class ParsedMarkdown:
    """A markdown document split into frontmatter and body."""

    content: str
    frontmatter: Frontmatter | None = None
    body: str = ""


def split_frontmatter(content: str) -> ParsedMarkdown:
    """Split *content* into frontmatter and body.

    The document must start with ``---`` and contain a second ``---``
    line; otherwise there is no frontmatter and the body is empty (the
    caller decides whether to fall back to the raw content).
    """
    lines = content.replace("\r\n", "\n").split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return ParsedMarkdown(content=content)

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return ParsedMarkdown(content=content)

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])

    try:
        loaded = _new_yaml().load(yaml_block)
    except (YAMLError, ValueError, TypeError) as exc:
        # ruamel raises plain ValueError for bad tagged scalars (`!!int abc`).
        frontmatter = Frontmatter({PARSE_ERROR_KEY: str(exc)})
    else:
        frontmatter = Frontmatter(loaded if isinstance(loaded, Mapping) else {})

    return ParsedMarkdown(content=content, frontmatter=frontmatter, body=body)


def parse_markdown(path: Path) -> ParsedMarkdown:
    """Read *path* and split it into frontmatter and body.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    return split_frontmatter(path.read_text(encoding="utf-8"))
