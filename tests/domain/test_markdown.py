"""Tests for markdown frontmatter splitting and the Frontmatter view."""

from __future__ import annotations

from pathlib import Path

import pytest

from pluginval.domain.markdown import (
    PARSE_ERROR_KEY,
    Frontmatter,
    parse_markdown,
    split_frontmatter,
)


class TestSplitFrontmatter:
    def test_basic(self) -> None:
        parsed = split_frontmatter("---\nname: reviewer\n---\nBody line\nSecond")
        assert parsed.frontmatter is not None
        assert parsed.frontmatter.get_string("name") == "reviewer"
        assert parsed.body == "Body line\nSecond"

    def test_no_frontmatter(self) -> None:
        parsed = split_frontmatter("# Title\nText")
        assert parsed.frontmatter is None
        assert parsed.body == ""
        assert parsed.content == "# Title\nText"

    def test_unclosed_block(self) -> None:
        parsed = split_frontmatter("---\nname: x\nno closing line")
        assert parsed.frontmatter is None
        assert parsed.body == ""

    def test_empty_block(self) -> None:
        parsed = split_frontmatter("---\n---\nBody")
        assert parsed.frontmatter is not None
        assert len(parsed.frontmatter) == 0
        assert parsed.body == "Body"

    def test_crlf_line_endings(self) -> None:
        parsed = split_frontmatter("---\r\nname: x\r\n---\r\nBody")
        assert parsed.frontmatter is not None
        assert parsed.frontmatter.get_string("name") == "x"
        assert parsed.body == "Body"

    def test_invalid_yaml_recorded(self) -> None:
        parsed = split_frontmatter("---\nskills: [unclosed\n---\nBody")
        assert parsed.frontmatter is not None
        assert parsed.frontmatter.parse_error
        assert PARSE_ERROR_KEY in parsed.frontmatter
        assert parsed.body == "Body"

    def test_bad_tagged_scalar_recorded(self) -> None:
        parsed = split_frontmatter("---\na: !!int abc\n---\nBody")
        assert parsed.frontmatter is not None
        assert parsed.frontmatter.parse_error
        assert parsed.body == "Body"

    def test_non_mapping_yaml(self) -> None:
        parsed = split_frontmatter("---\n- a\n- b\n---\nBody")
        assert parsed.frontmatter is not None
        assert dict(parsed.frontmatter) == {}

    def test_body_keeps_later_delimiters(self) -> None:
        parsed = split_frontmatter("---\na: 1\n---\nText\n---\nMore")
        assert parsed.body == "Text\n---\nMore"


class TestFrontmatter:
    def test_get_string(self) -> None:
        fm = Frontmatter({"name": "x", "count": 3})
        assert fm.get_string("name") == "x"
        assert fm.get_string("count") == ""
        assert fm.get_string("missing") == ""

    def test_get_string_list_drops_non_strings(self) -> None:
        fm = Frontmatter({"skills": ["a", 2, "b", None]})
        assert fm.get_string_list("skills") == ["a", "b"]

    @pytest.mark.parametrize("value", ["a", 5, {"a": 1}, None])
    def test_get_string_list_non_list(self, value: object) -> None:
        fm = Frontmatter({"skills": value})
        assert fm.get_string_list("skills") == []
        assert not fm.is_list("skills")

    def test_parse_error_absent(self) -> None:
        assert Frontmatter({"a": 1}).parse_error is None

    def test_mapping_protocol(self) -> None:
        fm = Frontmatter({"a": 1, "b": 2})
        assert list(fm) == ["a", "b"]
        assert fm["a"] == 1
        assert len(fm) == 2
        assert "Frontmatter(" in repr(fm)

    def test_copy_is_isolated(self) -> None:
        source = {"a": 1}
        fm = Frontmatter(source)
        source["a"] = 2
        assert fm["a"] == 1


class TestParseMarkdown:
    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.md"
        path.write_text("---\nskills: [one, two]\n---\nBody", encoding="utf-8")

        parsed = parse_markdown(path)
        assert parsed.frontmatter is not None
        assert parsed.frontmatter.get_string_list("skills") == ["one", "two"]

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            parse_markdown(tmp_path / "absent.md")
