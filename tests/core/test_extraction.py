"""
Tests for fenced-block and JSON extraction from model output.
"""
import pytest

from study_copilot.core.errors import ErrorKind, MalformedOutputError
from study_copilot.core.extraction import (
    extract_fenced_block,
    extract_json,
    extract_json_or_default,
    split_markdown_sections,
    unwrap_payload,
)


class TestExtractFencedBlock:
    """Test language-tagged fence extraction"""

    def test_extracts_tagged_block(self):
        raw = "Intro text\n```html\n<p>hello</p>\n```\ntrailing words"
        assert extract_fenced_block(raw, "html") == "<p>hello</p>"

    def test_tag_is_case_insensitive(self):
        raw = "```HTML\n<div></div>\n```"
        assert extract_fenced_block(raw, "html") == "<div></div>"

    def test_first_tagged_block_wins(self):
        raw = "```html\n<p>one</p>\n```\n```html\n<p>two</p>\n```"
        assert extract_fenced_block(raw, "html") == "<p>one</p>"

    def test_longer_tag_does_not_match(self):
        assert extract_fenced_block("```htmlx\n<p></p>\n```", "html") is None

    def test_other_language_does_not_match(self):
        assert extract_fenced_block("```js\nlet a = 1;\n```", "html") is None

    def test_no_fence_returns_none(self):
        assert extract_fenced_block("Sorry, I cannot build that.", "html") is None
        assert extract_fenced_block("", "html") is None

    def test_multiline_content_preserved(self):
        raw = "```html\n<html>\n  <body></body>\n</html>\n```"
        assert extract_fenced_block(raw, "html") == "<html>\n  <body></body>\n</html>"


class TestUnwrapPayload:
    """Test fence stripping order: tagged, unlabeled, bare"""

    def test_tagged_fence(self):
        assert unwrap_payload('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_unlabeled_fence(self):
        assert unwrap_payload("Result:\n```\n[1, 2]\n```") == "[1, 2]"

    def test_unlabeled_fence_after_labeled_block(self):
        raw = 'Notes:\n```text\nsee below\n```\nPayload:\n```\n{"facts": ["a"]}\n```'

        assert unwrap_payload(raw) == '{"facts": ["a"]}'
        assert extract_json_or_default(raw, {}) == {"facts": ["a"]}

    def test_labeled_blocks_only_fall_through_to_bare_text(self):
        raw = "```text\nsee below\n```"
        assert unwrap_payload(raw) == raw

    def test_bare_payload(self):
        assert unwrap_payload('  {"a": 1}\n') == '{"a": 1}'

    def test_none_is_empty(self):
        assert unwrap_payload(None) == ""


class TestExtractJson:
    """Test strict JSON parsing"""

    def test_parses_fenced_json(self):
        raw = '```json\n{"facts": ["a", "b"], "searchContext": "summary"}\n```'
        assert extract_json(raw) == {"facts": ["a", "b"], "searchContext": "summary"}

    def test_parses_bare_json(self):
        assert extract_json("[1, 2, 3]") == [1, 2, 3]

    def test_malformed_json_raises(self):
        with pytest.raises(MalformedOutputError) as exc_info:
            extract_json('```json\n{"facts": [\n```')
        assert exc_info.value.kind == ErrorKind.UNUSABLE_CONTENT

    def test_prose_raises(self):
        with pytest.raises(MalformedOutputError):
            extract_json("I could not find anything about that topic.")

    def test_default_on_failure(self):
        assert extract_json_or_default("not json", {"facts": []}) == {"facts": []}
        assert extract_json_or_default('{"ok": true}', None) == {"ok": True}


class TestSplitMarkdownSections:
    """Test heading-based section splitting"""

    def test_splits_on_level_two(self):
        markdown = (
            "# Title\n"
            "## 🧐 Analysis & Context\n"
            "Overview\n"
            "### Detail\n"
            "More\n"
            "## 🎮 Simulator Concept\n"
            "Sliders"
        )
        sections = split_markdown_sections(markdown)

        assert list(sections) == ["🧐 Analysis & Context", "🎮 Simulator Concept"]
        assert sections["🧐 Analysis & Context"] == "Overview\n### Detail\nMore"
        assert sections["🎮 Simulator Concept"] == "Sliders"

    def test_no_headings(self):
        assert split_markdown_sections("plain text") == {}
