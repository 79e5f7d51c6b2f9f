"""
Structured extraction from free-form model output.

Models often wrap machine-readable payloads in markdown code fences, with or
without a language tag. These helpers strip the fences syntactically; they
never execute or evaluate what they extract.
"""
import json
import re
from typing import Any, Dict, Optional

from study_copilot.core.errors import MalformedOutputError

_FENCED_BLOCK = re.compile(r"```([^\r\n`]*)\r?\n(.*?)\r?\n?```", re.DOTALL)
_HEADING = re.compile(r"^(#{1,6})[^\S\r\n]+(.+?)[^\S\r\n]*#*[^\S\r\n]*$", re.MULTILINE)


def _labeled_fence(language: str) -> "re.Pattern[str]":
    # The lookahead keeps "html" from matching a "htmlx" tag.
    return re.compile(
        r"```" + re.escape(language) + r"(?![\w+-])[^\S\r\n]*\r?\n?(.*?)\r?\n?```",
        re.DOTALL | re.IGNORECASE,
    )


def extract_fenced_block(raw: str, language: str) -> Optional[str]:
    """
    Return the inner content of the first fence tagged with ``language``.

    Args:
        raw: Model output text
        language: Fence tag to look for (e.g. "html", "json")

    Returns:
        Text between the opening tag line and the closing fence, or None if
        the output holds no fence with that tag.
    """
    if not raw:
        return None
    match = _labeled_fence(language).search(raw)
    if match is None:
        return None
    return match.group(1)


def _first_unlabeled_block(raw: str) -> Optional[str]:
    # Each match spans an opening fence and its closer, so a labeled block's
    # closing fence is never mistaken for an unlabeled opener.
    for match in _FENCED_BLOCK.finditer(raw):
        if not match.group(1).strip():
            return match.group(2)
    return None


def unwrap_payload(raw: str, language: str = "json") -> str:
    """
    Strip markdown fencing around a payload.

    Tries, in order: a fence tagged with ``language``, the first unlabeled
    fence, and finally the whole text as a bare payload.
    """
    raw = raw or ""
    labeled = extract_fenced_block(raw, language)
    if labeled is not None:
        return labeled.strip()

    unlabeled = _first_unlabeled_block(raw)
    if unlabeled is not None:
        return unlabeled.strip()

    return raw.strip()


def extract_json(raw: str) -> Any:
    """
    Parse a JSON payload out of model output.

    Raises:
        MalformedOutputError: If the unwrapped text is not strictly valid JSON
    """
    payload = unwrap_payload(raw, "json")
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedOutputError(f"Model output is not valid JSON: {e}") from e


def extract_json_or_default(raw: str, default: Any) -> Any:
    """Like extract_json, but return ``default`` when parsing fails."""
    try:
        return extract_json(raw)
    except MalformedOutputError:
        return default


def split_markdown_sections(markdown: str, level: int = 2) -> Dict[str, str]:
    """
    Split markdown into sections keyed by heading text.

    Only headings of exactly ``level`` start a new section; deeper headings
    stay inside the body of the enclosing section.

    Args:
        markdown: Markdown text
        level: Heading depth to split on (2 for "## ...")

    Returns:
        Ordered dict of heading text -> section body (stripped)
    """
    sections: Dict[str, str] = {}
    matches = [m for m in _HEADING.finditer(markdown or "") if len(m.group(1)) == level]
    for idx, match in enumerate(matches):
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(markdown)
        sections[match.group(2).strip()] = markdown[match.end():end].strip()
    return sections
