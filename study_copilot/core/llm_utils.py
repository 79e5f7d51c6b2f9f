"""
Shared LLM utilities for converting between our request/response values and
LangChain messages.

Handles the various Gemini response content formats (plain strings, lists of
content blocks, inline image blocks) and reads grounding citations from the
response metadata.
"""
import re
from typing import Any, Dict, List

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from study_copilot.core.schemas import (
    Citation,
    GenerationRequest,
    GenerationResponse,
    Part,
    PartKind,
    Role,
)

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


def part_to_content_block(part: Part) -> Dict[str, Any]:
    """Convert a Part into a LangChain content block for Gemini."""
    if part.kind == PartKind.TEXT:
        return {"type": "text", "text": part.text}
    return {"type": "media", "mime_type": part.mime_type, "data": part.data}


def build_messages(request: GenerationRequest) -> List[BaseMessage]:
    """
    Build the message list for a generation request.

    Order: optional system preamble, prior turns as alternating
    HumanMessage/AIMessage, then the request input as one HumanMessage.
    """
    messages: List[BaseMessage] = []
    if request.options.system_preamble:
        messages.append(SystemMessage(content=request.options.system_preamble))

    for turn in request.turns:
        if turn.role == Role.USER:
            messages.append(HumanMessage(content=turn.content))
        else:
            messages.append(AIMessage(content=turn.content))

    messages.append(HumanMessage(content=[part_to_content_block(p) for p in request.input]))
    return messages


def normalize_content_to_string(content) -> str:
    """
    Normalize any message content to plain text.

    Handles:
    - Strings (returned as-is)
    - Lists of content blocks from Gemini: [{'type': 'text', 'text': '...'}, ...]
      (thinking and image blocks are skipped)
    - Single dict content blocks
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        text_parts = []
        for item in content:
            if isinstance(item, str):
                text_parts.append(item)
            elif isinstance(item, dict) and item.get("type", "text") == "text" and "text" in item:
                text_parts.append(item["text"])
        return "".join(text_parts)
    if isinstance(content, dict):
        return content.get("text", "") if content.get("type", "text") == "text" else ""
    return str(content) if content else ""


def extract_content_as_string(response) -> str:
    """Safely extract the text of an LLM response (or raw content)."""
    content = response.content if hasattr(response, "content") else response
    return normalize_content_to_string(content)


def extract_inline_parts(content) -> List[Part]:
    """Collect inline binary parts (generated images) from message content."""
    if not isinstance(content, list):
        return []

    parts = []
    for item in content:
        if not isinstance(item, dict):
            continue
        if item.get("type") == "image_url":
            image_url = item.get("image_url")
            url = image_url.get("url", "") if isinstance(image_url, dict) else str(image_url or "")
            match = _DATA_URL.match(url)
            if match:
                parts.append(Part.from_base64(match.group("data"), match.group("mime")))
        elif item.get("type") == "image" and item.get("base64"):
            parts.append(Part.from_base64(item["base64"], item.get("mime_type", "image/png")))
    return parts


def extract_citations(response) -> List[Citation]:
    """
    Read grounding citations from a Gemini response.

    Only chunks carrying a web URI are kept; duplicates are dropped.
    """
    metadata = getattr(response, "response_metadata", None) or {}
    grounding = metadata.get("grounding_metadata") or metadata.get("groundingMetadata") or {}
    chunks = grounding.get("grounding_chunks") or grounding.get("groundingChunks") or []

    citations = []
    seen = set()
    for chunk in chunks:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if not web or not web.get("uri"):
            continue
        if web["uri"] in seen:
            continue
        seen.add(web["uri"])
        citations.append(Citation(title=web.get("title") or "", uri=web["uri"]))
    return citations


def message_to_response(message) -> GenerationResponse:
    """Convert a LangChain AI message into an immutable GenerationResponse."""
    text = extract_content_as_string(message)
    parts: List[Part] = []
    if text:
        parts.append(Part.from_text(text))
    parts.extend(extract_inline_parts(getattr(message, "content", None)))
    return GenerationResponse(
        text=text,
        parts=tuple(parts),
        citations=tuple(extract_citations(message)),
    )
