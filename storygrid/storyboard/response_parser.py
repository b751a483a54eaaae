"""
Response Parser

Decode Gemini's text reply into typed results. Only the structural shape is
checked; array lengths are trusted to follow the requested schema.
"""

import json
from typing import Any, Dict, Optional

from pydantic import ValidationError

from storygrid.core.exceptions import ParseError
from storygrid.core.logging_config import get_logger

from .models import BilingualText, StoryboardResult

logger = get_logger("storyboard.response_parser")


def _strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code block, if any."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def decode_json_object(text: Optional[str], strict: bool = False) -> Dict[str, Any]:
    """
    Decode ``text`` as a JSON object.

    A missing or blank reply decodes to ``{}`` unless ``strict`` is set.
    Anything that is not well-formed JSON, or not an object, raises ParseError.
    """
    if text is None or not text.strip():
        if strict:
            raise ParseError("empty response", raw=text or "")
        # Compatibility: a blank reply degrades to an empty object.
        # TODO: make strict the default once callers handle ParseError on blank replies
        logger.warning("Empty model response; degrading to an empty object")
        return {}

    cleaned = _strip_code_fence(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON ({e.msg} at line {e.lineno} column {e.colno})", raw=text)

    if not isinstance(data, dict):
        raise ParseError(f"expected a JSON object, got {type(data).__name__}", raw=text)
    return data


def parse_storyboard(text: Optional[str], strict: bool = False) -> StoryboardResult:
    """Parse a full storyboard reply."""
    data = decode_json_object(text, strict=strict)
    try:
        result = StoryboardResult.from_wire(data)
    except ValidationError as e:
        raise ParseError(f"storyboard shape mismatch: {e.error_count()} error(s)", raw=text) from e

    logger.debug(f"Parsed storyboard: {len(result.shots)} shots, {len(result.transitions)} transitions")
    return result


def parse_shot(text: Optional[str], strict: bool = False) -> BilingualText:
    """Parse a single-shot reply (a bare ``{en, cn}`` pair)."""
    data = decode_json_object(text, strict=strict)
    if not data and not strict:
        data = {"en": "", "cn": ""}
    try:
        return BilingualText.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"shot description shape mismatch: {e.error_count()} error(s)", raw=text) from e
