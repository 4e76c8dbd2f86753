"""Parse raw model output into the compact lesson payload.

Models occasionally ignore the "no markdown" instruction and wrap their JSON
in a fenced code block, so fences are stripped before decoding. No content
checks happen here (see ``lessongen.validators.content_validator``), and
mistyped fields are coerced by the wire models instead of failing the parse.
"""

import json
import logging
import re

from lessongen.errors import ParseError
from lessongen.validators.schema import RawLessonPayload

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```[\w-]*\s*")
_CLOSING_FENCE = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ``` fence, with or without a language tag.

    Example:
        >>> strip_code_fences('```json\\n{"t": "x"}\\n```')
        '{"t": "x"}'
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _OPENING_FENCE.sub("", cleaned)
        cleaned = _CLOSING_FENCE.sub("", cleaned)
    return cleaned


def parse_lesson_payload(raw_text: str) -> RawLessonPayload:
    """Decode model output into a RawLessonPayload.

    Args:
        raw_text: Text returned by the model

    Returns:
        Parsed payload (fields may be missing or coerced)

    Raises:
        ParseError: If the text is empty, not JSON, or not a JSON object
    """
    if not raw_text or not raw_text.strip():
        raise ParseError("Empty response text", raw_text=raw_text or "")

    cleaned = strip_code_fences(raw_text)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.debug(f"Unparseable response (first 200 chars): {cleaned[:200]}")
        raise ParseError(f"Invalid JSON: {e}", raw_text=raw_text) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object, got {type(data).__name__}", raw_text=raw_text
        )

    return RawLessonPayload.model_validate(data)
