"""Exceptions raised inside the lesson generation loop.

None of these reach callers of ``generate_lesson``; the generator catches
them and folds them into its retry decision.
"""

from typing import Any, Optional


class LessonGenerationError(Exception):
    """Base class for lesson generation failures."""


class TransportError(LessonGenerationError):
    """The model provider call failed (network, quota, provider error)."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class ParseError(LessonGenerationError):
    """Model output is not a JSON object of the expected shape."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class ValidationRejection(LessonGenerationError):
    """A parsed payload failed the content heuristics.

    Holds on to the payload so the generator can still return it when
    retries run out and the exhaustion policy allows it.
    """

    def __init__(self, rule: str, detail: str, payload: Any = None):
        super().__init__(f"{rule}: {detail}")
        self.rule = rule
        self.detail = detail
        self.payload = payload
