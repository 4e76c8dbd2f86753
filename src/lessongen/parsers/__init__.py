"""Parsers for raw model output."""

from lessongen.parsers.response_parser import parse_lesson_payload, strip_code_fences

__all__ = ["parse_lesson_payload", "strip_code_fences"]
