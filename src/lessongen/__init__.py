"""
Lesson Content Generation

Turns a pedagogical request (CEFR level, session type, optional topic) into
a validated lesson: prompt construction, schema-constrained generation,
tolerant parsing, heuristic content validation and bounded retry.

**Version**: 0.1.0
**Key Dependencies**: google-genai, openai, pydantic, langfuse
"""

from lessongen.generators import (
    LessonGenerator,
    WritingEvaluator,
    evaluate_writing,
    generate_lesson,
)
from lessongen.models import LanguageLevel, LessonContent, SessionType

__version__ = "0.1.0"

SUPPORTED_LEVELS = [level.value for level in LanguageLevel]
SESSION_TYPES = [session.value for session in SessionType]

__all__ = [
    "__version__",
    "SESSION_TYPES",
    "SUPPORTED_LEVELS",
    "LanguageLevel",
    "LessonContent",
    "LessonGenerator",
    "SessionType",
    "WritingEvaluator",
    "evaluate_writing",
    "generate_lesson",
]
