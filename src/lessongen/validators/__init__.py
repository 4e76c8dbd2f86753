"""Response schema contract and content validation for lesson payloads."""

from lessongen.validators.content_validator import (
    ValidationOutcome,
    inspect_payload,
    validate,
)
from lessongen.validators.schema import (
    LESSON_RESPONSE_SCHEMA,
    RawLessonPayload,
    RawQuestion,
    RawVocabularyEntry,
)

__all__ = [
    "LESSON_RESPONSE_SCHEMA",
    "RawLessonPayload",
    "RawQuestion",
    "RawVocabularyEntry",
    "ValidationOutcome",
    "inspect_payload",
    "validate",
]
