"""Wire-format models and the response schema sent to the model.

The model emits a compact JSON object (short keys keep output tokens down).
``LESSON_RESPONSE_SCHEMA`` constrains that object at generation time;
``RawLessonPayload`` reads it back. Every field of the pydantic models may
be missing, and mistyped values are coerced or dropped rather than
rejected: any JSON object reads into a payload, and the content validator
decides whether it is usable.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Coercion helpers
# ============================================================================


def _as_text(value: Any) -> Optional[str]:
    """Render a JSON scalar as a string; nested values as compact JSON."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _as_index(value: Any) -> Optional[int]:
    """Answer index from an int, an integral float or a digit string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _as_text_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if not isinstance(value, list):
        value = [value]
    return [_as_text(item) for item in value if item is not None]


def _as_object_list(value: Any) -> Optional[List[Dict[str, Any]]]:
    """Keep the object items of a list; anything else reads as absent."""
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, dict)]


# ============================================================================
# Wire models
# ============================================================================


class RawVocabularyEntry(BaseModel):
    """Vocabulary item as emitted by the model."""

    de: Optional[str] = Field(None, description="German word")
    en: Optional[str] = Field(None, description="English explanation")
    hi: Optional[str] = Field(None, description="Hindi translation (Latin script)")
    ex: Optional[str] = Field(None, description="Example sentence (German)")

    @field_validator("de", "en", "hi", "ex", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return _as_text(v)


class RawQuestion(BaseModel):
    """Multiple choice question as emitted by the model."""

    qu: Optional[str] = Field(None, description="Question")
    ops: Optional[List[str]] = Field(None, description="4 options")
    ans: Optional[int] = Field(None, description="Correct answer index (0-3)")
    exp: Optional[str] = Field(None, description="Explanation")

    @field_validator("qu", "exp", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return _as_text(v)

    @field_validator("ops", mode="before")
    @classmethod
    def coerce_options(cls, v: Any) -> Optional[List[str]]:
        """Numeric options such as [18, 19, 20, 21] become strings."""
        return _as_text_list(v)

    @field_validator("ans", mode="before")
    @classmethod
    def coerce_answer(cls, v: Any) -> Optional[int]:
        return _as_index(v)


class RawLessonPayload(BaseModel):
    """Compact lesson object produced by one generation attempt."""

    t: Optional[str] = Field(None, description="Topic")
    l: Optional[str] = Field(None, description="Level")  # noqa: E741
    voc: Optional[List[RawVocabularyEntry]] = Field(None, description="Vocabulary")
    txt: Optional[str] = Field(None, description="Reading text (German only)")
    txt_tr: Optional[str] = Field(None, description="English translation of the reading text")
    q: Optional[List[RawQuestion]] = Field(None, description="Comprehension questions")
    wr: Optional[str] = Field(None, description="Writing prompt instruction")
    pts: Optional[List[str]] = Field(None, description="Writing bullet points")
    lis: Optional[str] = Field(None, description="Listening scenario")

    model_config = {
        "extra": "ignore",
        "json_schema_extra": {
            "example": {
                "t": "Greetings",
                "l": "A1",
                "voc": [
                    {"de": "Hallo", "en": "Hello", "hi": "Namaste", "ex": "Hallo!"}
                ],
            }
        },
    }

    @field_validator("t", "l", "txt", "txt_tr", "wr", "lis", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return _as_text(v)

    @field_validator("voc", "q", mode="before")
    @classmethod
    def keep_objects(cls, v: Any) -> Optional[List[Dict[str, Any]]]:
        """A vocabulary or question list that is not a list of objects reads as absent."""
        return _as_object_list(v)

    @field_validator("pts", mode="before")
    @classmethod
    def coerce_points(cls, v: Any) -> Optional[List[str]]:
        return _as_text_list(v)


# ============================================================================
# Response schema contract
# ============================================================================


def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


LESSON_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "t": _string("Topic"),
        "l": _string("Level"),
        "voc": {
            "type": "array",
            "description": "Vocabulary (max 4 items)",
            "items": {
                "type": "object",
                "properties": {
                    "de": _string("German Word"),
                    "en": _string("English Explanation"),
                    "hi": _string("Hindi Translation (Latin)"),
                    "ex": _string("Example Sentence (German)"),
                },
                "required": ["de", "en", "hi", "ex"],
            },
        },
        "txt": _string("Reading Text (German only)"),
        "txt_tr": _string("English translation of reading text (for A0)"),
        "q": {
            "type": "array",
            "description": "Questions (max 3)",
            "items": {
                "type": "object",
                "properties": {
                    "qu": _string("Question"),
                    "ops": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "4 Options",
                    },
                    "ans": {"type": "integer", "description": "Correct Answer Index (0-3)"},
                    "exp": _string("Explanation"),
                },
                "required": ["qu", "ops", "ans"],
            },
        },
        "wr": _string("Writing Prompt Instruction"),
        "pts": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Writing Bullet Points (max 3)",
        },
        "lis": _string("Listening Scenario"),
    },
    "required": ["t", "l", "voc"],
}

LESSON_SCHEMA_NAME = "lesson_payload"
