"""Runtime configuration for lesson generation.

Environment variables are loaded from ``.env`` (or the file named by
``ENV_FILE``) once at import time. Settings objects read them through
``from_env()`` so tests can build settings explicitly instead.
"""

import os
from enum import Enum
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv(os.getenv("ENV_FILE"), override=True)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

# LLM
DEFAULT_MODEL = os.getenv("LLM_MODEL", "gemini-2.5-flash")
LANGFUSE_ENABLED = os.getenv("LANGFUSE_ENABLED", "false").lower() in ("true", "1", "yes")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


class ExhaustionPolicy(str, Enum):
    """What to return when every attempt was rejected by the validator."""

    DEGRADE = "degrade"  # map and return the last rejected payload
    STRICT = "strict"  # return None


class ValidationThresholds(BaseModel):
    """Tuned limits for the content validator.

    The ceilings sit well above the word counts requested in the prompt;
    they catch runaway generation, not slightly long passages.
    """

    max_words_a0: int = Field(60, gt=0, description="Reading text word ceiling for A0")
    max_words: int = Field(150, gt=0, description="Reading text word ceiling for A1 and above")
    max_word_repeats: int = Field(
        8, gt=0, description="Maximum occurrences of a single word in the reading text"
    )
    min_repeat_word_length: int = Field(
        4, gt=0, description="Words shorter than this are ignored by the repetition check"
    )

    def word_ceiling(self, level: str) -> int:
        """Return the reading-text word ceiling for a CEFR level."""
        return self.max_words_a0 if getattr(level, "value", level) == "A0" else self.max_words

    @classmethod
    def from_env(cls) -> "ValidationThresholds":
        return cls(
            max_words_a0=_env_int("LESSON_MAX_WORDS_A0", 60),
            max_words=_env_int("LESSON_MAX_WORDS", 150),
            max_word_repeats=_env_int("LESSON_MAX_WORD_REPEATS", 8),
            min_repeat_word_length=_env_int("LESSON_MIN_REPEAT_WORD_LENGTH", 4),
        )


class GenerationConfig(BaseModel):
    """Sampling parameters sent with every lesson generation call."""

    temperature: float = Field(0.2, ge=0.0, le=2.0)
    top_p: float = Field(0.8, gt=0.0, le=1.0)
    max_output_tokens: int = Field(8192, gt=0)

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        return cls(
            temperature=_env_float("LLM_TEMPERATURE", 0.2),
            top_p=_env_float("LLM_TOP_P", 0.8),
            max_output_tokens=_env_int("LLM_MAX_OUTPUT_TOKENS", 8192),
        )


class GenerationSettings(BaseModel):
    """Retry and exhaustion behaviour of the lesson generator."""

    max_attempts: int = Field(3, ge=1, description="Total attempts, including the first")
    base_delay: float = Field(
        1.0, ge=0.0, description="Linear backoff unit in seconds after transport/parse errors"
    )
    exhaustion_policy: ExhaustionPolicy = ExhaustionPolicy.DEGRADE
    model: Optional[str] = Field(None, description="Overrides LLM_MODEL when set")

    @classmethod
    def from_env(cls) -> "GenerationSettings":
        return cls(
            max_attempts=_env_int("LESSON_MAX_ATTEMPTS", 3),
            base_delay=_env_float("LESSON_RETRY_BASE_DELAY", 1.0),
            exhaustion_policy=ExhaustionPolicy(
                os.getenv("LESSON_EXHAUSTION_POLICY", ExhaustionPolicy.DEGRADE.value)
            ),
        )
