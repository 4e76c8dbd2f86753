"""Heuristic quality checks for generated lesson payloads.

A rejected payload is not an error: the generator retries immediately.
The checks guard against the failure modes seen in practice, namely
runaway reading texts, degenerate repetition and missing vocabulary.
"""

import logging
from collections import Counter
from typing import Optional, Tuple

from pydantic import BaseModel

from lessongen.config import ValidationThresholds
from lessongen.validators.schema import RawLessonPayload

logger = logging.getLogger(__name__)

RULE_TEXT_TOO_LONG = "reading_text_too_long"
RULE_REPETITION = "reading_text_repetition"
RULE_NO_VOCABULARY = "missing_vocabulary"


class ValidationOutcome(BaseModel):
    """Result of validating one payload."""

    passed: bool
    rule: Optional[str] = None
    detail: Optional[str] = None


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def most_repeated_word(text: str, min_length: int = 4) -> Optional[Tuple[str, int]]:
    """Return the most frequent word of at least ``min_length`` characters.

    Matching is case-insensitive. Short words are skipped so that articles
    and pronouns (der, die, ich) do not count as repetition.

    Example:
        >>> most_repeated_word("Das Haus ist alt. Das Haus ist groß.")
        ('haus', 2)
    """
    frequencies = Counter(
        word for word in text.lower().split() if len(word) >= min_length
    )
    if not frequencies:
        return None
    return frequencies.most_common(1)[0]


def inspect_payload(
    payload: RawLessonPayload,
    level: str,
    thresholds: Optional[ValidationThresholds] = None,
) -> ValidationOutcome:
    """Run the content rules in order and report the first failure.

    Args:
        payload: Parsed wire payload
        level: Requested CEFR level (selects the word ceiling)
        thresholds: Limits to apply (default: ValidationThresholds())

    Returns:
        ValidationOutcome with the failed rule and a diagnostic detail
    """
    thresholds = thresholds or ValidationThresholds()
    level = getattr(level, "value", level)

    if payload.txt:
        word_count = count_words(payload.txt)
        max_words = thresholds.word_ceiling(level)
        if word_count > max_words:
            logger.warning(f"Reading text too long: {word_count} words (max: {max_words})")
            return ValidationOutcome(
                passed=False,
                rule=RULE_TEXT_TOO_LONG,
                detail=f"{word_count} words (max: {max_words})",
            )

        repeated = most_repeated_word(payload.txt, thresholds.min_repeat_word_length)
        if repeated and repeated[1] > thresholds.max_word_repeats:
            word, count = repeated
            logger.warning(f'Repetition detected: "{word}" appears {count} times')
            return ValidationOutcome(
                passed=False,
                rule=RULE_REPETITION,
                detail=f'"{word}" appears {count} times (max: {thresholds.max_word_repeats})',
            )

    if not payload.voc:
        logger.warning("No vocabulary found in response")
        return ValidationOutcome(
            passed=False, rule=RULE_NO_VOCABULARY, detail="vocabulary absent or empty"
        )

    return ValidationOutcome(passed=True)


def validate(
    payload: RawLessonPayload,
    level: str,
    thresholds: Optional[ValidationThresholds] = None,
) -> bool:
    """Return True if the payload passes every content rule."""
    return inspect_payload(payload, level, thresholds).passed
