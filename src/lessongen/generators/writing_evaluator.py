"""Single-shot feedback on a learner's writing task."""

import logging
from typing import Optional

from lessongen.prompts.lesson_prompts import (
    DEFAULT_PROFILE,
    TutorProfile,
    base_system_instruction,
    build_writing_feedback_prompt,
)
from lessongen.utils.llm_client import LLMClient

logger = logging.getLogger(__name__)

EMPTY_FEEDBACK_MESSAGE = "Could not generate feedback."
ERROR_FEEDBACK_MESSAGE = "Error generating feedback. Please try again."


class WritingEvaluator:
    """Ask the model for free-text feedback. No retry, no validation."""

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        profile: TutorProfile = DEFAULT_PROFILE,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ):
        self.llm_client = llm_client or LLMClient()
        self.profile = profile
        self.temperature = temperature
        self.max_tokens = max_tokens

    def evaluate(self, prompt: str, student_text: str, level: str) -> str:
        """Return feedback text, or a fixed apology if the call fails."""
        level = getattr(level, "value", level)
        task_prompt = build_writing_feedback_prompt(prompt, student_text, level, self.profile)

        try:
            feedback = self.llm_client.generate_text(
                prompt=task_prompt,
                system_prompt=base_system_instruction(self.profile),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(f"Evaluation error: {str(e)[:200]}", exc_info=True)
            return ERROR_FEEDBACK_MESSAGE

        return feedback or EMPTY_FEEDBACK_MESSAGE


def evaluate_writing(
    prompt: str,
    student_text: str,
    level: str,
    llm_client: Optional[LLMClient] = None,
) -> str:
    """Evaluate a writing submission with default settings."""
    return WritingEvaluator(llm_client=llm_client).evaluate(prompt, student_text, level)
