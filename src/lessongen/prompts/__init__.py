"""Prompts for lesson generation and writing feedback.

- lesson_prompts.py: system instruction, level parameters and task prompts
  for daily, exam and topic sessions, plus the writing feedback prompt
"""

from lessongen.prompts.lesson_prompts import (
    DEFAULT_PROFILE,
    PromptBundle,
    TutorProfile,
    base_system_instruction,
    build_lesson_prompt,
    build_writing_feedback_prompt,
    json_system_instruction,
)

__all__ = [
    "DEFAULT_PROFILE",
    "PromptBundle",
    "TutorProfile",
    "base_system_instruction",
    "build_lesson_prompt",
    "build_writing_feedback_prompt",
    "json_system_instruction",
]
