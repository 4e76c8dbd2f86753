"""System instructions and task prompts for lesson generation.

The system instruction is the same for every session type: tutoring
persona, language rules and the JSON output contract. The task prompt
changes with the session type and the learner's level.

All builders here are pure functions.
"""

from typing import Optional

from pydantic import BaseModel

from lessongen.config import GenerationConfig
from lessongen.models.lesson import GenerationRequest, LanguageLevel, SessionType


class TutorProfile(BaseModel):
    """Languages and goal the tutor persona is built around."""

    target_language: str = "German"
    explanation_language: str = "English"
    native_language: str = "Hindi"
    native_script_note: str = 'using Latin script (e.g., "Namaste", "Main ghar ja rahi hoon")'
    goal: str = "Goethe-Zertifikat B1"

    model_config = {"frozen": True}


DEFAULT_PROFILE = TutorProfile()


class LevelParameters(BaseModel):
    """Level-dependent prompt parameters."""

    level_label: str
    vocab_instruction: str
    text_length: str
    text_content_instruction: str
    translation_required: bool = False


class PromptBundle(BaseModel):
    """Everything the generator needs to issue one lesson request."""

    system_instruction: str
    task_prompt: str
    generation_config: GenerationConfig
    level: LanguageLevel
    session_type: SessionType

    model_config = {"frozen": True}


VOCAB_COUNT = 4
DAILY_QUESTION_COUNT = 2
EXAM_QUESTION_COUNT = 3
WRITING_POINT_COUNT = 3
EXPLANATION_MAX_WORDS = 15
FEEDBACK_MAX_WORDS = 200


def base_system_instruction(profile: TutorProfile = DEFAULT_PROFILE) -> str:
    """Persona and language rules, without the JSON output contract."""
    return f"""
You are a private {profile.target_language} tutor for a student whose native language is {profile.native_language} but speaks {profile.explanation_language} well.
Goal: Guide her to {profile.goal}.
Rules:
1. {profile.target_language} text must be correct and natural.
2. Explanations must be in simple {profile.explanation_language}.
3. Translations must be in {profile.native_language} {profile.native_script_note}.
4. Adapt complexity to the requested CEFR level (A0, A1, A2, or B1).
"""


def json_system_instruction(profile: TutorProfile = DEFAULT_PROFILE) -> str:
    """Persona rules plus the strict JSON output contract."""
    return base_system_instruction(profile) + f"""5. Output MUST be valid JSON matching the requested schema.
6. Keep strings concise. {profile.explanation_language} explanations should be short (max {EXPLANATION_MAX_WORDS} words).
7. ANTI-REPETITION RULE: Do NOT repeat sentences, phrases, or words. Each sentence must be unique.
8. CONTENT RULE: 'txt' field must contain ONLY {profile.target_language} text. NO translations in brackets within the {profile.target_language} text.
9. HARD STOP RULE: After generating the reading text, STOP IMMEDIATELY. Do not continue generating beyond the word limit.
10. Ensure all JSON strings are properly escaped.
11. Do not include markdown code blocks (like ```json). Just return the raw JSON.
"""


def level_parameters(level: LanguageLevel, profile: TutorProfile = DEFAULT_PROFILE) -> LevelParameters:
    """Word-count band and vocabulary instructions for a level.

    A0 gets shorter texts with simple sentence structure built on the
    generated vocabulary, and the passage translation becomes mandatory.
    """
    if level == LanguageLevel.A0:
        return LevelParameters(
            level_label="A0 (Absolute Beginner).",
            vocab_instruction=f"EXACTLY {VOCAB_COUNT} basic words (e.g. Hallo, Name, sein, kommen).",
            text_length="EXACTLY 20-30 words. 3-4 very short sentences.",
            text_content_instruction=(
                "CRITICAL FOR A0: The text must be extremely simple (Subject-Verb-Object). "
                f"It MUST primarily use the {VOCAB_COUNT} vocabulary words generated above. "
                "Do not use complex grammar."
            ),
            translation_required=True,
        )

    return LevelParameters(
        level_label=level.value,
        vocab_instruction=f"EXACTLY {VOCAB_COUNT} {profile.target_language} words (not more).",
        text_length="EXACTLY 60-80 words. Count carefully. STOP after reaching 80 words.",
        text_content_instruction="Topic: everyday life.",
    )


def build_daily_prompt(
    params: LevelParameters,
    topic: Optional[str] = None,
    profile: TutorProfile = DEFAULT_PROFILE,
) -> str:
    content_instruction = params.text_content_instruction
    if topic and not params.translation_required:
        content_instruction = f"Topic: {topic}."
    elif topic:
        content_instruction = f"{content_instruction} Topic: {topic}."

    translation_rule = (
        "REQUIRED for this level." if params.translation_required else "REQUIRED for A0 level."
    )
    translation_label = "" if params.translation_required else "(Optional) "

    return f"""Create a daily training session for level {params.level_label}
    The response MUST be valid JSON.
    Include:
    1. voc: {params.vocab_instruction} Each with {profile.explanation_language} explanation (max {EXPLANATION_MAX_WORDS} words), {profile.native_language} translation (Latin script), and ONE example sentence.
    2. txt: A {profile.target_language} reading text ({params.text_length}). {content_instruction}
       CRITICAL: 'txt' must contain ONLY {profile.target_language}.
    3. txt_tr: {translation_label}Full {profile.explanation_language} translation of the 'txt'. {translation_rule}
    4. q: EXACTLY {DAILY_QUESTION_COUNT} Multiple Choice questions about the text. Each question has "qu" (string), "ops" (array of 4 strings), "ans" (integer 0-3), "exp" (short explanation).
    5. wr: A writing task instruction (e.g. "Write a short message..."). Just the scenario.
    6. pts: EXACTLY {WRITING_POINT_COUNT} bullet points (strings) that must be covered in the writing task.

    STOP RULE: After generating all fields, stop immediately."""


def build_exam_prompt(params: LevelParameters, profile: TutorProfile = DEFAULT_PROFILE) -> str:
    return f"""Create a B1 Exam simulation task.
    Focus on ONE skill: Reading or Writing.
    If Reading: Provide a {profile.target_language} text ({params.text_length}) and EXACTLY {EXAM_QUESTION_COUNT} multiple choice questions (with 4 string options each).
    If Writing: Provide a scenario and EXACTLY {WRITING_POINT_COUNT} points that must be covered in an email (approx 80 words).
    Level must be strict B1.
    STOP after generating the content."""


def build_topic_prompt(
    params: LevelParameters,
    topic: str,
    profile: TutorProfile = DEFAULT_PROFILE,
) -> str:
    translation_line = (
        f"\n    - A full {profile.explanation_language} translation of the text (txt_tr)"
        if params.translation_required
        else ""
    )
    return f"""Create a lesson about "{topic}" for level {params.level_label}
    Include:
    - EXACTLY {VOCAB_COUNT} vocabulary words
    - A short dialogue or text ({params.text_length}){translation_line}
    - EXACTLY {DAILY_QUESTION_COUNT} comprehension questions with multiple choice options
    STOP after generating all content."""


def build_task_prompt(request: GenerationRequest, profile: TutorProfile = DEFAULT_PROFILE) -> str:
    """Task prompt for the request's session type and level."""
    params = level_parameters(request.level, profile)

    if request.session_type == SessionType.DAILY:
        return build_daily_prompt(params, request.topic, profile)
    if request.session_type == SessionType.EXAM:
        return build_exam_prompt(params, profile)
    return build_topic_prompt(params, request.topic, profile)


def build_lesson_prompt(
    request: GenerationRequest,
    profile: TutorProfile = DEFAULT_PROFILE,
    generation_config: Optional[GenerationConfig] = None,
) -> PromptBundle:
    """Assemble system instruction, task prompt and sampling parameters.

    Args:
        request: Level, session type and optional topic
        profile: Tutor persona languages (default: German for Hindi speakers)
        generation_config: Sampling parameters (default: GenerationConfig())

    Returns:
        PromptBundle ready for LessonGenerator.generate()
    """
    return PromptBundle(
        system_instruction=json_system_instruction(profile),
        task_prompt=build_task_prompt(request, profile),
        generation_config=generation_config or GenerationConfig(),
        level=request.level,
        session_type=request.session_type,
    )


def build_writing_feedback_prompt(
    prompt: str,
    student_text: str,
    level: str,
    profile: TutorProfile = DEFAULT_PROFILE,
) -> str:
    """Task prompt asking for feedback on a learner's writing."""
    return f"""The student (Level {level}) was asked: "{prompt}".
            Student wrote: "{student_text}".

            Please provide feedback in simple {profile.explanation_language} (max {FEEDBACK_MAX_WORDS} words):
            1. Correct the {profile.target_language} errors (if any).
            2. Suggest a better way to say it ({profile.target_language}) with {profile.native_language} (Latin script) translation.
            3. Rate it loosely (e.g., "Good A2", "Weak B1").

            Keep it encouraging. STOP after {FEEDBACK_MAX_WORDS} words."""
