"""Domain models for generated lessons.

These are the stable, fully named shapes handed to presentation code. The
compact wire shape the model emits lives in ``lessongen.validators.schema``.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


# ============================================================================
# Enums
# ============================================================================


class LanguageLevel(str, Enum):
    """CEFR levels covered by the tutor (A0 = absolute beginner)."""

    A0 = "A0"
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"


class SessionType(str, Enum):
    """Pedagogical mode of a generation request."""

    DAILY = "daily"
    EXAM = "exam"
    TOPIC = "topic"


class LessonStage(str, Enum):
    """Presentation stages, in the order a session walks through them."""

    VOCABULARY = "vocabulary"
    READING = "reading"
    WRITING = "writing"
    FEEDBACK = "feedback"
    SUMMARY = "summary"


# ============================================================================
# Request
# ============================================================================


class GenerationRequest(BaseModel):
    """Parameters of a single lesson generation call."""

    level: LanguageLevel
    session_type: SessionType
    topic: Optional[str] = Field(None, description="Lesson topic, required for topic sessions")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_topic(self) -> "GenerationRequest":
        """Topic sessions need a topic to scope the lesson."""
        if self.session_type == SessionType.TOPIC and not (self.topic and self.topic.strip()):
            raise ValueError("topic sessions require a non-empty topic")
        return self


# ============================================================================
# Lesson content
# ============================================================================


class VocabularyCard(BaseModel):
    """One vocabulary item with explanation, translation and usage example."""

    word: Optional[str] = Field(None, description="Word in the target language")
    explanation: Optional[str] = Field(None, description="Short explanation in simple English")
    translation: Optional[str] = Field(
        None, description="Translation in the learner's native language (Latin script)"
    )
    example_sentence: Optional[str] = Field(None, description="Example sentence in the target language")


class QuizQuestion(BaseModel):
    """Multiple choice comprehension question."""

    question: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    correct_answer: Optional[int] = Field(None, description="Index into options")
    explanation: Optional[str] = None

    def is_correct(self, option_index: int) -> bool:
        return self.correct_answer is not None and option_index == self.correct_answer


class LessonContent(BaseModel):
    """Lesson produced by the generation pipeline.

    Vocabulary is always present once validation passed. Reading, questions
    and writing fields are independently optional; which of them are set
    depends on the session type and on what the model produced.
    """

    topic: str = "Lesson"
    level: str = "A1"
    vocabulary: List[VocabularyCard] = Field(default_factory=list)
    reading_text: Optional[str] = None
    reading_text_translation: Optional[str] = None
    reading_questions: Optional[List[QuizQuestion]] = None
    writing_prompt: Optional[str] = None
    writing_points: Optional[List[str]] = None
    listening_scenario: Optional[str] = None

    def stage_plan(self) -> List[LessonStage]:
        """Ordered stages this content supports.

        Feedback only follows a writing stage; every session ends with the
        summary.
        """
        stages = []
        if self.vocabulary:
            stages.append(LessonStage.VOCABULARY)
        if self.reading_text:
            stages.append(LessonStage.READING)
        if self.writing_prompt:
            stages.extend([LessonStage.WRITING, LessonStage.FEEDBACK])
        stages.append(LessonStage.SUMMARY)
        return stages

    def next_stage(self, current: LessonStage) -> LessonStage:
        """Stage that follows ``current`` in this lesson's plan."""
        plan = self.stage_plan()
        if current not in plan:
            return plan[0]
        index = plan.index(current)
        return plan[min(index + 1, len(plan) - 1)]


class DailyLesson(LessonContent):
    """Mixed daily practice: vocabulary, reading with questions, writing."""

    session_type: Literal["daily"] = "daily"


class ExamLesson(LessonContent):
    """Single-skill B1 exam simulation."""

    session_type: Literal["exam"] = "exam"

    @property
    def skill(self) -> Optional[Literal["reading", "writing"]]:
        """Skill the model chose, read from the output shape."""
        if self.reading_text:
            return "reading"
        if self.writing_prompt:
            return "writing"
        return None


class TopicLesson(LessonContent):
    """Topic-scoped mini lesson."""

    session_type: Literal["topic"] = "topic"


LessonSession = Annotated[
    Union[DailyLesson, ExamLesson, TopicLesson],
    Field(discriminator="session_type"),
]

LESSON_VARIANTS = {
    SessionType.DAILY: DailyLesson,
    SessionType.EXAM: ExamLesson,
    SessionType.TOPIC: TopicLesson,
}
