"""Domain models for generated lessons."""

from lessongen.models.lesson import (
    LESSON_VARIANTS,
    DailyLesson,
    ExamLesson,
    GenerationRequest,
    LanguageLevel,
    LessonContent,
    LessonSession,
    LessonStage,
    QuizQuestion,
    SessionType,
    TopicLesson,
    VocabularyCard,
)

__all__ = [
    "LESSON_VARIANTS",
    "DailyLesson",
    "ExamLesson",
    "GenerationRequest",
    "LanguageLevel",
    "LessonContent",
    "LessonSession",
    "LessonStage",
    "QuizQuestion",
    "SessionType",
    "TopicLesson",
    "VocabularyCard",
]
