"""Unit tests for lesson domain models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from lessongen.models.lesson import (
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

CARD = VocabularyCard(word="Hallo", explanation="Hello", translation="Namaste", example_sentence="Hallo!")


class TestGenerationRequest:
    """Test request validation."""

    def test_coerces_strings(self):
        request = GenerationRequest(level="A0", session_type="daily")
        assert request.level == LanguageLevel.A0
        assert request.session_type == SessionType.DAILY

    def test_topic_session_requires_topic(self):
        with pytest.raises(ValidationError):
            GenerationRequest(level="A1", session_type="topic")

    def test_blank_topic_rejected(self):
        with pytest.raises(ValidationError):
            GenerationRequest(level="A1", session_type="topic", topic="   ")

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            GenerationRequest(level="C1", session_type="daily")


class TestStagePlan:
    """Test presentation stage sequencing."""

    def test_full_daily_lesson(self):
        lesson = DailyLesson(vocabulary=[CARD], reading_text="Text.", writing_prompt="Write.")
        assert lesson.stage_plan() == [
            LessonStage.VOCABULARY,
            LessonStage.READING,
            LessonStage.WRITING,
            LessonStage.FEEDBACK,
            LessonStage.SUMMARY,
        ]

    def test_reading_only(self):
        lesson = LessonContent(vocabulary=[CARD], reading_text="Text.")
        assert lesson.stage_plan() == [LessonStage.VOCABULARY, LessonStage.READING, LessonStage.SUMMARY]

    def test_empty_lesson_goes_to_summary(self):
        assert LessonContent().stage_plan() == [LessonStage.SUMMARY]

    def test_next_stage(self):
        lesson = LessonContent(vocabulary=[CARD], writing_prompt="Write.")
        assert lesson.next_stage(LessonStage.VOCABULARY) == LessonStage.WRITING
        assert lesson.next_stage(LessonStage.WRITING) == LessonStage.FEEDBACK
        assert lesson.next_stage(LessonStage.SUMMARY) == LessonStage.SUMMARY
        # A stage the lesson lacks restarts the plan
        assert lesson.next_stage(LessonStage.READING) == LessonStage.VOCABULARY


class TestVariants:
    """Test the session-discriminated lesson variants."""

    def test_discriminated_union(self):
        adapter = TypeAdapter(LessonSession)
        assert isinstance(adapter.validate_python({"session_type": "exam"}), ExamLesson)
        assert isinstance(adapter.validate_python({"session_type": "topic"}), TopicLesson)
        assert isinstance(adapter.validate_python({"session_type": "daily"}), DailyLesson)

    def test_exam_skill(self):
        assert ExamLesson(reading_text="Text.").skill == "reading"
        assert ExamLesson(writing_prompt="Write.").skill == "writing"
        assert ExamLesson().skill is None

    def test_quiz_question_is_correct(self):
        question = QuizQuestion(question="Wo?", options=["a", "b", "c", "d"], correct_answer=2)
        assert question.is_correct(2) is True
        assert question.is_correct(0) is False
        assert QuizQuestion().is_correct(0) is False
