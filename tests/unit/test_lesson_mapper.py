"""Unit tests for the wire-to-domain lesson mapper."""

from lessongen.generators.lesson_mapper import map_lesson
from lessongen.models.lesson import DailyLesson, ExamLesson, SessionType, TopicLesson
from lessongen.validators.schema import RawLessonPayload


class TestMapLesson:
    """Tests for field renaming and defaults."""

    def test_minimal_payload(self):
        payload = RawLessonPayload.model_validate(
            {
                "t": "Greetings",
                "l": "A1",
                "voc": [{"de": "Hallo", "en": "Hello", "hi": "Namaste", "ex": "Hallo!"}],
            }
        )

        lesson = map_lesson(payload)

        assert lesson.topic == "Greetings"
        assert lesson.level == "A1"
        assert len(lesson.vocabulary) == 1
        card = lesson.vocabulary[0]
        assert card.word == "Hallo"
        assert card.explanation == "Hello"
        assert card.translation == "Namaste"
        assert card.example_sentence == "Hallo!"
        assert lesson.reading_text is None
        assert lesson.reading_text_translation is None
        assert lesson.reading_questions is None
        assert lesson.writing_prompt is None
        assert lesson.writing_points is None
        assert lesson.listening_scenario is None

    def test_full_payload(self, daily_payload):
        lesson = map_lesson(RawLessonPayload.model_validate(daily_payload))

        assert lesson.reading_text == daily_payload["txt"]
        assert lesson.reading_text_translation == daily_payload["txt_tr"]
        assert lesson.writing_prompt == daily_payload["wr"]
        assert lesson.writing_points == daily_payload["pts"]
        question = lesson.reading_questions[1]
        assert question.question == "Warum nimmt sie den Käse nicht?"
        assert question.options[1] == "Er ist teuer"
        assert question.correct_answer == 1
        assert question.explanation == "Der Käse ist sehr teuer."

    def test_defaults_for_missing_topic_and_level(self):
        lesson = map_lesson(RawLessonPayload())
        assert lesson.topic == "Lesson"
        assert lesson.level == "A1"
        assert lesson.vocabulary == []

    def test_question_without_options(self):
        payload = RawLessonPayload.model_validate({"q": [{"qu": "Wer?"}]})
        question = map_lesson(payload).reading_questions[0]
        assert question.options == []
        assert question.correct_answer is None

    def test_session_variants(self):
        payload = RawLessonPayload(t="x")
        assert isinstance(map_lesson(payload), DailyLesson)
        assert isinstance(map_lesson(payload, SessionType.EXAM), ExamLesson)
        assert isinstance(map_lesson(payload, "topic"), TopicLesson)
        assert map_lesson(payload, "exam").session_type == "exam"
