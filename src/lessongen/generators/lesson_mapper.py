"""Map the compact wire payload onto the domain lesson model."""

from typing import Union

from lessongen.models.lesson import (
    LESSON_VARIANTS,
    LessonContent,
    QuizQuestion,
    SessionType,
    VocabularyCard,
)
from lessongen.validators.schema import RawLessonPayload

DEFAULT_TOPIC = "Lesson"
DEFAULT_LEVEL = "A1"


def map_lesson(
    payload: RawLessonPayload,
    session_type: Union[SessionType, str] = SessionType.DAILY,
) -> LessonContent:
    """Rename wire fields to domain fields.

    Never fails: absent optional fields stay None, a missing topic or level
    falls back to a default. Run the content validator first if the
    minimum shape (non-empty vocabulary) matters.

    Args:
        payload: Parsed wire payload
        session_type: Session the payload was generated for; selects the
            lesson variant

    Returns:
        DailyLesson, ExamLesson or TopicLesson
    """
    lesson_class = LESSON_VARIANTS[SessionType(session_type)]

    questions = None
    if payload.q is not None:
        questions = [
            QuizQuestion(
                question=q.qu,
                options=q.ops or [],
                correct_answer=q.ans,
                explanation=q.exp,
            )
            for q in payload.q
        ]

    return lesson_class(
        topic=payload.t or DEFAULT_TOPIC,
        level=payload.l or DEFAULT_LEVEL,
        vocabulary=[
            VocabularyCard(
                word=v.de,
                explanation=v.en,
                translation=v.hi,
                example_sentence=v.ex,
            )
            for v in payload.voc or []
        ],
        reading_text=payload.txt,
        reading_text_translation=payload.txt_tr,
        reading_questions=questions,
        writing_prompt=payload.wr,
        writing_points=payload.pts,
        listening_scenario=payload.lis,
    )
