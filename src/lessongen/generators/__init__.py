"""Lesson generation and writing evaluation."""

from lessongen.generators.lesson_generator import LessonGenerator, generate_lesson
from lessongen.generators.lesson_mapper import map_lesson
from lessongen.generators.writing_evaluator import WritingEvaluator, evaluate_writing

__all__ = [
    "LessonGenerator",
    "WritingEvaluator",
    "evaluate_writing",
    "generate_lesson",
    "map_lesson",
]
