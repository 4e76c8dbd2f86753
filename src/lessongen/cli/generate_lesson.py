"""CLI for lesson generation.

Usage:
    python -m lessongen.cli.generate_lesson \
        --level A1 \
        --session daily \
        --count 3 \
        --parallel 3 \
        --output output/a1/daily.json

Features:
- Daily, exam and topic sessions for levels A0-B1
- Several independent lessons in parallel with ThreadPoolExecutor
- Progress bar with tqdm
- Token usage report
"""

import argparse
import json
import logging
import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from tqdm import tqdm

from lessongen.config import LOG_FORMAT, LOG_LEVEL, ExhaustionPolicy, GenerationSettings
from lessongen.generators.lesson_generator import LessonGenerator
from lessongen.models.lesson import LanguageLevel, LessonContent, SessionType
from lessongen.utils.file_io import write_json
from lessongen.utils.llm_client import LLMClient
from lessongen.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

load_dotenv()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate structured language lessons with an LLM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One daily A1 lesson printed to stdout
  python -m lessongen.cli.generate_lesson --level A1 --session daily

  # Topic lesson for an absolute beginner
  python -m lessongen.cli.generate_lesson --level A0 --session topic --topic "Im Café"

  # Five B1 exam tasks, three at a time, strict validation
  python -m lessongen.cli.generate_lesson \\
      --level B1 --session exam --count 5 --parallel 3 \\
      --policy strict --output output/b1/exam.json
        """,
    )

    parser.add_argument(
        "--level",
        required=True,
        choices=[level.value for level in LanguageLevel],
        help="CEFR level of the learner",
    )

    parser.add_argument(
        "--session",
        required=True,
        choices=[session.value for session in SessionType],
        help="Session type",
    )

    parser.add_argument(
        "--topic",
        default=None,
        help="Lesson topic (required for --session topic)",
    )

    parser.add_argument(
        "--count",
        type=int,
        default=1,
        help="Number of lessons to generate (default: 1)",
    )

    parser.add_argument(
        "--parallel",
        type=int,
        default=1,
        help="Number of parallel workers (default: 1)",
    )

    parser.add_argument(
        "--model",
        default=None,
        help="Model name (default: LLM_MODEL env var or gemini-2.5-flash)",
    )

    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in ExhaustionPolicy],
        default=None,
        help="What to return when every attempt fails validation (default: LESSON_EXHAUSTION_POLICY or degrade)",
    )

    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output JSON file path (default: print to stdout)",
    )

    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL env var or INFO)",
    )

    args = parser.parse_args(argv)

    if args.session == SessionType.TOPIC.value and not args.topic:
        parser.error("--topic is required for --session topic")
    if args.count < 1 or args.parallel < 1:
        parser.error("--count and --parallel must be positive")

    return args


def generate_batch(
    generator: LessonGenerator,
    level: str,
    session: str,
    topic: Optional[str],
    count: int,
    parallel: int,
) -> List[LessonContent]:
    """Generate ``count`` independent lessons, dropping failures."""
    lessons: List[LessonContent] = []

    with ThreadPoolExecutor(max_workers=parallel) as executor:
        futures = [
            executor.submit(generator.generate_lesson, level, session, topic)
            for _ in range(count)
        ]
        for future in tqdm(as_completed(futures), total=count, desc="Generating lessons"):
            lesson = future.result()
            if lesson is not None:
                lessons.append(lesson)

    return lessons


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    configure_logging(
        level=getattr(logging, args.log_level),
        json_format=LOG_FORMAT == "json",
        console_output=True,
    )

    logger.info("=" * 80)
    logger.info("Lesson Generation")
    logger.info("=" * 80)
    logger.info(f"Level: {args.level}")
    logger.info(f"Session: {args.session}")
    if args.topic:
        logger.info(f"Topic: {args.topic}")
    logger.info(f"Count: {args.count} (parallel: {args.parallel})")
    logger.info("=" * 80)

    settings = GenerationSettings.from_env()
    if args.policy:
        settings = settings.model_copy(update={"exhaustion_policy": ExhaustionPolicy(args.policy)})

    try:
        llm_client = LLMClient(model=args.model)
    except ValueError as e:
        logger.error(f"Cannot create LLM client: {e}")
        return 1

    generator = LessonGenerator(llm_client=llm_client, settings=settings)

    start_time = time.time()
    lessons = generate_batch(
        generator, args.level, args.session, args.topic, args.count, args.parallel
    )
    elapsed = time.time() - start_time

    data = [lesson.model_dump(mode="json", exclude_none=True) for lesson in lessons]
    if args.output:
        write_json(data, args.output)
    else:
        print(json.dumps(data, ensure_ascii=False, indent=2))

    usage = llm_client.get_usage_summary()
    logger.info("=" * 80)
    logger.info(f"Generated {len(lessons)}/{args.count} lessons in {elapsed:.2f}s")
    logger.info(f"Token usage: {usage['total_tokens']} tokens (~${usage['estimated_cost_usd']})")
    logger.info("=" * 80)

    return 0 if lessons else 1


if __name__ == "__main__":
    sys.exit(main())
