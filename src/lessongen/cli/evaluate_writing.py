"""CLI for writing feedback.

Usage:
    python -m lessongen.cli.evaluate_writing \
        --level A2 \
        --prompt "Write a short message to your neighbour." \
        --text-file answer.txt
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from lessongen.config import LOG_FORMAT, LOG_LEVEL
from lessongen.generators.writing_evaluator import WritingEvaluator
from lessongen.models.lesson import LanguageLevel
from lessongen.utils.llm_client import LLMClient
from lessongen.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

load_dotenv()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Get tutor feedback on a writing task")

    parser.add_argument(
        "--level",
        required=True,
        choices=[level.value for level in LanguageLevel],
        help="CEFR level of the learner",
    )
    parser.add_argument("--prompt", required=True, help="Writing task the learner was given")

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Learner's answer")
    source.add_argument("--text-file", type=Path, help="File containing the learner's answer")

    parser.add_argument("--model", default=None, help="Model name")
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL env var or INFO)",
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    configure_logging(level=getattr(logging, args.log_level), json_format=LOG_FORMAT == "json")

    if args.text_file:
        if not args.text_file.exists():
            logger.error(f"Input file not found: {args.text_file}")
            return 1
        student_text = args.text_file.read_text(encoding="utf-8")
    else:
        student_text = args.text

    try:
        llm_client = LLMClient(model=args.model)
    except ValueError as e:
        logger.error(f"Cannot create LLM client: {e}")
        return 1

    feedback = WritingEvaluator(llm_client=llm_client).evaluate(
        args.prompt, student_text, args.level
    )
    print(feedback)
    return 0


if __name__ == "__main__":
    sys.exit(main())
