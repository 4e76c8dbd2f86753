"""Logging configuration with optional structured JSON output.

Modules log through ``logging.getLogger(__name__)``; this module only sets
up handlers and formatting for entry points (CLIs, services embedding the
generator).

The generator attaches its context (stage, attempt, failed rule, level,
session type) through ``extra=``. Both formatters render those fields
explicitly: the JSON formatter under a ``generation`` key, the text
formatter as a ``[key=value ...]`` suffix.
"""

import json
import logging
import sys
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# Context fields set by the generator and the stage logger, in display order
GENERATION_FIELDS = (
    "stage",
    "status",
    "level",
    "session_type",
    "attempt",
    "rule",
    "duration_ms",
    "error",
)

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def generation_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Generation fields present on a record, in display order."""
    return {
        field: getattr(record, field)
        for field in GENERATION_FIELDS
        if getattr(record, field, None) is not None
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message,
    ``generation`` context when present, and ``exception`` on errors.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = generation_context(record)
        if context:
            entry["generation"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Plain text format with the generation context appended."""

    def __init__(self):
        super().__init__(fmt=TEXT_FORMAT, datefmt=DATE_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        message = super().formatMessage(record)
        context = generation_context(record)
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} [{pairs}]"


def configure_logging(
    level: Union[str, int] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    json_format: bool = True,
    console_output: bool = True,
) -> None:
    """Configure root logging.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional file path for log output (default: None = console only)
        json_format: JSON lines if True, text with a context suffix if False
        console_output: If True, log to stderr; stdout stays free for CLI output

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    formatter = JsonFormatter() if json_format else ContextTextFormatter()

    handlers: List[logging.Handler] = []
    if console_output:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    # Provider SDKs log every HTTP request at INFO
    for noisy in ("httpx", "google_genai", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


@contextmanager
def generation_stage_logger(stage_name: str, **context):
    """Log entry, exit and duration of a generation stage.

    Args:
        stage_name: Name of the stage (e.g. "lesson_generation")
        **context: Generation fields included in every record (level, session_type)

    Yields:
        Logger named ``lessongen.<stage_name>``

    Example:
        >>> with generation_stage_logger("lesson_generation", level="A1") as log:
        ...     log.info("Calling model")
    """
    logger = logging.getLogger(f"lessongen.{stage_name}")
    fields = {"stage": stage_name, **context}

    start_time = datetime.now(UTC)
    logger.info(f"Starting stage: {stage_name}", extra={**fields, "status": "started"})

    def elapsed_ms() -> float:
        return round((datetime.now(UTC) - start_time).total_seconds() * 1000, 2)

    try:
        yield logger
    except Exception as e:
        logger.error(
            f"Failed stage: {stage_name}",
            extra={**fields, "status": "failed", "duration_ms": elapsed_ms(), "error": str(e)[:200]},
            exc_info=True,
        )
        raise

    logger.info(
        f"Completed stage: {stage_name}",
        extra={**fields, "status": "completed", "duration_ms": elapsed_ms()},
    )
