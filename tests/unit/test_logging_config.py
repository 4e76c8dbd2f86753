"""Unit tests for logging configuration."""

import json
import logging

import pytest

from lessongen.utils.logging_config import (
    ContextTextFormatter,
    JsonFormatter,
    configure_logging,
    generation_stage_logger,
)


def make_record(**extra):
    record = logging.LogRecord(
        name="lessongen.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Attempt %d failed",
        args=(2,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    """Test JSON log formatting."""

    def test_basic_fields(self):
        data = json.loads(JsonFormatter().format(make_record()))

        assert data["level"] == "WARNING"
        assert data["logger"] == "lessongen.test"
        assert data["message"] == "Attempt 2 failed"
        assert "timestamp" in data
        assert "generation" not in data

    def test_generation_context(self):
        record = make_record(attempt=2, rule="missing_vocabulary", request_id="ignored")

        data = json.loads(JsonFormatter().format(record))

        assert data["generation"] == {"attempt": 2, "rule": "missing_vocabulary"}


class TestContextTextFormatter:
    """Test plain text formatting."""

    def test_appends_context_in_order(self):
        record = make_record(rule="reading_text_repetition", attempt=1, stage="lesson_generation")

        line = ContextTextFormatter().format(record)

        assert line.endswith(
            "Attempt 2 failed [stage=lesson_generation attempt=1 rule=reading_text_repetition]"
        )
        assert " - lessongen.test - WARNING - " in line

    def test_no_context_no_suffix(self):
        assert ContextTextFormatter().format(make_record()).endswith("WARNING - Attempt 2 failed")


class TestConfigureLogging:
    """Test root logger setup."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "generation.log"

        configure_logging(level="INFO", log_file=log_file, console_output=False)
        logging.getLogger("lessongen.test").info("hello")

        for handler in logging.getLogger().handlers:
            handler.flush()
        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "hello"

    def test_quiets_provider_loggers(self):
        configure_logging(level="DEBUG", console_output=False)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("openai").level == logging.WARNING


class TestGenerationStageLogger:
    """Test stage timing context manager."""

    def test_logs_start_and_completion(self, caplog):
        caplog.set_level(logging.INFO, logger="lessongen.lesson_generation")

        with generation_stage_logger("lesson_generation", level="A1") as log:
            log.info("working")

        statuses = [getattr(r, "status", None) for r in caplog.records]
        assert statuses == ["started", None, "completed"]
        assert caplog.records[-1].level == "A1"
        assert caplog.records[-1].duration_ms >= 0

    def test_logs_failure_and_reraises(self, caplog):
        caplog.set_level(logging.INFO, logger="lessongen.lesson_generation")

        with pytest.raises(RuntimeError):
            with generation_stage_logger("lesson_generation"):
                raise RuntimeError("boom")

        failed = caplog.records[-1]
        assert failed.status == "failed"
        assert failed.error == "boom"
