"""Tests for starboard_archive.utils.pipeline_logger."""

from __future__ import annotations

from io import StringIO
from typing import Any
from unittest.mock import MagicMock

from rich.console import Console

from starboard_archive.archive.logger import ArchiveLogger
from starboard_archive.utils.pipeline_logger import BasePipelineLogger, MessageBlock


def _capture_console() -> Console:
    return Console(file=StringIO(), force_terminal=True, width=120, highlight=False)


class ConcreteLogger(BasePipelineLogger):
    """Concrete implementation for testing the abstract base class."""

    def __init__(self) -> None:
        super().__init__("test_logger")
        # Replace console with a string-capturing one for assertions
        self.console = _capture_console()

    def summary(self, **kwargs: Any) -> None:
        self.print_summary("Test", elapsed=0.0, stats={})

    def get_output(self) -> str:
        self.console.file.seek(0)
        return self.console.file.read()


def _capturing_archive_logger() -> ArchiveLogger:
    logger = ArchiveLogger()
    logger.console = _capture_console()
    logger._logger = MagicMock()
    return logger


def _output(logger: BasePipelineLogger) -> str:
    logger.console.file.seek(0)
    return logger.console.file.read()


# ---------------------------------------------------------------------------
# TestMessageBlock
# ---------------------------------------------------------------------------


class TestMessageBlock:
    """Tests for MessageBlock context manager."""

    def test_prints_title_on_enter(self) -> None:
        logger = ConcreteLogger()

        with logger.block("1100000000000000000"):
            pass

        assert "1100000000000000000" in logger.get_output()

    def test_field_prints_key_value(self) -> None:
        logger = ConcreteLogger()

        with logger.block("Block") as b:
            b.field("archive ID", "abc-123")

        output = logger.get_output()
        assert "archive ID:" in output
        assert "abc-123" in output

    def test_field_with_color(self) -> None:
        logger = ConcreteLogger()

        with logger.block("Block") as b:
            b.field("stars", 12, color="yellow")

        output = logger.get_output()
        assert "stars:" in output
        assert "12" in output

    def test_result_success(self) -> None:
        logger = ConcreteLogger()

        with logger.block("Block") as b:
            b.result("archived 3 attachment(s)")

        output = logger.get_output()
        assert "archived 3" in output

    def test_result_failure(self) -> None:
        logger = ConcreteLogger()

        with logger.block("Block") as b:
            b.result("download failed", success=False)

        assert "download failed" in logger.get_output()

    def test_progress_sets_flag(self) -> None:
        logger = ConcreteLogger()

        with logger.block("Block") as b:
            b.progress("downloading attachment 0...")
            assert logger._has_progress_line is True

    def test_exit_clears_progress(self) -> None:
        logger = ConcreteLogger()

        with logger.block("Block") as b:
            b.progress("downloading...")

        assert logger._has_progress_line is False

    def test_block_yields_message_block(self) -> None:
        logger = ConcreteLogger()

        with logger.block("test") as b:
            assert isinstance(b, MessageBlock)


# ---------------------------------------------------------------------------
# TestBasePipelineLogger
# ---------------------------------------------------------------------------


class TestBasePipelineLogger:
    """Tests for BasePipelineLogger base class."""

    def test_clear_progress_line_resets_flag(self) -> None:
        logger = ConcreteLogger()
        logger._has_progress_line = True

        logger._clear_progress_line()

        assert logger._has_progress_line is False

    def test_info_delegates_to_python_logger(self) -> None:
        logger = ConcreteLogger()
        logger._logger = MagicMock()

        logger.info("test message")

        logger._logger.info.assert_called_once_with("test message")

    def test_warning_delegates_to_python_logger(self) -> None:
        logger = ConcreteLogger()
        logger._logger = MagicMock()

        logger.warning("warn message")

        logger._logger.warning.assert_called_once_with("warn message")

    def test_exception_delegates_to_python_logger(self) -> None:
        logger = ConcreteLogger()
        logger._logger = MagicMock()

        logger.exception("boom")

        logger._logger.exception.assert_called_once_with("boom")

    def test_success_prints_message(self) -> None:
        logger = ConcreteLogger()

        logger.success("done")

        assert "done" in logger.get_output()

    def test_page_progress_sets_flag(self) -> None:
        logger = ConcreteLogger()

        logger.page_progress(1500, newest_date="2024-06-01")

        output = logger.get_output()
        assert logger._has_progress_line is True
        assert "1,500" in output
        assert "2024-06-01" in output

    def test_print_summary_outputs_panel(self) -> None:
        logger = ConcreteLogger()

        logger.print_summary(
            "Test Pipeline",
            elapsed=12.3,
            stats={"Messages": 1000, "Mode": "resume"},
        )

        output = logger.get_output()
        assert "Test Pipeline Complete" in output
        assert "1,000" in output
        assert "resume" in output
        assert "12.3s" in output


# ---------------------------------------------------------------------------
# TestArchiveLogger
# ---------------------------------------------------------------------------


class TestArchiveLogger:
    """Tests for ArchiveLogger."""

    def test_rate_limit_logs_warning(self) -> None:
        logger = _capturing_archive_logger()

        logger.rate_limit(1.5)

        assert "1.5" in logger._logger.warning.call_args[0][0]

    def test_retry_without_reason(self) -> None:
        logger = _capturing_archive_logger()

        logger.retry(1, 3, 2.0)

        msg = logger._logger.warning.call_args[0][0]
        assert "1/3" in msg
        assert "2.0" in msg

    def test_retry_with_reason(self) -> None:
        logger = _capturing_archive_logger()

        logger.retry(2, 5, 3.0, reason="timeout")

        assert "timeout" in logger._logger.warning.call_args[0][0]

    def test_message_skip_is_debug(self) -> None:
        logger = _capturing_archive_logger()

        logger.message_skip("123")

        logger._logger.debug.assert_called_once()
        logger._logger.warning.assert_not_called()

    def test_cross_reference_failed_includes_error(self) -> None:
        logger = _capturing_archive_logger()

        logger.cross_reference_failed("123", RuntimeError("Unknown Message"))

        msg = logger._logger.warning.call_args[0][0]
        assert "[123]" in msg
        assert "Unknown Message" in msg

    def test_run_start_prints_header(self) -> None:
        logger = _capturing_archive_logger()

        logger.run_start("starboard", "800", "1000")

        output = _output(logger)
        assert "#starboard" in output
        assert "800" in output

    def test_summary_prints_archive_panel(self) -> None:
        logger = _capturing_archive_logger()

        logger.summary(archived=2, skipped=1, scanned=40, attachments=5, total=9, elapsed=5.5)

        output = _output(logger)
        assert "Archive Complete" in output
        assert "Records added" in output
        assert "5.5s" in output
