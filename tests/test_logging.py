"""Tests for logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from loguru import logger

from github_org_mirror.logging import (
    _context_suffix,
    bind_repo,
    bind_stage,
    bind_user,
    get_logger,
    is_configured,
    reset_logging,
    setup_logging,
)

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Generator[None, None, None]:
    """Reset loguru state before and after each test."""
    reset_logging()
    yield
    reset_logging()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default_level(self) -> None:
        """Test default INFO level setup."""
        setup_logging(level="INFO")
        assert is_configured()

    def test_setup_logging_verbose_overrides_level(self) -> None:
        """Test that verbose flag sets DEBUG level."""
        messages: list[str] = []
        setup_logging(level="WARNING", verbose=True)

        handler_id = logger.add(lambda msg: messages.append(str(msg)))
        try:
            logger.bind(name="test").debug("debug message")
            assert any("debug message" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_setup_logging_with_file(self, tmp_path: Path) -> None:
        """Test file logging setup."""
        log_file = tmp_path / "sync.log"
        setup_logging(level="INFO", log_file=log_file)

        bind_stage(1, "commits").info("Fetched a page")
        reset_logging()  # Closes (and flushes) the file sink

        assert log_file.exists()
        content = log_file.read_text()
        assert "Fetched a page" in content
        assert "'stage': 'commits'" in content

    def test_setup_logging_sets_configured_flag(self) -> None:
        """Test that setup_logging sets the configured flag."""
        assert not is_configured()
        setup_logging(level="INFO")
        assert is_configured()

    def test_console_line_carries_sync_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Bound user/stage/repo context is appended to console lines."""
        setup_logging(level="INFO")

        bind_repo(7, "pull_requests", "acme/api").info("Stored PR #{}", 12)

        err = capsys.readouterr().err
        assert "Stored PR #12" in err
        assert "[user_id=7 stage=pull_requests repo=acme/api]" in err


class TestInterceptHandler:
    """Tests for stdlib logging interception."""

    def test_intercept_stdlib_logging(self) -> None:
        """Test that stdlib logging is routed to loguru."""
        messages: list[str] = []
        setup_logging(level="DEBUG")

        handler_id = logger.add(lambda msg: messages.append(str(msg)))
        try:
            stdlib_logger = logging.getLogger("test_stdlib_intercept")
            stdlib_logger.warning("Hello from stdlib")

            assert any("Hello from stdlib" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_library_loggers_quiet_at_info(self) -> None:
        """SQLAlchemy and httpx only surface warnings above DEBUG."""
        setup_logging(level="INFO")

        assert logging.getLogger("sqlalchemy.engine").level >= logging.WARNING
        assert logging.getLogger("httpx").level >= logging.WARNING

    def test_httpx_requests_visible_at_debug(self) -> None:
        """Verbose mode shows each GitHub request."""
        setup_logging(level="INFO", verbose=True)

        assert logging.getLogger("httpx").level == logging.DEBUG


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_binds_name(self) -> None:
        """Test that get_logger binds the module name."""
        messages: list[str] = []
        setup_logging(level="DEBUG")

        handler_id = logger.add(
            lambda msg: messages.append(str(msg)),
            format="{extra} | {message}",
        )
        try:
            get_logger("my_test_module").info("Test message")
            assert any("my_test_module" in msg for msg in messages)
        finally:
            logger.remove(handler_id)


class TestContextBinding:
    """Tests for context binding helpers."""

    def _capture_extra(self, bound_logger) -> dict:
        records: list[dict] = []
        handler_id = logger.add(lambda msg: records.append(msg.record["extra"]))
        try:
            bound_logger.info("message")
        finally:
            logger.remove(handler_id)
        return records[0]

    def test_bind_user(self) -> None:
        """bind_user adds the user ID."""
        extra = self._capture_extra(bind_user(3))

        assert extra == {"name": "sync", "user_id": 3}

    def test_bind_stage(self) -> None:
        """bind_stage adds user and stage."""
        extra = self._capture_extra(bind_stage(3, "issues"))

        assert extra["stage"] == "issues"
        assert extra["user_id"] == 3

    def test_bind_repo(self) -> None:
        """bind_repo adds user, stage and repository."""
        extra = self._capture_extra(bind_repo(3, "commits", "acme/api"))

        assert extra["repo"] == "acme/api"
        assert extra["stage"] == "commits"


class TestContextSuffix:
    """Tests for the console context suffix."""

    def test_empty_without_context(self) -> None:
        """No suffix when nothing is bound."""
        assert _context_suffix({"name": "x"}) == ""

    def test_keys_in_fixed_order(self) -> None:
        """Keys render user, stage, repo regardless of binding order."""
        suffix = _context_suffix({"repo": "acme/api", "user_id": 1, "stage": "commits"})

        assert suffix == " [user_id=1 stage=commits repo=acme/api]"


class TestLogLevels:
    """Tests for log level handling."""

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR"])
    def test_log_level_accepted(self, level: str) -> None:
        """Test that various log levels are accepted."""
        setup_logging(level=level)  # type: ignore[arg-type]
        assert is_configured()


class TestResetLogging:
    """Tests for reset_logging function."""

    def test_reset_logging_clears_configured(self) -> None:
        """Test that reset_logging clears the configured flag."""
        setup_logging(level="INFO")
        assert is_configured()

        reset_logging()
        assert not is_configured()
