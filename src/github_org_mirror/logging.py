"""Centralized logging configuration using loguru.

Provides:
- Configurable log levels from Settings
- CLI flag override (--verbose/--quiet)
- Standard library interception (SQLAlchemy, httpx)
- Structured context binding for user/stage/repo tracking
- Optional file rotation logging
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger, Record

# Type alias for log levels
LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Module-level flag to track if logging has been configured
_configured = False


class InterceptHandler(logging.Handler):
    """Handler to intercept standard library logging and route to loguru.

    This enables control over SQLAlchemy, httpx, and other library logs
    emitted while a sync run is in flight.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """Route stdlib log record to loguru."""
        from types import FrameType

        # Get corresponding loguru level
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)

        # Find caller from where originated the logged message
        frame: FrameType | None = logging.currentframe()
        depth = 2
        while frame is not None:
            if frame.f_code.co_filename != logging.__file__:
                break
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


# Context keys appended to console lines when bound
_CONTEXT_KEYS = ("user_id", "stage", "repo")


def _context_suffix(extra: dict[str, Any]) -> str:
    """Render bound sync context as " [user_id=1 stage=commits]"."""
    parts = [f"{key}={extra[key]}" for key in _CONTEXT_KEYS if key in extra]
    return f" [{' '.join(parts)}]" if parts else ""


def _console_format(record: Record) -> str:
    """Loguru format callable for console output.

    Records from get_logger()/bind_*() carry an `extra[name]`; intercepted
    stdlib records fall back to the module name.
    """
    source = "{extra[name]}" if "name" in record["extra"] else "{name}"
    suffix = _context_suffix(record["extra"]).replace("{", "{{").replace("}", "}}")
    return (
        "<dim>{time:HH:mm:ss}</dim> | "
        "<level>{level: <8}</level> | "
        f"<cyan>{source}</cyan>{suffix} - "
        "<level>{message}</level>\n{exception}"
    )


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> Logger:
    """Configure logging for the application.

    Args:
        level: Base log level from config
        verbose: If True, use DEBUG level (overrides level)
        quiet: If True, use WARNING level (overrides level)
        log_file: Optional path for file logging with rotation
        rotation: When to rotate log file (e.g., "10 MB", "1 day")
        retention: How long to keep rotated logs
        serialize: If True, output JSON format (useful for file logs)

    Returns:
        Configured logger instance

    Note:
        verbose takes precedence over quiet if both are True.
    """
    global _configured

    # Determine effective level
    effective_level: LogLevel
    if verbose:
        effective_level = "DEBUG"
    elif quiet:
        effective_level = "WARNING"
    else:
        effective_level = level

    # Clear any existing handlers
    logger.remove()

    # Console handler (one sink for both our loggers and intercepted stdlib)
    logger.add(
        sys.stderr,
        level=effective_level,
        format=_console_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    # Optional file handler with rotation
    if log_file:
        logger.add(
            log_file,
            level="DEBUG",  # Always capture everything to file
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{extra[name]}:{function}:{line} | "
                "{extra} | "
                "{message}"
            ),
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
            filter=lambda record: "name" in record["extra"],
        )

    # Intercept standard library logging
    _intercept_stdlib_logging(effective_level)

    _configured = True
    return logger


def _intercept_stdlib_logging(level: LogLevel) -> None:
    """Intercept standard library loggers and route to loguru.

    This captures logs from:
    - SQLAlchemy (sqlalchemy.engine)
    - httpx (GitHub REST transport)
    - Other libraries using stdlib logging
    """
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # Set specific library levels based on our level
    if level in ("TRACE", "DEBUG"):
        # Show SQLAlchemy SQL at debug level
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
    else:
        # Suppress SQLAlchemy at INFO and above
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    # httpx: generally quiet unless DEBUG
    httpx_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    logging.getLogger("httpx").setLevel(httpx_level)
    logging.getLogger("httpcore").setLevel(httpx_level)


def get_logger(name: str) -> Logger:
    """Get a logger with the given name bound as context.

    Usage:
        from github_org_mirror.logging import get_logger
        logger = get_logger(__name__)

        # With additional context binding
        logger = logger.bind(user_id=1, stage="commits")
        logger.info("Fetched page")  # Logs with user and stage context

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance with name bound
    """
    return logger.bind(name=name)


def bind_user(user_id: int) -> Logger:
    """Bind the owning user of a sync run to the logger.

    Args:
        user_id: Local user ID

    Returns:
        Logger with user context bound
    """
    return logger.bind(name="sync", user_id=user_id)


def bind_stage(user_id: int, stage: str) -> Logger:
    """Bind user and stage context to logger.

    Args:
        user_id: Local user ID
        stage: Sync stage name (e.g., "commits")

    Returns:
        Logger with user and stage context bound
    """
    return logger.bind(name="sync", user_id=user_id, stage=stage)


def bind_repo(user_id: int, stage: str, full_name: str) -> Logger:
    """Bind repository context to logger.

    Args:
        user_id: Local user ID
        stage: Sync stage name
        full_name: Repository in owner/name format

    Returns:
        Logger with user, stage and repo context bound
    """
    return logger.bind(name="sync", user_id=user_id, stage=stage, repo=full_name)


def is_configured() -> bool:
    """Check if logging has been configured."""
    return _configured


def reset_logging() -> None:
    """Reset logging state (primarily for testing)."""
    global _configured
    logger.remove()
    _configured = False
