"""Structured logging setup for terraconf."""

import structlog
from pathlib import Path
from typing import Any
import os


def get_log_dir() -> Path:
    """Return the log directory, honoring TERRACONF_LOG_DIR."""
    override = os.environ.get("TERRACONF_LOG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".cache" / "terraconf" / "logs"


def configure_logging() -> None:
    """
    Configure structlog for JSON logging to ~/.cache/terraconf/logs/terraconf.log.

    Log level can be controlled via TERRACONF_LOG_LEVEL environment variable:
    - Set to "DEBUG" to see every planned attribute and formatter pass
    - Defaults to "INFO" if not set

    Log levels:
    - DEBUG: Per-attribute planning decisions, raw block text
    - INFO: Commands, state files read, resources rendered
    - WARNING: Lenient-mode degradations (skipped list elements, unknown values)
    - ERROR: Formatter failures, unreadable state documents

    Example:
        TERRACONF_LOG_LEVEL=DEBUG terraconf render terraform.tfstate
        tail -f ~/.cache/terraconf/logs/terraconf.log | jq .
    """
    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "terraconf.log"

    log_level = os.environ.get("TERRACONF_LOG_LEVEL", "INFO").upper()

    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
    if log_level not in valid_levels:
        log_level = "INFO"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=open(log_file, "a")),
        cache_logger_on_first_use=True,
    )


def configure_null_logging() -> None:
    """Discard log events unless structlog has already been configured.

    structlog prints to stdout by default, which would mix events into
    rendered blocks when terraconf is used as a library. An application that
    configures structlog itself, before or after importing terraconf, keeps
    its own settings.
    """
    if not structlog.is_configured():
        structlog.configure(logger_factory=structlog.ReturnLoggerFactory())


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("resource_rendered", type="aws_instance", id="i-123")
    """
    return structlog.get_logger(name)
