"""Logging configuration for vpclaunch.

This module provides structured logging via loguru. Logging is disabled by
default (library behavior) and enabled for the duration of a run when the
caller passes a LogConfig.

Example:
    from vpclaunch import LogConfig, ProvisionConfig, provision

    result = provision(
        ProvisionConfig(region="us-west-2"),
        logging=LogConfig(level="DEBUG", file="vpclaunch.log"),
    )
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from loguru import logger

from vpclaunch.core.exceptions import ConfigurationError

# Disable by default (library behavior)
logger.disable("vpclaunch")

type LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")

_CONTEXT_KEYS = ("component", "task", "provider", "region", "resource")


def _format_context(record: Any) -> str:
    extra = record.get("extra", {})
    parts = [f"{k}={extra[k]}" for k in _CONTEXT_KEYS if k in extra]
    return f" [{' '.join(parts)}]" if parts else ""


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
    "<dim>{extra[_ctx]}</dim> - "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line}{extra[_ctx]} - {message}"
)


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Logging configuration for a provisioning run.

    Attributes:
        level: Minimum console log level.
        file: Path to log file. If provided, logs are written to this file.
        console: Whether to log to stderr. Defaults to True.
        rotation: File rotation policy (e.g., "50 MB", "1 day"). Defaults to "50 MB".
        retention: Number of old log files to keep. Defaults to 10.
    """

    level: LogLevel = "INFO"
    file: str | None = None
    console: bool = True
    rotation: str = "50 MB"
    retention: int = 10

    def __post_init__(self) -> None:
        if self.level not in LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level '{self.level}'. Valid: {', '.join(LOG_LEVELS)}"
            )


def _setup_logging(config: LogConfig) -> list[int]:
    """Configure logging and return handler IDs for cleanup.

    Args:
        config: Logging configuration.

    Returns:
        List of handler IDs that were added (for later removal).
    """
    # Remove default handler (ID=0) that logs to stderr without filter
    logger.remove()

    logger.enable("vpclaunch")
    handler_ids: list[int] = []

    logger.configure(patcher=lambda r: r["extra"].update(_ctx=_format_context(r)))

    if config.console:
        hid = logger.add(
            sys.stderr,
            level=config.level,
            format=CONSOLE_FORMAT,
            colorize=True,
            filter="vpclaunch",
        )
        handler_ids.append(hid)

    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        hid = logger.add(
            config.file,
            level="DEBUG",  # File always captures everything
            format=FILE_FORMAT,
            rotation=config.rotation,
            retention=config.retention,
            compression="zip",
            diagnose=False,  # Don't expose credentials in tracebacks
            filter="vpclaunch",
        )
        handler_ids.append(hid)

    return handler_ids


def _teardown_logging(handler_ids: list[int]) -> None:
    """Remove handlers and disable logging.

    Args:
        handler_ids: List of handler IDs to remove.
    """
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("vpclaunch")


@contextmanager
def logging_enabled(config: LogConfig | None) -> Iterator[None]:
    """Enable logging for the body of the ``with`` block; no-op for None."""
    if config is None:
        yield
        return

    handler_ids = _setup_logging(config)
    try:
        yield
    finally:
        _teardown_logging(handler_ids)
