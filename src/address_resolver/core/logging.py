"""Loguru structured logging configuration.

Provides JSON-formatted structured logging with configurable log level.
Optionally writes to a rotating log file when a ``log_dir`` is provided.

httpx logs every request URL at INFO through the standard library. Those
URLs carry the user's address text and backend API keys in the query
string, so the ``httpx`` and ``httpcore`` loggers are capped at WARNING.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"

_NOISY_HTTP_LOGGERS = ("httpx", "httpcore")


def redact(text: str, keep: int = 4) -> str:
    """Mask free-text address input for log lines.

    Args:
        text: Raw address or query text.
        keep: Number of leading characters left visible.

    Returns:
        The first ``keep`` characters followed by a length marker.
    """
    if len(text) <= keep:
        return "***"
    return f"{text[:keep]}*** (len={len(text)})"


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Configure Loguru for structured JSON logging.

    Args:
        log_level: Minimum log level to emit.
        log_dir: Optional directory for log files.  When set, a rotating
            file sink is added (rotated every 24 hours, retained 7 days).
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format=_LOG_FORMAT,
        serialize=False,
    )
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        serialize=True,
        filter=lambda record: record["extra"].get("json_output", False),
    )

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / "address-resolver.log",
            level=log_level.upper(),
            format=_LOG_FORMAT,
            rotation="24h",
            retention="7 days",
        )

    for name in _NOISY_HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
