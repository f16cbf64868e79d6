"""Logging configuration using Loguru.

Every record carries the conversation it belongs to (``-`` outside a
turn), so interleaved turns of different conversations can be told apart.
Guest names are masked before they reach a sink.
"""

import sys
from pathlib import Path
from typing import Any

from loguru import logger

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[conversation]}</magenta> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "conv={extra[conversation]} | {extra[name]}:{function}:{line} | {message}"
)


def setup_logging(
    level: str = "INFO",
    log_dir: str = "logs",
    enable_file: bool = True,
) -> None:
    """Configure application logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files
        enable_file: Add the rotating file sinks (production)
    """
    logger.remove()
    logger.configure(extra={"conversation": "-", "name": "contoso_cafe"})

    logger.add(
        sys.stderr,
        format=_CONSOLE_FORMAT,
        level=level,
        colorize=True,
        backtrace=True,
        diagnose=level == "DEBUG",
    )

    if enable_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "contoso_cafe.log",
            format=_FILE_FORMAT,
            level=level,
            rotation="00:00",
            retention="14 days",
            compression="gz",
            enqueue=True,
            diagnose=False,
        )

        # Failed turns only, with tracebacks
        logger.add(
            log_path / "turn_errors.log",
            format=_FILE_FORMAT + "\n{exception}",
            level="ERROR",
            rotation="20 MB",
            retention="60 days",
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )

    logger.info(f"Logging initialized at {level} level")


def get_logger(name: str) -> Any:
    """Get a logger bound to a module name.

    Usage:
        from contoso_cafe.logging_config import get_logger
        logger = get_logger(__name__)
    """
    return logger.bind(name=name)


def for_conversation(bound: Any, conversation_id: str | None) -> Any:
    """Attach a conversation id to a module logger."""
    return bound.bind(conversation=conversation_id or "-")


def mask_name(name: str | None) -> str:
    """Mask a guest name for logging: Alexandra -> A*******a."""
    if not name:
        return "***"
    if len(name) <= 2:
        return "*" * len(name)
    return f"{name[0]}{'*' * (len(name) - 2)}{name[-1]}"


def sanitize_for_log(data: dict) -> dict:
    """Copy of ``data`` with every name-like field masked.

    Applies to string and list values under any key containing 'name'
    (``reservationName``, ``names``), recursing into nested dicts.
    """
    result: dict = {}
    for key, value in data.items():
        is_name = "name" in key.lower()
        if is_name and isinstance(value, str):
            result[key] = mask_name(value)
        elif is_name and isinstance(value, list):
            result[key] = [mask_name(v) if isinstance(v, str) else v for v in value]
        elif isinstance(value, dict):
            result[key] = sanitize_for_log(value)
        else:
            result[key] = value
    return result
