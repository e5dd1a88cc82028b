"""
Loguru configuration for the portal.

Libraries that log through the standard ``logging`` module (aiohttp,
asyncio, qasync) are routed into the same sinks.
"""
import logging
import os
import re
import sys
from typing import Any, List

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
STDLIB_LOGGERS = ("aiohttp", "asyncio", "qasync")


class InterceptHandler(logging.Handler):
    """Forward standard-library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: Any = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def log_file_pattern(app_name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "_", app_name.lower()).strip("_") or "portal"
    return f"{slug}_{{time}}.log"


def setup_logging(
    debug_mode: bool = True,
    log_dir: str = "logs",
    app_name: str = "Portal",
    console: Any = sys.stderr,
) -> List[int]:
    """
    Replace loguru's default handler with the portal's sinks.

    Args:
        debug_mode: DEBUG on the console when True, INFO otherwise.
        log_dir: Directory for the rotating file sink; empty disables it.
        app_name: Used to name the log files.
        console: Console sink (stderr by default).

    Returns:
        Ids of the added sinks, usable with ``logger.remove``.
    """
    logger.remove()

    level = "DEBUG" if debug_mode else "INFO"
    sinks = [logger.add(console, level=level, format=CONSOLE_FORMAT)]

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        sinks.append(logger.add(
            os.path.join(log_dir, log_file_pattern(app_name)),
            rotation="10 MB",
            retention="1 week",
            level="DEBUG",
        ))

    handler = InterceptHandler()
    for name in STDLIB_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.propagate = False

    logger.info(f"Logging initialized for {app_name} ({level})")
    return sinks
