"""Logging setup for the textshift package and its command line driver."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from ..core.config import settings

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

# Request-level chatter from the HTTP stack
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    name: str | None = None, log_level: str | None = None
) -> logging.Logger:
    """
    Attach handlers to the package logger once per process.

    Console output goes to stderr so stdout stays free for results. With
    ``LOG_TO_FILE`` on, everything is also kept in a rotating log file and
    errors in a second one next to it.
    """
    logger = logging.getLogger(name or settings.APP_NAME)
    if logger.handlers:
        return logger

    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper())
    logger.setLevel(level)
    logger.propagate = False

    detailed = logging.Formatter(DETAILED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(
        logging.Formatter(SIMPLE_FORMAT)
        if settings.ENVIRONMENT == "production"
        else detailed
    )
    console.setLevel(level)
    logger.addHandler(console)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

    if settings.LOG_TO_FILE:
        _add_file_handlers(logger, detailed)
    return logger


def _add_file_handlers(logger: logging.Logger, formatter: logging.Formatter) -> None:
    log_path = settings.LOG_DIR / settings.LOG_FILE
    targets = (
        (log_path, logging.DEBUG),
        (log_path.with_name(f"{log_path.stem}_errors{log_path.suffix}"), logging.ERROR),
    )
    try:
        settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
        for path, level in targets:
            handler = RotatingFileHandler(
                path,
                maxBytes=settings.LOG_MAX_BYTES,
                backupCount=settings.LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
            handler.setFormatter(formatter)
            handler.setLevel(level)
            logger.addHandler(handler)
    except OSError as e:
        logger.warning(f"Could not create log file handlers in {settings.LOG_DIR}: {e}")
