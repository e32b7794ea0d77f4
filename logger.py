"""
Logging for the extraction stage

Every module logger lives under the ``regex_extraction`` namespace and
propagates to one stage logger, which owns the handlers: console output
plus rotating stage and error files under ``settings.log_dir``.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional
from config import settings

STAGE_LOGGER = "regex_extraction"
STAGE_LOG_FILE = "regex_extraction.log"
ERROR_LOG_FILE = "errors.log"

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _file_handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=settings.log_file_max_bytes,
        backupCount=settings.log_file_backup_count,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def configure_stage_logger(
    name: str = STAGE_LOGGER,
    log_dir: Optional[str] = None,
    log_to_file: Optional[bool] = None
) -> logging.Logger:
    """
    Attach the stage handlers to the namespace logger

    Safe to call repeatedly; handlers are added only the first time.

    Args:
        name: Namespace logger to configure
        log_dir: Directory for log files, defaults to ``settings.log_dir``
        log_to_file: Whether to write log files, defaults to ``settings.log_to_file``
    """
    stage_logger = logging.getLogger(name)

    log_level = getattr(logging, str(settings.log_level).upper(), logging.INFO)
    stage_logger.setLevel(log_level)

    if stage_logger.handlers:
        return stage_logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    stage_logger.addHandler(console_handler)

    if log_to_file is None:
        log_to_file = settings.log_to_file

    if log_to_file:
        directory = Path(log_dir or settings.log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        stage_logger.addHandler(_file_handler(directory / STAGE_LOG_FILE, logging.DEBUG))
        stage_logger.addHandler(_file_handler(directory / ERROR_LOG_FILE, logging.ERROR))

    # Prevent propagation to root logger
    stage_logger.propagate = False

    return stage_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the stage namespace, configuring the stage on first use"""
    configure_stage_logger()

    if name != STAGE_LOGGER and not name.startswith(STAGE_LOGGER + "."):
        name = f"{STAGE_LOGGER}.{name}"

    return logging.getLogger(name)
