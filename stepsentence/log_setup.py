"""Logging configuration for StepSentence."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from .utils import ensure_dir_exists

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
MAX_LOG_BYTES = 10 * 1024 * 1024 # 10 MB
LOG_BACKUP_COUNT = 5

logger = logging.getLogger(__name__)

def _drop_root_handlers(root: logging.Logger) -> None:
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

def _rotating_file_handler(
    log_dir: str,
    log_file: str,
    formatter: logging.Formatter,
    max_bytes: int,
    backup_count: int
) -> RotatingFileHandler:
    ensure_dir_exists(log_dir)
    handler = RotatingFileHandler(
        os.path.join(log_dir, log_file),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setFormatter(formatter)
    return handler

def setup_logging(
    log_level: int = logging.INFO,
    log_dir: str = "logs",
    log_file: str = "stepsentence.log",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    max_bytes: int = MAX_LOG_BYTES,
    backup_count: int = LOG_BACKUP_COUNT
) -> Optional[str]:
    """
    Points the root logger at stdout and a rotating log file.

    Handlers from an earlier call are closed and replaced, so the CLI can
    log to a bootstrap file before the config is read and to the configured
    file afterwards. A log file that cannot be opened leaves console logging
    in place.

    Args:
        log_level: Minimum level for both handlers.
        log_dir: Directory of the log file; created if missing.
        log_file: Log file name inside log_dir.
        log_format: Format string for log records.
        date_format: Format string for timestamps.
        max_bytes: Size at which the log file rotates.
        backup_count: Number of rotated files kept.

    Returns:
        The log file path, or None if only console logging is active.
    """
    root = logging.getLogger()
    _drop_root_handlers(root)
    root.setLevel(log_level)
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    console.setLevel(log_level)
    root.addHandler(console)

    try:
        root.addHandler(_rotating_file_handler(log_dir, log_file, formatter, max_bytes, backup_count))
    except Exception as e:
        logger.error(f"Failed to set up file logging handler at {log_dir}/{log_file}: {e}", exc_info=True)
        return None

    log_path = os.path.join(log_dir, log_file)
    logger.debug(f"Logging to {log_path} at level {logging.getLevelName(log_level)}")
    return log_path

def setup_logging_from_config(config: dict, log_level: int, log_file: Optional[str] = None) -> Optional[str]:
    """Reconfigures logging with the log_dir and log_file of a loaded config."""
    return setup_logging(
        log_level=log_level,
        log_dir=config['log_dir'],
        log_file=log_file or config['log_file']
    )
