"""Logging configuration and setup.

This module provides thread-safe logging configuration with file rotation
and console output.
"""

import logging
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from store_download.shared.constants import LOGGING

__all__ = [
    'setup_logging',
]


# Guards handler setup against concurrent callers
_logging_lock = threading.Lock()

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(
    log_file: Optional[str] = LOGGING.LOG_FILE,
    max_bytes: int = LOGGING.MAX_BYTES,
    backup_count: int = LOGGING.BACKUP_COUNT,
    level: int = logging.INFO,
) -> None:
    """Setup logging configuration with rotation.

    This function is idempotent and thread-safe - calling it multiple times
    will not add duplicate handlers. Passing ``log_file=None`` configures the
    console handler only.

    Args:
        log_file: Path to log file, or None to skip file logging
        max_bytes: Maximum file size before rotation (default: 5MB)
        backup_count: Number of backup files to keep (default: 3)
        level: Root logger level
    """
    with _logging_lock:
        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)

        has_file_handler = log_file is None
        if log_file is not None:
            log_path = Path(log_file)
            for handler in root_logger.handlers[:]:  # Copy list to allow removal during iteration
                if isinstance(handler, RotatingFileHandler) and handler.baseFilename == str(log_path.absolute()):
                    if handler.maxBytes == max_bytes and handler.backupCount == backup_count:
                        has_file_handler = True
                        break
                    # Configuration mismatch - remove old handler to reconfigure
                    root_logger.removeHandler(handler)
                    handler.close()

        # FileHandler is the base class of every file-based handler
        has_console_handler = any(
            isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
            for h in root_logger.handlers
        )

        if has_file_handler and has_console_handler:
            return

        if not has_file_handler:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8',
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        if not has_console_handler:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)
