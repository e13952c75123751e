"""
openpcc Logging System
======================
Provides consistent, scoped loggers for the package.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, List

# Includes the logger name (e.g. [openpcc.parallel])
CONSOLE_FMT = "[%(name)s] %(levelname)s: %(message)s"

# File format is detailed with timestamps and the worker thread
FILE_FMT = "%(asctime)s | %(name)s | %(threadName)s | %(levelname)s | %(message)s"

LOG_FILE_NAME = "openpcc_execution.log"

# Global state to manage shared file logging across modules
_KNOWN_LOGGERS: List[logging.Logger] = []
_SHARED_FILE_HANDLER: Optional[logging.FileHandler] = None


def get_logger(name: str, console_level: int = logging.INFO) -> logging.Logger:
    """
    Creates or retrieves a logger with specific formatting and handlers.

    All loggers created through this function share the same file handler
    once it has been set up by `setup_file_logging`, including loggers
    created before that call.

    Args:
        name: Dot-separated module name (e.g., 'openpcc.pearson').
        console_level: Logging level for the console handler.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)  # Capture everything, handlers filter it down
    logger.propagate = False  # Don't double-log to root

    if logger not in _KNOWN_LOGGERS:
        _KNOWN_LOGGERS.append(logger)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler) for h in logger.handlers)

    if not has_console:
        c_handler = logging.StreamHandler(sys.stdout)
        c_handler.setLevel(console_level)
        c_handler.setFormatter(logging.Formatter(CONSOLE_FMT))
        logger.addHandler(c_handler)

    if _SHARED_FILE_HANDLER and _SHARED_FILE_HANDLER not in logger.handlers:
        logger.addHandler(_SHARED_FILE_HANDLER)

    return logger


def setup_file_logging(log_dir: Path, file_level: int = logging.DEBUG) -> Path:
    """
    Initializes the shared file logger for every openpcc logger.
    Call once at the start of an execution script (e.g. a benchmark run).

    Args:
        log_dir: The directory where the log file will be created.
        file_level: The logging level for the file.

    Returns:
        Path of the log file.
    """
    global _SHARED_FILE_HANDLER

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    new_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    new_handler.setLevel(file_level)
    new_handler.setFormatter(logging.Formatter(FILE_FMT))

    old_handler = _SHARED_FILE_HANDLER
    _SHARED_FILE_HANDLER = new_handler

    for l in _KNOWN_LOGGERS:
        if old_handler and old_handler in l.handlers:
            l.removeHandler(old_handler)
        if new_handler not in l.handlers:
            l.addHandler(new_handler)

    # Release the previous file
    if old_handler:
        old_handler.close()

    get_logger("openpcc").info(f"File logging initialized at: {log_file}")
    return log_file


def shutdown_file_logging() -> None:
    """Detach and close the shared file handler, if any."""
    global _SHARED_FILE_HANDLER

    handler = _SHARED_FILE_HANDLER
    if handler is None:
        return
    _SHARED_FILE_HANDLER = None
    for l in _KNOWN_LOGGERS:
        if handler in l.handlers:
            l.removeHandler(handler)
    handler.close()
