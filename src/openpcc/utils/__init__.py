from .logging import get_logger, setup_file_logging, shutdown_file_logging

__all__ = [
    "get_logger",
    "setup_file_logging",
    "shutdown_file_logging",
]
