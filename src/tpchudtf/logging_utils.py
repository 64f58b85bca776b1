"""
Logging utilities for tpchudtf with thread-aware formatting.

Table functions may be invoked concurrently from the host engine's worker
threads, so every record carries a short thread id:
- Thread ID prefixes for all log messages
- Level prefixes (ERROR, WARNING, INFO, DEBUG)
- A verbose variant with timestamps and module information
"""

import logging
import sys
import threading
from logging import getLogger

LOGGER_NAME = "TpchUdtf"


class ThreadAwareFormatter(logging.Formatter):
    """
    Formatter that includes the thread id and the level name.

    Format: LEVEL(thread_id): Message
    Example: INFO(4711): Registered tpch_nation (25 rows)
    """

    def format(self, record: logging.LogRecord) -> str:
        # Keep it to 4 digits max
        thread_id = threading.get_ident() % 10000
        return f"{record.levelname}({thread_id}): {record.getMessage()}"


class ThreadAwareVerboseFormatter(logging.Formatter):
    """
    Verbose formatter with timestamps, module info, and thread information.

    Format: YYYY-MM-DD HH:MM:SS LEVEL(thread_id) [module:line]: Message
    """

    def format(self, record: logging.LogRecord) -> str:
        thread_id = threading.get_ident() % 10000
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        module_info = f"{record.name}:{record.lineno}"
        return f"{timestamp} {record.levelname}({thread_id}) [{module_info}]: {record.getMessage()}"


def configure_enhanced_logging(verbose: bool = False, quiet: bool = False, logger_name: str = LOGGER_NAME) -> logging.Logger:
    """
    Configure the tpchudtf logger with thread-aware formatting.

    Args:
        verbose: Enable debug-level logging with detailed formatting
        quiet: Only show warnings and errors
        logger_name: Name of the logger to configure

    Returns:
        Configured logger instance
    """
    logger = getLogger(logger_name)

    # Remove existing handlers to avoid duplication
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if quiet:
        logger.setLevel(logging.WARNING)
    elif verbose:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ThreadAwareVerboseFormatter() if verbose else ThreadAwareFormatter())
    logger.addHandler(handler)

    return logger


def get_thread_aware_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger instance configured for thread-aware logging.

    Args:
        name: Logger name (defaults to "TpchUdtf")
    """
    return getLogger(name or LOGGER_NAME)
