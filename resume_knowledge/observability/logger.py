"""
Logging configuration.

One stdout handler on the root logger whose format includes the
correlation id, so the log lines of one search can be grepped together.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

from resume_knowledge.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(correlation_id)s] %(name)s: %(message)s"

# Chatty at INFO; retrieval logs are what matter here
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "faiss", "aiosqlite", "sqlalchemy.engine")


class _StdoutHandler(logging.StreamHandler):
    """Handler installed by configure_logging."""

    def __init__(self) -> None:
        super().__init__(sys.stdout)


class CorrelationIdFilter(logging.Filter):
    """Stamp records with the bound correlation id ("-" when none)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Install the stdout handler on the root logger.

    Calling it again replaces the handler it installed before rather than
    adding a second one; handlers installed by others are left alone.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, _StdoutHandler):
            root_logger.removeHandler(handler)

    handler = _StdoutHandler()
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
