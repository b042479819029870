"""
Observability module.

Logging configuration, structured log helpers and correlation ids.
"""

from resume_knowledge.observability.correlation import (
    clear_correlation_id,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)
from resume_knowledge.observability.logger import configure_logging, get_logger
from resume_knowledge.observability.log_utils import log_with_context, safe_log_value

__all__ = [
    "configure_logging",
    "get_logger",
    "log_with_context",
    "safe_log_value",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "correlation_scope",
]
