"""
Structured logging helpers.

Search and indexing log records carry `extra=` fields (timings, counters,
ids). Values are flattened to short strings first so that an embedding
vector or a whole hit list never ends up in a log line.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel

from resume_knowledge.observability.correlation import get_correlation_id

# LogRecord attributes that `extra=` must not overwrite
_RESERVED = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Render a value for a log field.

    Sequences and mappings are summarised by size, floats are rounded,
    enums log their value and pydantic models their class name.
    """
    if value is None:
        return "None"
    if isinstance(value, Enum):
        rendered = str(value.value)
    elif isinstance(value, float):
        rendered = f"{value:.4g}"
    elif isinstance(value, BaseModel):
        rendered = f"<{type(value).__name__}>"
    elif isinstance(value, (list, tuple, set, frozenset)):
        rendered = f"{type(value).__name__}[{len(value)}]"
    elif isinstance(value, dict):
        rendered = f"dict[{len(value)}]"
    else:
        rendered = str(value)

    if len(rendered) > max_length:
        return f"{rendered[:max_length]}...(+{len(rendered) - max_length} chars)"
    return rendered


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log `message` with `context` as structured fields.

    The bound correlation id is added as `request_id`. Keys that clash
    with LogRecord attributes are prefixed with `ctx_`.

    Args:
        logger: Target logger
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Field values, rendered with safe_log_value
    """
    if not logger.isEnabledFor(level):
        return

    fields = {
        (f"ctx_{key}" if key in _RESERVED else key): safe_log_value(value)
        for key, value in context.items()
    }
    correlation_id = get_correlation_id()
    if correlation_id:
        fields.setdefault("request_id", correlation_id)
    logger.log(level, message, extra=fields)
