"""
HTTP middleware for request correlation and access logging.

CorrelationMiddleware binds the caller's X-Correlation-ID (or a fresh id)
for the request and echoes it back; RequestLoggingMiddleware logs one
structured line per request with its status and duration.

Dependencies: fastapi, starlette, resume_knowledge.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from resume_knowledge.observability.correlation import clear_correlation_id, set_correlation_id
from resume_knowledge.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log with status code and duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"

        try:
            response = await call_next(request)
        except Exception as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"{route} - unhandled {type(e).__name__}",
                duration_ms=_elapsed_ms(started),
            )
            raise

        # Client errors are expected traffic (unknown source, bad alias)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        log_with_context(
            logger,
            level,
            f"{route} - {response.status_code}",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Bind and echo the request's correlation id."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
