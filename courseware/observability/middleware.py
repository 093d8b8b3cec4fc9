"""
FastAPI middleware for observability.

Correlation ID and request logging middleware.

Dependencies: fastapi, courseware.observability
System role: Request/response observability injection
"""

import logging
import re
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from courseware.observability.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

_DOMAIN_PATH = re.compile(r"/domains/([^/]+)/")


def _request_context(request: Request) -> dict:
    """Fields identifying who asked for what, taken before routing."""
    match = _DOMAIN_PATH.search(request.url.path)
    return {
        "method": request.method,
        "path": request.url.path,
        "domain_id": match.group(1) if match else None,
        "uid": request.headers.get("X-User-Id"),
    }


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and one per response, with timing."""

    async def dispatch(self, request: Request, call_next):
        """
        Log HTTP request and response with timing.

        Client errors (4xx) are logged at WARNING so rejected course
        operations stand out from normal traffic.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response object
        """
        started = time.perf_counter()
        context = _request_context(request)
        label = f"{context['method']} {context['path']}"
        logger.info(label, extra=context)

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{label} - Exception",
                extra={**context, "process_time_ms": _elapsed_ms(started), "error_type": type(e).__name__},
            )
            raise

        level = logging.WARNING if 400 <= response.status_code < 500 else logging.INFO
        logger.log(
            level,
            f"{label} - {response.status_code}",
            extra={
                **context,
                "status_code": response.status_code,
                "process_time_ms": _elapsed_ms(started),
            },
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Binds a correlation ID to the request context and echoes it back."""

    async def dispatch(self, request: Request, call_next):
        """
        Reuse the caller's correlation ID or mint one.

        Returns:
            Response: Response with correlation ID header
        """
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
