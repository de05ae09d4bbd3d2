"""Per-request logging context and access log."""

import time

from asgi_correlation_id import correlation_id
from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint
from structlog.contextvars import bind_contextvars

from src.app.core.logging import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

UNLOGGED_PATHS = frozenset({"/health", "/metrics"})


async def logging_context_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Bind request_id, method and path, then log the outcome of the request."""
    clear_request_context()
    bind_request_context(correlation_id.get())
    bind_contextvars(method=request.method, path=request.url.path)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        if request.url.path not in UNLOGGED_PATHS:
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        return response
    finally:
        clear_request_context()
