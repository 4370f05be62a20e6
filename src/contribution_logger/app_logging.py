"""Logging configuration helpers."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

_LOGGER_NAME = "contribution_logger"


def configure_logging() -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """HTTP middleware that logs one line per handled request."""
    logger = logging.getLogger(f"{_LOGGER_NAME}.requests")
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "method=%s path=%s status=%s duration_ms=%.1f",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response
