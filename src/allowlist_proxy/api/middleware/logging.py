"""
Request logging middleware.

Administrative requests are logged at INFO with the calling principal;
read-only queries only at DEBUG, since decision lookups dominate traffic.
"""

import logging
import time
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from allowlist_proxy.api.middleware.auth import SAFE_METHODS

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log each request with its principal, outcome and duration.

    Sets ``X-Request-ID`` (echoed from the request, or ``unknown``) and
    ``X-Process-Time`` in milliseconds on every logged response.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        logger_instance: logging.Logger | None = None,
        skip_paths: set[str] | None = None,
    ) -> None:
        super().__init__(app)
        self._logger = logger_instance or logger
        self._skip_paths = skip_paths or {"/health"}

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path in self._skip_paths:
            return await call_next(request)

        started = time.perf_counter()
        request_id = request.headers.get("x-request-id", "unknown")
        principal = getattr(request.state, "user_id", None) or "-"
        summary = f"{request.method} {request.url.path} by {principal}"

        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self._logger.exception(f"{summary} failed after {elapsed_ms:.1f}ms [{request_id}]")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        level = logging.DEBUG if request.method in SAFE_METHODS else logging.INFO
        if response.status_code >= 400:
            level = max(level, logging.WARNING if response.status_code < 500 else logging.ERROR)
        self._logger.log(
            level,
            f"{summary} -> {response.status_code} ({elapsed_ms:.1f}ms) [{request_id}]",
        )

        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}"
        response.headers["X-Request-ID"] = request_id
        return response
