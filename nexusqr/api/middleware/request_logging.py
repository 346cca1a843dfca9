"""
nexusqr.api.middleware.request_logging

Purpose:
    Emit one `request.completed` record per request with method, path, status,
    duration and the ambient request context (request, tenant and user ids).

Created:
    2026-02-15
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from nexusqr.api.context.request_context import current
from nexusqr.api.logging.structured import log_event

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        status = 500
        try:
            response: Response = await call_next(request)
            status = response.status_code
            return response
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            ctx = current()
            log_event(
                logger,
                logging.INFO,
                "request.completed",
                requestId=ctx.request_id if ctx else None,
                tenantId=ctx.tenant_id if ctx else None,
                userId=ctx.user_id if ctx else None,
                method=request.method,
                path=request.url.path,
                status=status,
                durationMs=duration_ms,
                userAgent=request.headers.get("user-agent"),
            )
