"""
nexusqr.api.middleware.error_boundary

Purpose:
    Last line of the application: any exception escaping routing and the
    registered exception handlers is normalized by the ErrorPipeline here.

Created:
    2026-02-15
"""

from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from nexusqr.api.error_handlers import render_error
from nexusqr.api.error_pipeline import ErrorPipeline


class ErrorBoundaryMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, pipeline: ErrorPipeline) -> None:
        super().__init__(app)
        self._pipeline = pipeline

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return render_error(self._pipeline, request, exc)
