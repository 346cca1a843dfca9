"""
nexusqr.api.middleware.request_context

Purpose:
    Outermost middleware. Resolves the request id, opens the request scope for
    the whole remaining lifecycle (routing, error handling, request logging) and
    echoes the id back on every response.

Notes:
    - Failures that escape every inner layer (or break the error pipeline) are
      answered here with the best-effort fallback body.

Created:
    2026-02-15
"""

from __future__ import annotations

import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from nexusqr.api.context.request_context import request_scope, resolve_request_id
from nexusqr.api.contracts.request_id_policy import RequestIdPolicy
from nexusqr.api.error_pipeline import build_fallback_body
from nexusqr.api.logging.structured import log_event

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, policy: RequestIdPolicy | None = None, is_production: bool = False) -> None:
        super().__init__(app)
        self._policy = policy or RequestIdPolicy()
        self._is_production = is_production

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        policy = self._policy
        request_id = resolve_request_id(request.headers.get(policy.request_id_header))

        with request_scope(request_id):
            # Attach for handlers that only see the Request
            request.state.request_id = request_id

            try:
                response: Response = await call_next(request)
            except Exception as exc:
                log_event(
                    logger,
                    logging.ERROR,
                    "request.unhandled",
                    requestId=request_id,
                    method=request.method,
                    path=request.url.path,
                    errorName=type(exc).__name__,
                    errorMessage=str(exc),
                )
                status, body = build_fallback_body(
                    exc,
                    path=request.url.path,
                    request_id=request_id,
                    is_production=self._is_production,
                )
                response = JSONResponse(status_code=status, content=body)

        # Echo back for client correlation
        response.headers[policy.response_header] = request_id
        return response
