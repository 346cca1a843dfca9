"""
nexusqr.api.middleware.security_headers

Purpose:
    Stamp the SecurityHeadersPolicy headers onto every response, including
    error responses rendered by inner layers.

Notes:
    - Headers already set by a route are left alone.

Created:
    2026-02-15
"""

from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from nexusqr.api.contracts.security_headers_policy import SecurityHeadersPolicy


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, policy: SecurityHeadersPolicy | None = None) -> None:
        super().__init__(app)
        self._policy = policy or SecurityHeadersPolicy()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response: Response = await call_next(request)
        for name, value in self._policy.headers_for(request.url.path).items():
            response.headers.setdefault(name, value)
        return response
