"""
nexusqr.api.error_handlers

Purpose:
    Register global exception handlers so every failure is rendered by the
    ErrorPipeline as a stable ErrorResponse.

Notes:
    - FastAPI's own handlers for HTTPException and RequestValidationError would
      otherwise answer with {"detail": ...}; both are routed to the pipeline here.
    - AppError, storage-engine errors and unknown exceptions are not registered:
      they propagate to ErrorBoundaryMiddleware, which uses the same pipeline.

Created:
    2026-02-15
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nexusqr.api.error_pipeline import ErrorPipeline


def _state_request_id(request: Request) -> str | None:
    rid = getattr(getattr(request, "state", None), "request_id", None)
    return rid if isinstance(rid, str) and rid else None


def render_error(pipeline: ErrorPipeline, request: Request, exc: BaseException) -> JSONResponse:
    status, body = pipeline.handle(
        exc,
        path=request.url.path,
        method=request.method,
        request_id=_state_request_id(request),
    )
    return JSONResponse(status_code=status, content=body)


def register_error_handlers(app: FastAPI, pipeline: ErrorPipeline) -> None:
    """
    Register global exception handlers on the FastAPI app.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return render_error(pipeline, request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        response = render_error(pipeline, request, exc)
        if exc.headers:
            response.headers.update(exc.headers)
        return response
