"""
nexusqr.api.main

Purpose:
    FastAPI application entrypoint for the NexusQR API.

Notes:
    - Middleware order (outermost first): RequestContext, SecurityHeaders,
      RequestLogging, CORS, GZip, ErrorBoundary. Starlette wraps in reverse
      registration order, so they are added innermost first below.
    - Swagger UI lives at /api-docs and is disabled in production.
    - When a database is configured, startup fails unless `SELECT 1` succeeds.

Created:
    2026-02-15
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.openapi.utils import get_openapi
from starlette.concurrency import run_in_threadpool

from nexusqr.api.contracts.api_paths import ApiPaths
from nexusqr.api.contracts.request_id_policy import RequestIdPolicy
from nexusqr.api.contracts.security_headers_policy import SecurityHeadersPolicy
from nexusqr.api.cookies import CookieSigner
from nexusqr.api.error_handlers import register_error_handlers
from nexusqr.api.error_pipeline import ErrorPipeline
from nexusqr.api.logging.logging_config import configure_logging
from nexusqr.api.middleware.error_boundary import ErrorBoundaryMiddleware
from nexusqr.api.middleware.request_context import RequestContextMiddleware
from nexusqr.api.middleware.request_logging import RequestLoggingMiddleware
from nexusqr.api.middleware.security_headers import SecurityHeadersMiddleware
from nexusqr.api.routes.health import router as health_router
from nexusqr.api.routes.v1 import build_v1_router
from nexusqr.api.settings import Settings, get_settings
from nexusqr.shared.db.engine import check_connection, create_db_engine

_paths = ApiPaths()


def _install_openapi(app: FastAPI, settings: Settings) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = get_openapi(
            title="NexusQR API",
            version=settings.service_version,
            description="Multi-tenant QR Code & Digital Profile Management API",
            routes=app.routes,
            servers=[{"url": settings.app_url}],
        )
        components = schema.setdefault("components", {})
        components.setdefault("securitySchemes", {})["access-token"] = {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Enter Access Token",
        }
        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


def _build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        engine = None
        if settings.database_url:
            engine = create_db_engine(settings.database_url)
            await run_in_threadpool(check_connection, engine)
        app.state.db_engine = engine
        try:
            yield
        finally:
            if engine is not None:
                engine.dispose()

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    configure_logging(settings.log_level, settings.log_json)

    docs_enabled = not settings.is_production
    app = FastAPI(
        title=settings.service_name,
        version=settings.service_version,
        docs_url=_paths.docs if docs_enabled else None,
        redoc_url=None,
        openapi_url=_paths.openapi if docs_enabled else None,
        lifespan=_build_lifespan(settings),
    )
    app.state.settings = settings
    app.state.cookie_signer = CookieSigner(settings.cookie_secret)
    app.state.db_engine = None

    pipeline = ErrorPipeline(is_production=settings.is_production)
    app.state.error_pipeline = pipeline

    @app.get("/")
    def root():
        return {"status": "ok", "service": settings.service_name}

    # Innermost first.
    app.add_middleware(ErrorBoundaryMiddleware, pipeline=pipeline)
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(CORSMiddleware, **settings.cors_policy.middleware_kwargs())
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, policy=SecurityHeadersPolicy())
    app.add_middleware(
        RequestContextMiddleware,
        policy=RequestIdPolicy(),
        is_production=settings.is_production,
    )

    register_error_handlers(app, pipeline)

    app.include_router(health_router)
    app.include_router(build_v1_router(settings.api_prefix))

    _install_openapi(app, settings)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = app.state.settings
    uvicorn.run(app, host=settings.app_host, port=settings.app_port, log_config=None)
