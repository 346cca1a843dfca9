"""
nexusqr.api.routes.v1.info

Purpose:
    Versioned info endpoint exposing API metadata for client discovery.

Created:
    2026-02-15
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from nexusqr.api.contracts.app_constants import APP_CONSTANTS
from nexusqr.api.contracts.request_id_policy import RequestIdPolicy

router = APIRouter(tags=["info"])


@router.get("/info")
def info(request: Request) -> dict:
    # Keep this as stable contract; safe for clients to depend on.
    settings = request.app.state.settings
    return {
        "api_version": APP_CONSTANTS.api_version,
        "service": settings.service_name,
        "version": settings.service_version,
        "environment": settings.app_env,
        "request_id_header": RequestIdPolicy().request_id_header,
        "pagination": {
            "default_page_size": APP_CONSTANTS.default_page_size,
            "max_page_size": APP_CONSTANTS.max_page_size,
        },
    }
