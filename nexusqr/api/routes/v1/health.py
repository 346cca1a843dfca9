"""
nexusqr.api.routes.v1.health

Purpose:
    Versioned health endpoint for API clients.

Created:
    2026-02-15
"""

from __future__ import annotations

from fastapi import APIRouter

from nexusqr.api.context.request_context import request_id

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok", "requestId": request_id()}
