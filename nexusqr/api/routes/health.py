"""
nexusqr.api.routes.health

Purpose:
    Health endpoints for container/orchestrator checks.

Created:
    2026-02-15
"""

from __future__ import annotations

from fastapi import APIRouter

from nexusqr.api.contracts.api_paths import ApiPaths
from nexusqr.api.contracts.api_tags import ApiTags

_paths = ApiPaths()
_tags = ApiTags()

router = APIRouter(tags=[_tags.health])


@router.get(_paths.health)
def health() -> dict:
    return {"ok": True}
