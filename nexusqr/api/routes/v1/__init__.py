from fastapi import APIRouter

from nexusqr.api.routes.v1.health import router as health_router
from nexusqr.api.routes.v1.info import router as info_router


def build_v1_router(prefix: str) -> APIRouter:
    v1_router = APIRouter(prefix=prefix)

    v1_router.include_router(health_router)
    v1_router.include_router(info_router)

    return v1_router
