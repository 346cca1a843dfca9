"""
tests.api.conftest

Shared pytest fixtures for API tests.
"""

from __future__ import annotations

import asyncio

import pytest
from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.testclient import TestClient
from pydantic import BaseModel

from nexusqr.api.context.request_context import request_id, require_user, set_tenant, tenant_id
from nexusqr.api.contracts.formats import EthiopianPhone, Slug, TenantId, Uuid
from nexusqr.api.cookies import read_signed_cookie, set_signed_cookie
from nexusqr.api.errors import AppError, ResourceNotFound
from nexusqr.api.main import create_app
from nexusqr.api.settings import Settings


class FakeDriverError(Exception):
    """Shaped like a storage-engine error: string code + string message."""

    def __init__(self, code: str, message: str, **diagnostics: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        for key, value in diagnostics.items():
            setattr(self, key, value)


class Item(BaseModel):
    name: str
    qty: int


class Profile(BaseModel):
    id: Uuid
    tenant_id: TenantId
    slug: Slug
    phone: EthiopianPhone


class Opaque:
    """Not JSON-serializable."""


failure_router = APIRouter(prefix="/boom")


@failure_router.get("/app-error")
async def app_error() -> None:
    raise ResourceNotFound("Profile", "42")


@failure_router.get("/unique")
async def unique_violation() -> None:
    raise FakeDriverError(
        "23505",
        "duplicate key value violates unique constraint",
        constraint="users_email_key",
        table="users",
    )


@failure_router.get("/http-list")
async def http_list() -> None:
    raise HTTPException(status_code=400, detail={"message": ["field a required", "field b invalid"]})


@failure_router.get("/unknown")
async def unknown() -> None:
    raise RuntimeError("secret internals")


@failure_router.post("/validate")
async def validate(item: Item) -> dict:
    return item.model_dump()


@failure_router.post("/profile")
async def create_profile(profile: Profile) -> dict:
    return profile.model_dump()


@failure_router.get("/unserializable")
async def unserializable() -> None:
    raise AppError("Broken details", status_code=422, details={"obj": Opaque()})


@failure_router.get("/cookie/set")
async def cookie_set(request: Request, response: Response, value: str) -> dict:
    set_signed_cookie(request, response, "session", value)
    return {"ok": True}


@failure_router.get("/cookie/read")
async def cookie_read(request: Request) -> dict:
    return {"value": read_signed_cookie(request, "session")}


@failure_router.get("/tenant/{tenant}")
async def tenant_echo(tenant: str) -> dict:
    set_tenant(tenant)
    await asyncio.sleep(0.01)
    return {"tenant": tenant_id(), "requestId": request_id()}


@failure_router.get("/require-user")
async def needs_user() -> dict:
    return {"user": require_user()}


def build_test_app(**overrides):
    overrides.setdefault("app_env", "test")
    app = create_app(Settings(**overrides))
    app.include_router(failure_router)
    return app


@pytest.fixture()
def client_factory():
    """
    Factory fixture that creates a fresh TestClient.

    IMPORTANT:
        Pass Settings overrides (e.g. app_env="production") per test.
    """

    def _make(**overrides) -> TestClient:
        return TestClient(build_test_app(**overrides), raise_server_exceptions=True)

    return _make


@pytest.fixture()
def client(client_factory) -> TestClient:
    return client_factory()


@pytest.fixture()
def app_factory():
    return build_test_app
