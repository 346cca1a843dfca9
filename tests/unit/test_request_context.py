"""
tests.unit.test_request_context

Purpose:
    Ambient request context: scoping, async propagation, isolation, mutators.
"""

from __future__ import annotations

import asyncio

import pytest

from nexusqr.api.context import request_context as rc
from nexusqr.api.errors import ContextMissing, MissingRequiredField, Unauthorized


def test_no_context_outside_scope() -> None:
    assert rc.current() is None
    with pytest.raises(ContextMissing):
        rc.current_or_fail()


def test_mutators_fail_outside_scope() -> None:
    with pytest.raises(ContextMissing):
        rc.set_tenant("t-1")
    with pytest.raises(ContextMissing):
        rc.set_user("u-1")


def test_scope_exposes_and_then_drops_context() -> None:
    with rc.request_scope("req-1") as ctx:
        assert rc.current_or_fail() is ctx
        assert rc.request_id() == "req-1"
        assert rc.is_super_admin() is False
    assert rc.current() is None


def test_request_id_is_immutable() -> None:
    with rc.request_scope("req-1") as ctx:
        with pytest.raises(AttributeError):
            ctx.request_id = "other"
        assert ctx.request_id == "req-1"


def test_empty_request_id_rejected() -> None:
    with pytest.raises(ValueError):
        rc.RequestContext(request_id="")


def test_set_and_require_fields() -> None:
    with rc.request_scope("req-1"):
        assert rc.has_tenant() is False
        with pytest.raises(MissingRequiredField) as excinfo:
            rc.require_tenant()
        assert isinstance(excinfo.value, Unauthorized)
        assert excinfo.value.status_code == 401

        rc.set_tenant("tenant-9")
        rc.set_user("user-3")
        rc.set_super_admin()

        assert rc.require_tenant() == "tenant-9"
        assert rc.require_user() == "user-3"
        assert rc.has_user() is True
        assert rc.is_super_admin() is True


def test_context_survives_await() -> None:
    async def handler() -> str:
        with rc.request_scope("req-async"):
            await asyncio.sleep(0)
            await asyncio.sleep(0.001)
            return rc.current_or_fail().request_id

    assert asyncio.run(handler()) == "req-async"


def test_spawned_task_shares_context() -> None:
    async def child() -> None:
        await asyncio.sleep(0)
        rc.set_tenant("from-child")

    async def handler() -> str | None:
        with rc.request_scope("req-parent"):
            await asyncio.create_task(child())
            return rc.tenant_id()

    assert asyncio.run(handler()) == "from-child"


def test_concurrent_scopes_are_isolated() -> None:
    async def request(i: int) -> tuple[str, str | None, str | None]:
        with rc.request_scope(f"req-{i}"):
            rc.set_tenant(f"tenant-{i}")
            await asyncio.sleep(0.001 * (5 - i))
            rc.set_user(f"user-{i}")
            await asyncio.sleep(0)
            ctx = rc.current_or_fail()
            return ctx.request_id, ctx.tenant_id, ctx.user_id

    async def main() -> list[tuple[str, str | None, str | None]]:
        return await asyncio.gather(*(asyncio.create_task(request(i)) for i in range(5)))

    results = asyncio.run(main())
    assert results == [(f"req-{i}", f"tenant-{i}", f"user-{i}") for i in range(5)]


def test_run_in_request_scope_sync_and_async() -> None:
    def sync_fn(suffix: str) -> str:
        return rc.request_id() + suffix

    async def async_fn() -> str:
        await asyncio.sleep(0)
        return rc.request_id()

    async def main() -> tuple[str, str]:
        return (
            await rc.run_in_request_scope("a", sync_fn, "!"),
            await rc.run_in_request_scope("b", async_fn),
        )

    assert asyncio.run(main()) == ("a!", "b")
    assert rc.current() is None


@pytest.mark.parametrize("incoming", ["abc-123", "  abc-123  "])
def test_resolve_request_id_reuses_trimmed_header(incoming: str) -> None:
    assert rc.resolve_request_id(incoming) == "abc-123"


@pytest.mark.parametrize("incoming", [None, "", "   "])
def test_resolve_request_id_generates_when_blank(incoming: str | None) -> None:
    rid = rc.resolve_request_id(incoming)
    assert rid
    assert rid.strip() == rid


def test_generated_ids_are_unique() -> None:
    ids = {rc.resolve_request_id(None) for _ in range(10_000)}
    assert len(ids) == 10_000
