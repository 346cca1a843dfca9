"""
nexusqr.api.context.request_context

Purpose:
    Request-scoped context storage using contextvars.
    Gives any code running during a request (services, repositories, log filters,
    error handlers) the request id, tenant id and user id without threading them
    through every call.

Notes:
    - Each ASGI request runs in its own asyncio task, and tasks copy the current
      context when created. A context opened for request A is therefore never
      visible to request B, and survives every await inside A.
    - Tasks spawned inside a scope see the same RequestContext object, so a
      tenant set by a child task is visible to the parent.

Created:
    2026-02-15
"""

from __future__ import annotations

import contextvars
import inspect
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable

from nexusqr.api.errors import ContextMissing, MissingRequiredField


@dataclass
class RequestContext:
    request_id: str
    tenant_id: str | None = None
    user_id: str | None = None
    is_super_admin: bool = False

    def __post_init__(self) -> None:
        if not self.request_id:
            raise ValueError("request_id must be a non-empty string")

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "request_id" and "request_id" in self.__dict__:
            raise AttributeError("request_id is immutable once the context is opened")
        super().__setattr__(name, value)


request_context_ctx_var: contextvars.ContextVar[RequestContext | None] = contextvars.ContextVar(
    "request_context",
    default=None,
)


def generate_request_id() -> str:
    return str(uuid.uuid4())


def resolve_request_id(incoming: str | None) -> str:
    """
    Reuse a caller-supplied id when it is non-empty after trimming,
    otherwise generate a fresh one.
    """
    if incoming is not None:
        trimmed = incoming.strip()
        if trimmed:
            return trimmed
    return generate_request_id()


@contextmanager
def request_scope(request_id: str) -> Iterator[RequestContext]:
    """
    Open a request scope. The context is reachable via current() until the
    block exits, then the previous binding (normally none) is restored.
    """
    ctx = RequestContext(request_id=request_id)
    token = request_context_ctx_var.set(ctx)
    try:
        yield ctx
    finally:
        request_context_ctx_var.reset(token)


async def run_in_request_scope(request_id: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run fn (sync or async) inside a freshly opened request scope."""
    with request_scope(request_id):
        result = fn(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------

def current() -> RequestContext | None:
    return request_context_ctx_var.get()


def current_or_fail() -> RequestContext:
    ctx = request_context_ctx_var.get()
    if ctx is None:
        raise ContextMissing()
    return ctx


def request_id() -> str:
    return current_or_fail().request_id


def tenant_id() -> str | None:
    return current_or_fail().tenant_id


def user_id() -> str | None:
    return current_or_fail().user_id


def is_super_admin() -> bool:
    return current_or_fail().is_super_admin


def has_tenant() -> bool:
    ctx = current()
    return bool(ctx and ctx.tenant_id)


def has_user() -> bool:
    ctx = current()
    return bool(ctx and ctx.user_id)


# ---------------------------------------------------------------------------
# Mutators (called by authentication / tenant resolution)
# ---------------------------------------------------------------------------

def set_tenant(value: str) -> None:
    current_or_fail().tenant_id = value


def set_user(value: str) -> None:
    current_or_fail().user_id = value


def set_super_admin(value: bool = True) -> None:
    current_or_fail().is_super_admin = value


def require_tenant() -> str:
    value = tenant_id()
    if not value:
        raise MissingRequiredField("TenantId")
    return value


def require_user() -> str:
    value = user_id()
    if not value:
        raise MissingRequiredField("UserId")
    return value
