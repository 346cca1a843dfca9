"""
nexusqr.api.cookies

Purpose:
    Signed cookies. Starlette parses cookies natively (request.cookies); this
    module adds tamper detection on top with an HMAC-SHA256 signature keyed by
    Settings.cookie_secret.

Notes:
    - Wire format: "<value>.<urlsafe base64 signature, no padding>".
    - The signer is created once per app and stored as app.state.cookie_signer.

Created:
    2026-02-15
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Any

from starlette.requests import Request
from starlette.responses import Response


class CookieSigner:
    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("cookie secret must not be empty")
        self._key = secret.encode("utf-8")

    def _signature(self, value: str) -> str:
        digest = hmac.new(self._key, value.encode("utf-8"), hashlib.sha256).digest()
        return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")

    def sign(self, value: str) -> str:
        return f"{value}.{self._signature(value)}"

    def unsign(self, signed: str) -> str | None:
        """Return the original value, or None when the signature does not match."""
        value, sep, signature = signed.rpartition(".")
        if not sep:
            return None
        if not hmac.compare_digest(signature, self._signature(value)):
            return None
        return value


def _signer(request: Request) -> CookieSigner:
    return request.app.state.cookie_signer


def set_signed_cookie(request: Request, response: Response, key: str, value: str, **kwargs: Any) -> None:
    kwargs.setdefault("httponly", True)
    kwargs.setdefault("samesite", "lax")
    response.set_cookie(key, _signer(request).sign(value), **kwargs)


def read_signed_cookie(request: Request, key: str) -> str | None:
    raw = request.cookies.get(key)
    if raw is None:
        return None
    return _signer(request).unsign(raw)
