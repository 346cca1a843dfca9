"""
nexusqr.api.contracts.cors_policy

Purpose:
    CORS allow-list policy derived from the CORS_ORIGIN setting.

Notes:
    - CORS_ORIGIN is a comma-separated list; trailing slashes are ignored.
    - "*" reflects the caller's origin (a literal "*" is not allowed with credentials).
    - Empty falls back to the local development origins.

Created:
    2026-02-15
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

FALLBACK_ORIGINS: tuple[str, ...] = (
    "http://localhost:3000",
    "http://localhost:9093",
)

_REFLECT_ANY_ORIGIN = r".*"


def _normalize_origin(origin: str) -> str:
    return origin.strip().rstrip("/")


@dataclass(frozen=True)
class CorsPolicy:
    allow_origins: tuple[str, ...] = FALLBACK_ORIGINS
    allow_origin_regex: str | None = None
    allow_credentials: bool = True
    allow_methods: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
    # Browsers refuse "Cookie" as a CORS request header; credentials cover it.
    allow_headers: tuple[str, ...] = (
        "Content-Type",
        "Authorization",
        "X-Requested-With",
        "X-Admin-Secret",
        "X-Request-Id",
    )
    expose_headers: tuple[str, ...] = ("X-Request-Id", "Content-Range", "X-Content-Range")
    max_age: int = 86400

    @classmethod
    def from_settings(cls, cors_origin: str | None, origin_regex: str | None = None) -> "CorsPolicy":
        raw = (cors_origin or "").strip()

        if raw == "*":
            return cls(allow_origins=(), allow_origin_regex=_REFLECT_ANY_ORIGIN)

        origins = tuple(o for o in (_normalize_origin(part) for part in raw.split(",")) if o)
        return cls(
            allow_origins=origins or FALLBACK_ORIGINS,
            allow_origin_regex=origin_regex or None,
        )

    def middleware_kwargs(self) -> dict[str, Any]:
        return {
            "allow_origins": list(self.allow_origins),
            "allow_origin_regex": self.allow_origin_regex,
            "allow_credentials": self.allow_credentials,
            "allow_methods": list(self.allow_methods),
            "allow_headers": list(self.allow_headers),
            "expose_headers": list(self.expose_headers),
            "max_age": self.max_age,
        }
