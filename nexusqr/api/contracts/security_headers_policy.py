"""
nexusqr.api.contracts.security_headers_policy

Purpose:
    Security response headers applied to every response (the usual helmet
    defaults for a JSON API).

Notes:
    - Content-Security-Policy is not sent under the docs prefix; Swagger UI
      loads its assets and inline scripts from a CDN.

Created:
    2026-02-15
"""

from __future__ import annotations

from dataclasses import dataclass, field

from nexusqr.api.contracts.api_paths import ApiPaths

DEFAULT_CONTENT_SECURITY_POLICY = "; ".join(
    (
        "default-src 'self'",
        "base-uri 'self'",
        "font-src 'self' https: data:",
        "form-action 'self'",
        "frame-ancestors 'self'",
        "img-src 'self' data:",
        "object-src 'none'",
        "script-src 'self'",
        "script-src-attr 'none'",
        "style-src 'self' https: 'unsafe-inline'",
        "upgrade-insecure-requests",
    )
)


def _default_headers() -> dict[str, str]:
    return {
        "Cross-Origin-Opener-Policy": "same-origin",
        "Cross-Origin-Resource-Policy": "same-origin",
        "Origin-Agent-Cluster": "?1",
        "Referrer-Policy": "no-referrer",
        "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
        "X-Content-Type-Options": "nosniff",
        "X-DNS-Prefetch-Control": "off",
        "X-Download-Options": "noopen",
        "X-Frame-Options": "SAMEORIGIN",
        "X-Permitted-Cross-Domain-Policies": "none",
        "X-XSS-Protection": "0",
    }


@dataclass(frozen=True)
class SecurityHeadersPolicy:
    headers: dict[str, str] = field(default_factory=_default_headers)
    content_security_policy: str | None = DEFAULT_CONTENT_SECURITY_POLICY
    csp_exempt_prefixes: tuple[str, ...] = (ApiPaths().docs,)

    def headers_for(self, path: str) -> dict[str, str]:
        headers = dict(self.headers)
        if self.content_security_policy and not any(path.startswith(p) for p in self.csp_exempt_prefixes):
            headers["Content-Security-Policy"] = self.content_security_policy
        return headers
