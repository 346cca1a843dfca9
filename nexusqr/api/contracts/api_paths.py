"""
nexusqr.api.contracts.api_paths

Purpose:
    Central definition of API route paths and versioning.
    Keeps routing stable and prevents string duplication.

Created:
    2026-02-15
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ApiPaths:
    v1_prefix: str = "/api/v1"
    health: str = "/health"
    info: str = "/info"
    docs: str = "/api-docs"
    openapi: str = "/api-docs/openapi.json"
