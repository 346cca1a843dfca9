"""
nexusqr.api.contracts.request_id_policy

Purpose:
    Central policy for request correlation ids (header names + response behavior).

Created:
    2026-02-15
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestIdPolicy:
    request_id_header: str = "x-request-id"
    response_header: str = "x-request-id"
