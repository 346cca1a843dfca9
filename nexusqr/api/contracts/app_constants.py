"""
nexusqr.api.contracts.app_constants

Purpose:
    Application-wide constants shared by routes and contracts.

Created:
    2026-02-15
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AppConstants:
    api_version: str = "v1"

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100


APP_CONSTANTS = AppConstants()
