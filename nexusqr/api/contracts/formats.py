"""
nexusqr.api.contracts.formats

Purpose:
    Reusable string formats for request models. Each is an Annotated str, so a
    bad value fails request validation and is reported as 400 VALIDATION_ERROR.

Usage:
    class CreateProfile(BaseModel):
        tenant_id: TenantId
        slug: Slug
        phone: EthiopianPhone | None = None

Created:
    2026-02-15
"""

from __future__ import annotations

from typing import Annotated

from pydantic import StringConstraints

UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
ETHIOPIAN_PHONE_PATTERN = r"^(?:\+251|0)[79]\d{8}$"
TENANT_ID_PATTERN = r"^tenant_[a-zA-Z0-9]{16}$"

Uuid = Annotated[str, StringConstraints(pattern=UUID_PATTERN)]
Slug = Annotated[str, StringConstraints(pattern=SLUG_PATTERN)]
EthiopianPhone = Annotated[str, StringConstraints(pattern=ETHIOPIAN_PHONE_PATTERN)]
TenantId = Annotated[str, StringConstraints(pattern=TENANT_ID_PATTERN)]
