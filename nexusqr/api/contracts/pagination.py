"""
nexusqr.api.contracts.pagination

Purpose:
    Paginated response contract shared by list endpoints.

Created:
    2026-02-15
"""

from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nexusqr.api.contracts.app_constants import APP_CONSTANTS

T = TypeVar("T")


class PageMeta(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1, le=APP_CONSTANTS.max_page_size)
    item_count: int = Field(..., ge=0)
    page_count: int = Field(..., ge=0)
    has_previous_page: bool
    has_next_page: bool
    prev_link: str | None = None
    next_link: str | None = None

    @classmethod
    def build(
        cls,
        *,
        page: int,
        limit: int = APP_CONSTANTS.default_page_size,
        item_count: int,
        base_url: str | None = None,
    ) -> "PageMeta":
        if not 1 <= limit <= APP_CONSTANTS.max_page_size:
            raise ValueError(f"limit must be between 1 and {APP_CONSTANTS.max_page_size}, got {limit}")

        page_count = math.ceil(item_count / limit) if item_count else 0
        has_prev = page > 1
        has_next = page < page_count

        def _link(p: int) -> str | None:
            if base_url is None:
                return None
            sep = "&" if "?" in base_url else "?"
            return f"{base_url}{sep}page={p}&limit={limit}"

        return cls(
            page=page,
            limit=limit,
            item_count=item_count,
            page_count=page_count,
            has_previous_page=has_prev,
            has_next_page=has_next,
            prev_link=_link(page - 1) if has_prev else None,
            next_link=_link(page + 1) if has_next else None,
        )


class Page(BaseModel, Generic[T]):
    data: list[T] = Field(default_factory=list)
    meta: PageMeta
