"""
nexusqr.api.logging.request_context_filter

Purpose:
    Logging filter that injects request_id, tenant_id and user_id from the
    ambient request context into log records.

Created:
    2026-02-15
"""

from __future__ import annotations

import logging

from nexusqr.api.context.request_context import current


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        ctx = current()
        record.request_id = ctx.request_id if ctx else "-"
        record.tenant_id = (ctx.tenant_id if ctx else None) or "-"
        record.user_id = (ctx.user_id if ctx else None) or "-"
        return True
