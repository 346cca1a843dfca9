"""
nexusqr.api.logging.structured

Purpose:
    Structured (key=value / JSON) log records on top of stdlib logging.

Notes:
    - Call sites pass fields with log_event(); they travel on the record as `fields`.
    - Sensitive keys are removed (not masked) before a record is rendered.

Created:
    2026-02-15
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

# Compared case-insensitively with "-" and "_" stripped.
SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "authorization",
        "cookie",
        "setcookie",
        "xapikey",
        "password",
        "currentpassword",
        "newpassword",
        "oldpassword",
        "refreshtoken",
        "accesstoken",
        "jwt",
        "apikey",
        "secret",
        "token",
    }
)


def _is_sensitive(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    return key.lower().replace("-", "").replace("_", "") in SENSITIVE_KEYS


def redact(value: Any) -> Any:
    """Return a copy of `value` with sensitive keys removed at any depth."""
    if isinstance(value, Mapping):
        return {k: redact(v) for k, v in value.items() if not _is_sensitive(k)}
    if isinstance(value, (list, tuple)):
        return [redact(v) for v in value]
    return value


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    logger.log(level, event, extra={"fields": fields})


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    fields = getattr(record, "fields", None)
    if not isinstance(fields, Mapping):
        return {}
    return redact(fields)


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        return value if value and " " not in value and "\n" not in value else json.dumps(value)
    return json.dumps(value, default=str)


class StructuredFormatter(logging.Formatter):
    """
    Human-readable line with stable key=value context appended.
    Multi-line values (stack traces) are emitted after the line.
    """

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s | %(levelname)s | request_id=%(request_id)s | %(name)s | %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "request_id"):
            record.request_id = "-"

        line = super().format(record)
        fields = _record_fields(record)
        stack = fields.pop("stack", None)

        if fields:
            ctx = " ".join(f"{k}={_render_value(fields[k])}" for k in sorted(fields) if fields[k] is not None)
            line = f"{line} | {ctx}"
        if isinstance(stack, str) and stack:
            line = f"{line}\n{stack.rstrip()}"
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "requestId": getattr(record, "request_id", None),
            "tenantId": getattr(record, "tenant_id", None),
            "userId": getattr(record, "user_id", None),
        }
        payload.update(_record_fields(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)
