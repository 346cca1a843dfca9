"""
nexusqr.shared.db.errors

Purpose:
    Typed view of storage-engine failures.

    Driver errors (psycopg, asyncpg, or SQLAlchemy wrappers around them) arrive
    untyped. DatabaseFailure.from_failure is the single place that inspects their
    shape; everything downstream switches on DatabaseFailureKind.

Created:
    2026-02-15
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy.exc import DBAPIError

from nexusqr.api.errors import AppError


class DatabaseFailureKind(str, Enum):
    UNIQUE_VIOLATION = "23505"
    FOREIGN_KEY_VIOLATION = "23503"
    NOT_NULL_VIOLATION = "23502"
    OTHER = "other"

    @classmethod
    def from_sqlstate(cls, code: str) -> "DatabaseFailureKind":
        try:
            return cls(code)
        except ValueError:
            return cls.OTHER


# Diagnostic field -> attribute names used by the different drivers.
_DIAGNOSTIC_ATTRS: dict[str, tuple[str, ...]] = {
    "constraint": ("constraint", "constraint_name"),
    "table": ("table", "table_name"),
    "column": ("column", "column_name"),
    "detail": ("detail", "message_detail"),
}


def _read(source: Any, name: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _first_str(source: Any, *names: str) -> str | None:
    for name in names:
        value = _read(source, name)
        if isinstance(value, str):
            return value
    return None


@dataclass(frozen=True)
class DatabaseFailure:
    code: str
    message: str
    kind: DatabaseFailureKind
    diagnostics: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_failure(cls, failure: Any) -> "DatabaseFailure | None":
        """
        Return a DatabaseFailure when `failure` looks like a storage-engine error
        (a string `code`/SQLSTATE plus a string message), else None.
        """
        if failure is None or isinstance(failure, AppError):
            return None

        source = failure
        if isinstance(failure, DBAPIError) and failure.orig is not None:
            source = failure.orig

        # SQLSTATE attribute names: asyncpg/psycopg3 `sqlstate`, psycopg2 `pgcode`.
        code = _first_str(source, "sqlstate", "pgcode")
        message = _first_str(source, "message", "pgerror")

        if code is None:
            plain_code = _first_str(source, "code")
            if plain_code is None or message is None:
                return None
            code = plain_code

        if message is None:
            diag = _read(source, "diag")
            message = _first_str(diag, "message_primary") if diag is not None else None
        if message is None:
            message = str(source)

        return cls(
            code=code,
            message=message,
            kind=DatabaseFailureKind.from_sqlstate(code),
            diagnostics=_collect_diagnostics(source),
        )

    def as_details(self) -> dict[str, str]:
        details = {"code": self.code, "message": self.message}
        details.update(self.diagnostics)
        return details


def _collect_diagnostics(source: Any) -> dict[str, str]:
    diag = _read(source, "diag")
    out: dict[str, str] = {}
    for key, names in _DIAGNOSTIC_ATTRS.items():
        value = _first_str(source, *names)
        if value is None and diag is not None:
            value = _first_str(diag, *names)
        if value is not None:
            out[key] = value
    return out
