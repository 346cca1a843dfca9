"""
nexusqr.api.contracts.error_contract

Purpose:
    Stable error contract for the API (codes + response models).
    Every failed request is rendered through ErrorResponse; the fallback
    handler uses FallbackErrorResponse when the pipeline itself cannot run.

Created:
    2026-02-15
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiErrorCode(str, Enum):
    # Generic
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    APPLICATION_ERROR = "APPLICATION_ERROR"
    HTTP_ERROR = "HTTP_ERROR"

    # Domain
    VALIDATION_FAILED = "VALIDATION_FAILED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    DATABASE_ERROR = "DATABASE_ERROR"

    # Infrastructure (storage engine)
    UNIQUE_CONSTRAINT_VIOLATION = "UNIQUE_CONSTRAINT_VIOLATION"
    FOREIGN_KEY_VIOLATION = "FOREIGN_KEY_VIOLATION"
    NULL_CONSTRAINT_VIOLATION = "NULL_CONSTRAINT_VIOLATION"

    # Framework HTTP statuses
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNPROCESSABLE_ENTITY = "UNPROCESSABLE_ENTITY"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


# Status -> code table for framework HTTP errors that carry no explicit code.
HTTP_STATUS_ERROR_CODES: dict[int, ApiErrorCode] = {
    400: ApiErrorCode.VALIDATION_ERROR,
    401: ApiErrorCode.UNAUTHORIZED,
    403: ApiErrorCode.FORBIDDEN,
    404: ApiErrorCode.NOT_FOUND,
    409: ApiErrorCode.CONFLICT,
    422: ApiErrorCode.UNPROCESSABLE_ENTITY,
    429: ApiErrorCode.RATE_LIMIT_EXCEEDED,
    500: ApiErrorCode.INTERNAL_ERROR,
    503: ApiErrorCode.SERVICE_UNAVAILABLE,
}


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a trailing Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DebugInfo(_WireModel):
    exception_name: str = Field(..., description="Exception class name")
    stack: str | None = Field(default=None, description="Formatted traceback")


class ErrorResponse(_WireModel):
    success: bool = Field(default=False)
    status_code: int = Field(..., description="HTTP status code")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    errors: Any = Field(default=None, description="Optional structured details")
    path: str = Field(..., description="Request path")
    method: str = Field(..., description="Request method")
    request_id: str = Field(..., description="Request correlation id for debugging")
    timestamp: str = Field(default_factory=utc_timestamp)
    debug: DebugInfo | None = Field(default=None, description="Only outside production")

    def to_wire(self) -> dict[str, Any]:
        body = self.model_dump(by_alias=True, mode="json")
        if body.get("debug") is None:
            body.pop("debug", None)
        return body


class FallbackErrorResponse(_WireModel):
    request_id: str
    error_code: str = ApiErrorCode.INTERNAL_SERVER_ERROR.value
    message: str = "Internal server error"
    timestamp: str = Field(default_factory=utc_timestamp)
    path: str = "/"

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
