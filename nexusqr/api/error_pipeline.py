"""
nexusqr.api.error_pipeline

Purpose:
    Convert any failure raised while handling a request into exactly one
    ErrorResponse body and exactly one log record.

Design Notes:
    - Classifiers are plain functions returning a NormalizedError, or None when
      the failure is not theirs. The pipeline walks them in order.
    - default_classifiers() puts the storage-engine classifier first and the
      generic application classifier last. The generic classifier accepts
      everything, so nothing after it would ever run.
    - The request id comes from the ambient request context; path and method
      come from the caller.

Created:
    2026-02-15
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from nexusqr.api.context.request_context import current as current_context
from nexusqr.api.contracts.error_contract import (
    HTTP_STATUS_ERROR_CODES,
    ApiErrorCode,
    DebugInfo,
    ErrorResponse,
    FallbackErrorResponse,
)
from nexusqr.api.errors import AppError
from nexusqr.api.logging.structured import log_event
from nexusqr.shared.db.errors import DatabaseFailure, DatabaseFailureKind

logger = logging.getLogger(__name__)

UNKNOWN_REQUEST_ID = "unknown"
GENERIC_INTERNAL_MESSAGE = "Internal server error"


@dataclass(frozen=True)
class NormalizedError:
    status_code: int
    error_code: str
    message: str
    details: Any | None = None


Classifier = Callable[[Any], "NormalizedError | None"]


# ---------------------------------------------------------------------------
# Infrastructure classifier
# ---------------------------------------------------------------------------

_DATABASE_MAPPING: dict[DatabaseFailureKind, tuple[int, ApiErrorCode, str]] = {
    DatabaseFailureKind.UNIQUE_VIOLATION: (
        409,
        ApiErrorCode.UNIQUE_CONSTRAINT_VIOLATION,
        "A record with this value already exists",
    ),
    DatabaseFailureKind.FOREIGN_KEY_VIOLATION: (
        400,
        ApiErrorCode.FOREIGN_KEY_VIOLATION,
        "Referenced record does not exist",
    ),
    DatabaseFailureKind.NOT_NULL_VIOLATION: (
        400,
        ApiErrorCode.NULL_CONSTRAINT_VIOLATION,
        "Required field cannot be empty",
    ),
    DatabaseFailureKind.OTHER: (
        500,
        ApiErrorCode.DATABASE_ERROR,
        "Database operation failed",
    ),
}


def classify_database_error(failure: Any) -> NormalizedError | None:
    db_failure = DatabaseFailure.from_failure(failure)
    if db_failure is None:
        return None

    status, code, message = _DATABASE_MAPPING[db_failure.kind]
    return NormalizedError(
        status_code=status,
        error_code=code.value,
        message=message,
        details=db_failure.as_details(),
    )


# ---------------------------------------------------------------------------
# Generic / application classifier
# ---------------------------------------------------------------------------

def _validation_messages(exc: RequestValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "header", "cookie")]
        msg = str(err.get("msg", "")).removeprefix("Value error, ")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


def _clean_validation_errors(errors: Sequence[Any]) -> list[Any]:
    """Drop noisy/unserializable keys (ctx, url) for a minimal, stable payload."""
    cleaned: list[Any] = []
    for err in errors:
        if not isinstance(err, Mapping):
            cleaned.append(err)
            continue
        item = {k: v for k, v in err.items() if k not in ("ctx", "url", "input")}
        if isinstance(item.get("loc"), tuple):
            item["loc"] = list(item["loc"])
        if isinstance(item.get("msg"), str):
            item["msg"] = item["msg"].removeprefix("Value error, ")
        cleaned.append(item)
    return cleaned


def _http_payload(exc: Exception) -> tuple[int, dict[str, Any]]:
    if isinstance(exc, RequestValidationError):
        # Body/query validation is a client error, reported like any 400.
        return 400, {
            "message": _validation_messages(exc),
            "errors": _clean_validation_errors(exc.errors()),
        }

    if isinstance(exc, StarletteHTTPException):
        detail = exc.detail
        if isinstance(detail, Mapping):
            return exc.status_code, dict(detail)
        return exc.status_code, {"message": detail}

    raise TypeError(f"Not an HTTP failure: {type(exc).__name__}")


def _code_for_status(status: int, payload: Mapping[str, Any]) -> str:
    explicit = payload.get("code")
    if explicit:
        return str(explicit)
    return HTTP_STATUS_ERROR_CODES.get(status, ApiErrorCode.HTTP_ERROR).value


def _extract_message(payload: Mapping[str, Any]) -> str:
    message = payload.get("message")
    if not message:
        return "Request failed"
    if isinstance(message, list):
        return ", ".join(str(m) for m in message)
    if isinstance(message, Mapping):
        return "Request failed"
    return str(message)


def _extract_errors(payload: Mapping[str, Any]) -> Any | None:
    if payload.get("errors"):
        return payload["errors"]
    message = payload.get("message")
    if isinstance(message, (list, Mapping)):
        return message
    return None


def make_application_classifier(*, is_production: bool) -> Classifier:
    def classify_application_error(failure: Any) -> NormalizedError:
        if isinstance(failure, AppError):
            return NormalizedError(
                status_code=failure.status_code,
                error_code=failure.error_code,
                message=failure.message,
                details=failure.details,
            )

        if isinstance(failure, (StarletteHTTPException, RequestValidationError)):
            status, payload = _http_payload(failure)
            return NormalizedError(
                status_code=status,
                error_code=_code_for_status(status, payload),
                message=_extract_message(payload),
                details=_extract_errors(payload),
            )

        if is_production:
            message = GENERIC_INTERNAL_MESSAGE
        else:
            message = str(failure) if failure is not None and str(failure) else "An unexpected error occurred"
        return NormalizedError(
            status_code=500,
            error_code=ApiErrorCode.INTERNAL_ERROR.value,
            message=message,
            details=None,
        )

    return classify_application_error


def default_classifiers(*, is_production: bool) -> tuple[Classifier, ...]:
    """Storage-engine classifier first, generic catch-all last."""
    return (
        classify_database_error,
        make_application_classifier(is_production=is_production),
    )


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def _format_stack(failure: Any) -> str | None:
    if not isinstance(failure, BaseException) or failure.__traceback__ is None:
        return None
    return "".join(traceback.format_exception(type(failure), failure, failure.__traceback__))


def _exception_name(failure: Any) -> str:
    return type(failure).__name__ if failure is not None else "Unknown"


def current_request_id(fallback: str | None = None) -> str:
    ctx = current_context()
    if ctx is not None:
        return ctx.request_id
    return fallback or UNKNOWN_REQUEST_ID


class ErrorPipeline:
    def __init__(self, *, is_production: bool, classifiers: Sequence[Classifier] | None = None) -> None:
        self.is_production = is_production
        self.classifiers: tuple[Classifier, ...] = (
            tuple(classifiers) if classifiers is not None else default_classifiers(is_production=is_production)
        )

    def classify(self, failure: Any) -> NormalizedError:
        for classifier in self.classifiers:
            result = classifier(failure)
            if result is not None:
                return result
        raise LookupError(f"No classifier accepted {_exception_name(failure)}")

    def normalize(self, failure: Any, *, path: str, method: str, request_id: str | None = None) -> ErrorResponse:
        normalized = self.classify(failure)

        debug = None
        if not self.is_production:
            debug = DebugInfo(exception_name=_exception_name(failure), stack=_format_stack(failure))

        return ErrorResponse(
            status_code=normalized.status_code,
            code=normalized.error_code,
            message=normalized.message,
            errors=normalized.details,
            path=path,
            method=method,
            request_id=current_request_id(request_id),
            debug=debug,
        )

    def handle(self, failure: Any, *, path: str, method: str, request_id: str | None = None) -> tuple[int, dict[str, Any]]:
        """Normalize, log once, and return (status, wire body)."""
        response = self.normalize(failure, path=path, method=method, request_id=request_id)
        # Log before to_wire(); serializing details can fail.
        self._log(failure, response)
        return response.status_code, response.to_wire()

    def _log(self, failure: Any, response: ErrorResponse) -> None:
        status = response.status_code
        fields = {
            "requestId": response.request_id,
            "method": response.method,
            "path": response.path,
            "status": status,
            "errorName": _exception_name(failure),
            "errorMessage": str(failure) if failure is not None else "No message",
            "errorCode": response.code,
        }
        summary = f"{response.method} {response.path} - {status} {response.message}"

        if status >= 500:
            fields["stack"] = _format_stack(failure)
            log_event(logger, logging.ERROR, "request.failed", summary=summary, **fields)
        else:
            log_event(logger, logging.WARNING, "request.rejected", summary=summary, **fields)


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------

def build_fallback_body(
    failure: Any,
    *,
    path: str | None,
    request_id: str | None = None,
    is_production: bool = False,
) -> tuple[int, dict[str, Any]]:
    """
    Best-effort body for failures that escaped the pipeline (or broke it).
    Never assumes anything about the failure's shape.
    """
    status = getattr(failure, "status_code", None) or getattr(failure, "status", None)
    if not isinstance(status, int) or not 400 <= status <= 599:
        status = 500

    error_code = getattr(failure, "error_code", None)
    if not isinstance(error_code, str) or not error_code:
        error_code = ApiErrorCode.INTERNAL_SERVER_ERROR.value

    message = getattr(failure, "message", None)
    if is_production and not isinstance(failure, AppError):
        message = GENERIC_INTERNAL_MESSAGE
    elif not isinstance(message, str) or not message:
        try:
            message = str(failure) or GENERIC_INTERNAL_MESSAGE
        except Exception:
            message = GENERIC_INTERNAL_MESSAGE

    body = FallbackErrorResponse(
        request_id=current_request_id(request_id),
        error_code=error_code,
        message=message,
        path=path or "/",
    )
    return status, body.to_wire()
