"""
nexusqr.api.errors

Purpose:
    Internal exception types for API error handling.
    Services raise AppError subclasses; the error pipeline converts them to ErrorResponse.

Created:
    2026-02-15
"""

from __future__ import annotations

from typing import Any

from nexusqr.api.contracts.error_contract import ApiErrorCode


class AppError(Exception):
    """Domain error carrying its own status, taxonomy code and optional details."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: ApiErrorCode | str = ApiErrorCode.APPLICATION_ERROR,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code.value if isinstance(error_code, ApiErrorCode) else error_code
        self.details = details

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class ValidationFailed(AppError):
    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message, 400, ApiErrorCode.VALIDATION_FAILED, details)


class ResourceNotFound(AppError):
    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        suffix = f" with ID {resource_id}" if resource_id else ""
        super().__init__(f"{resource}{suffix} not found", 404, ApiErrorCode.RESOURCE_NOT_FOUND)


class Unauthorized(AppError):
    def __init__(self, message: str = "Unauthorized access") -> None:
        super().__init__(message, 401, ApiErrorCode.UNAUTHORIZED)


class DatabaseError(AppError):
    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message, 500, ApiErrorCode.DATABASE_ERROR, details)


# Authentication flavours of Unauthorized.


class InvalidCredentials(Unauthorized):
    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class AccountInactive(Unauthorized):
    def __init__(self, message: str = "Account is not active") -> None:
        super().__init__(message)


class TenantInactive(Unauthorized):
    def __init__(self) -> None:
        super().__init__("Organization account is suspended")


class MissingRequiredField(Unauthorized):
    """A request-context field (tenant, user) was required but never set."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"{field_name} is required but not set in request context")
        self.field_name = field_name


class ContextMissing(RuntimeError):
    """
    Context-dependent code ran outside any request scope.

    This is a programming error, not an AppError: it surfaces as a 500
    through the generic classifier.
    """

    def __init__(self, message: str = "RequestContext missing (request scope not initialized)") -> None:
        super().__init__(message)
