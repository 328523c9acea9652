# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error body carries a machine-readable code and, where possible,
# a suggestion telling the client how to fix the request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class TaskTrackerException(Exception):
    """
    Base exception for the TaskTracker API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "TASKTRACKER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthError(TaskTrackerException):
    """Raised when a request has no valid bearer credential."""

    def __init__(self, reason: str):
        super().__init__(
            message=reason,
            code="AUTH_ERROR",
            status_code=401,
            suggestion="Send a valid access token as 'Authorization: Bearer <token>'",
            headers={"WWW-Authenticate": "Bearer"},
        )


# =============================================================================
# Task Exceptions
# =============================================================================

class TaskValidationError(TaskTrackerException):
    """Raised when a create/update payload is missing or malforms a field."""

    def __init__(self, errors: list[dict[str, Any]]):
        # pydantic error dicts may carry exception objects in 'ctx'
        summary = [
            {
                "loc": [str(part) for part in error.get("loc", ())],
                "msg": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in errors
        ]
        super().__init__(
            message="Validation error",
            code="VALIDATION_ERROR",
            status_code=400,
            suggestion="Check the task fields: 'title' is required, 'effort' must be a number and 'dueDate' a date",
            details={"errors": summary},
        )


class StoreError(TaskTrackerException):
    """Raised when the task store cannot complete an operation."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Task store failed during {operation}: {error}",
            code="STORE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation},
        )


# =============================================================================
# Bulk Import / Export Exceptions
# =============================================================================

class BulkImportError(TaskTrackerException):
    """Raised when a bulk import fails. No rows from the batch are kept."""

    def __init__(self, error: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=f"Failed to upload tasks: {error}",
            code="BULK_IMPORT_FAILED",
            status_code=500,
            suggestion="Check that the file has a header row with a 'title' column and try again",
            details=details,
        )


class ExportError(TaskTrackerException):
    """Raised when the task spreadsheet cannot be produced."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to export tasks: {error}",
            code="EXPORT_FAILED",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
        )


class InvalidFileTypeError(TaskTrackerException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed},
        )


class FileTooLargeError(TaskTrackerException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def tasktracker_exception_handler(
    request: Request,
    exc: TaskTrackerException
) -> JSONResponse:
    """
    Convert TaskTrackerException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body validation errors.

    Reported as 400 with the same body shape as every other error.
    """
    error = TaskValidationError(list(exc.errors()))
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_dict(),
    )
