"""Error taxonomy shared by the API, the services and the CLI scripts.

Every failure the shop can report is an AppError subclass carrying a
machine-readable code and the HTTP status it maps to. Balance discrepancies,
orphans and duplicate ids are report content and never raised.
"""

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """JSON body returned for every AppError."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base exception for all app-level errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorDetail:
        return ErrorDetail(code=self.code, message=self.message, details=self.details or None)


class _CodedError(AppError):
    """AppError whose code and status are fixed per subclass."""

    error_code: ClassVar[str] = "INTERNAL_ERROR"
    http_status: ClassVar[int] = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(self.error_code, message, self.http_status, details)


class ValidationError(_CodedError):
    """Input that cannot be accepted, e.g. an inverted date range."""

    error_code = "VALIDATION_ERROR"
    http_status = 422


class ConflictError(_CodedError):
    error_code = "CONFLICT"
    http_status = 409


class InvalidStateError(_CodedError):
    error_code = "INVALID_STATE"
    http_status = 400


class DatabaseError(_CodedError):
    """Store read/write failure or a record the store cannot validate."""

    error_code = "DATABASE_ERROR"
    http_status = 500


class NotFoundError(AppError):
    """No record with this id in the collection."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} with ID {resource_id} not found",
            404,
            {"resource": resource, "resource_id": resource_id},
        )


class ConfirmationRequiredError(AppError):
    """A destructive operation was called without confirm=True."""

    def __init__(self, operation: str):
        super().__init__(
            "CONFIRMATION_REQUIRED",
            f"{operation} deletes records permanently and requires explicit confirmation",
            400,
            {"operation": operation},
        )
