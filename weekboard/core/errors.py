"""Error taxonomy and HTTP error classification for weekboard."""

from enum import Enum

from pydantic import BaseModel


class WeekboardError(Exception):
    """Base class for weekboard errors."""


class InputValidationError(WeekboardError):
    """Caller-supplied input is missing required fields or malformed.

    Raised before any store call is made.
    """


class StoreError(WeekboardError):
    """Base class for record store failures."""


class StoreReadError(StoreError):
    """Reading from the record store failed.

    Services recover by treating the result as empty.
    """


class StoreWriteError(StoreError):
    """Creating, updating or deleting a record failed.

    Always surfaced to the caller.
    """


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_STORE_READ = "ERR_STORE_READ"
    ERR_STORE_WRITE = "ERR_STORE_WRITE"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error body returned by the HTTP surface."""

    error: str
    code: str
    severity: ErrorSeverity


def error_response_for(exception: Exception) -> tuple[int, ErrorResponse]:
    """Classify an exception into an HTTP status code and response body.

    Args:
        exception: The exception raised while handling a request

    Returns:
        Tuple of (status_code, ErrorResponse)
    """
    if isinstance(exception, InputValidationError):
        return 400, ErrorResponse(
            error=str(exception) or "Invalid request",
            code=ErrorCode.ERR_VALIDATION,
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, StoreWriteError):
        return 500, ErrorResponse(
            error=str(exception) or "Failed to save changes",
            code=ErrorCode.ERR_STORE_WRITE,
            severity=ErrorSeverity.HIGH,
        )

    if isinstance(exception, StoreReadError):
        return 500, ErrorResponse(
            error=str(exception) or "Failed to load data",
            code=ErrorCode.ERR_STORE_READ,
            severity=ErrorSeverity.MEDIUM,
        )

    return 500, ErrorResponse(
        error="Internal Server Error",
        code=ErrorCode.ERR_UNKNOWN,
        severity=ErrorSeverity.MEDIUM,
    )
