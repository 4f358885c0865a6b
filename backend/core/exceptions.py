"""
Exception hierarchy shared by every response-producing component.

Each error knows the HTTP status it maps to and the short ``error`` label
rendered to clients, so routes and services raise and the API layer only
formats.
"""
from typing import Any, Dict, Optional


class ErrorReason:
    """Machine-readable reasons attached to some errors."""
    EMPTY_CONTENT = "empty_content"
    NO_CAPTIONS = "no_captions"
    BAD_VIDEO_ID = "bad_video_id"


class AppError(Exception):
    """Base exception for all backend errors."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.error, "message": self.message}
        if self.reason:
            body["reason"] = self.reason
        return body


class ValidationError(AppError):
    """Malformed or missing input."""
    status_code = 400
    error = "Invalid input"


class ExtractionError(AppError):
    """No meaningful content could be extracted from a page."""
    status_code = 400
    error = "No content found"


class UnauthorizedError(AppError):
    status_code = 401
    error = "Unauthorized"


class ForbiddenError(AppError):
    """Caller does not own the requested record."""
    status_code = 403
    error = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    error = "Not found"


class RequestTimeoutError(AppError):
    """An upstream dependency exceeded its time bound."""
    status_code = 408
    error = "Request timeout"


class PayloadTooLargeError(AppError):
    status_code = 413
    error = "Payload too large"


class UpstreamError(AppError):
    """Wrapped failure from a downstream HTTP dependency."""
    status_code = 500
    error = "Upstream service error"


class ServiceUnavailableError(AppError):
    status_code = 503
    error = "Service unavailable"


class InternalError(AppError):
    status_code = 500
    error = "Internal Server Error"
