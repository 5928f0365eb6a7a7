"""
Error handling system for VidRelay.

Every failure the service reports carries an explicit ErrorKind, which decides
the HTTP status code. Clients only ever see ``{"success": false, "error": message}``.
"""

import logging
from typing import Dict, Any, Optional
from enum import Enum


logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Failure categories and the status codes they map to."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AUTH = "auth"
    TIMEOUT = "timeout"
    UNCLASSIFIED = "unclassified"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTH: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.UNCLASSIFIED: 500,
}


class VidRelayException(Exception):
    """
    Base exception class for all VidRelay errors.

    The message is what the client sees, so it must never contain
    tracebacks or internal details.
    """

    def __init__(
        self,
        message: str,
        error_kind: ErrorKind = ErrorKind.UNCLASSIFIED,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize VidRelay exception.

        Args:
            message: Human-readable error message
            error_kind: Failure category, determines the status code
            details: Additional context for server-side logging only
        """
        super().__init__(message)
        self.message = message
        self.error_kind = error_kind
        self.details = details or {}

    @property
    def status_code(self) -> int:
        return self.error_kind.status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "success": False,
            "error": self.message,
        }


class ValidationError(VidRelayException):
    """Raised when a request parameter is missing or malformed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_kind=ErrorKind.VALIDATION, **kwargs)


class UnsupportedPlatformError(ValidationError):
    """Raised when a URL does not belong to a supported platform."""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        super().__init__(message=message, **kwargs)
        if url:
            self.details["url"] = url


class NotFoundError(VidRelayException):
    """Raised when upstream content is missing or no download URL resolves."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_kind=ErrorKind.NOT_FOUND, **kwargs)


class AuthError(VidRelayException):
    """Raised when the shared-secret key does not match."""

    def __init__(self, message: str = "Invalid API key.", **kwargs):
        super().__init__(message=message, error_kind=ErrorKind.AUTH, **kwargs)


class UpstreamTimeoutError(VidRelayException):
    """Raised when an upstream service exceeds its deadline."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_kind=ErrorKind.TIMEOUT, **kwargs)


class UnclassifiedError(VidRelayException):
    """Raised for upstream failures that fit no other category."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_kind=ErrorKind.UNCLASSIFIED, **kwargs)


def classify_error_message(error_msg: str) -> ErrorKind:
    """
    Pick an ErrorKind for a foreign exception from its message.

    Only used for exceptions that did not originate in VidRelay code;
    VidRelay exceptions always carry their own kind.

    Args:
        error_msg: Error message text

    Returns:
        Matching ErrorKind
    """
    if "not found" in error_msg or "unavailable" in error_msg:
        return ErrorKind.NOT_FOUND

    if "Invalid" in error_msg or "Unsupported" in error_msg:
        return ErrorKind.VALIDATION

    if "timeout" in error_msg:
        return ErrorKind.TIMEOUT

    return ErrorKind.UNCLASSIFIED


def exception_for_kind(message: str, error_kind: ErrorKind, **kwargs) -> VidRelayException:
    """Build the VidRelay exception subclass that matches an ErrorKind."""
    exception_classes = {
        ErrorKind.VALIDATION: ValidationError,
        ErrorKind.NOT_FOUND: NotFoundError,
        ErrorKind.AUTH: AuthError,
        ErrorKind.TIMEOUT: UpstreamTimeoutError,
        ErrorKind.UNCLASSIFIED: UnclassifiedError,
    }
    return exception_classes[error_kind](message=message, **kwargs)
