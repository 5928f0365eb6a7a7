"""
Error wrapping for calls to upstream services.

Providers are decorated once with ``upstream_errors``; whatever escapes them
(network failures, timeouts, malformed payloads, explicit VidRelay errors)
is rewrapped into a single VidRelayException whose message is prefixed with
the platform name and whose kind is already decided.
"""

import logging
from functools import wraps
from typing import Callable, Optional, Tuple

import httpx

from vidrelay.core.exceptions import (
    ErrorKind, VidRelayException, classify_error_message, exception_for_kind
)


logger = logging.getLogger(__name__)

MALFORMED_UPSTREAM_REASON = "Malformed response from upstream service."


def describe_upstream_error(exc: Exception) -> Tuple[str, ErrorKind]:
    """
    Turn any exception raised while talking to an upstream service into a
    client-safe reason and an ErrorKind.

    Args:
        exc: The exception to describe

    Returns:
        Tuple of (reason, error kind)
    """
    if isinstance(exc, VidRelayException):
        return exc.message, exc.error_kind

    if isinstance(exc, httpx.TimeoutException):
        return "Upstream request timeout", ErrorKind.TIMEOUT

    if isinstance(exc, httpx.HTTPStatusError):
        reason = None
        try:
            payload = exc.response.json()
            if isinstance(payload, dict):
                reason = payload.get("error")
        except (ValueError, httpx.ResponseNotRead):
            pass
        reason = reason or f"Request failed with status code {exc.response.status_code}"
        return reason, classify_error_message(reason)

    if isinstance(exc, httpx.HTTPError):
        reason = str(exc) or exc.__class__.__name__
        return reason, classify_error_message(reason)

    # Anything else is a payload we could not interpret; its text stays in the logs.
    return MALFORMED_UPSTREAM_REASON, ErrorKind.UNCLASSIFIED


def upstream_errors(platform: str, context: Optional[str] = None):
    """
    Decorator for async provider calls that tags every failure with its platform.

    The resulting message is ``"<platform>: <reason>"``, or
    ``"<platform>: <context>. Reason: <reason>"`` when a context is given.

    Args:
        platform: Platform display name used as the message prefix
        context: Optional description of the operation that failed
    """
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                reason, error_kind = describe_upstream_error(e)
                if context:
                    message = f"{platform}: {context}. Reason: {reason}"
                else:
                    message = f"{platform}: {reason}"

                logger.error(
                    f"{platform} upstream error: {reason} ({type(e).__name__}: {e})",
                    extra={
                        "platform": platform,
                        "error_kind": error_kind.value,
                        "exception_type": type(e).__name__,
                    }
                )

                raise exception_for_kind(
                    message, error_kind, details={"platform": platform}
                ) from e

        return wrapper
    return decorator
