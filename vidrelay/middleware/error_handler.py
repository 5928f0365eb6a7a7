"""
Error handling middleware for VidRelay.

This module guarantees that every failed request gets a JSON response of the
form ``{"success": false, "error": message}`` and that every failure is
logged with request context.
"""

import time
import logging
import traceback
from typing import Optional
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from vidrelay.core.exceptions import VidRelayException


logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def render_vidrelay_exception(
    request: Request,
    exc: VidRelayException,
    start_time: Optional[float] = None
) -> JSONResponse:
    """
    Log a VidRelay exception with request context and render its JSON body.

    Args:
        request: FastAPI request object
        exc: The exception to render
        start_time: Request start time, for the logged response time

    Returns:
        JSONResponse with the exception's status code
    """
    log_data = {
        "error_kind": exc.error_kind.value,
        "error_message": exc.message,
        "path": request.url.path,
        "method": request.method,
        **{f"detail_{key}": value for key, value in exc.details.items()},
    }
    if start_time is not None:
        log_data["response_time_ms"] = round((time.time() - start_time) * 1000, 2)

    if exc.status_code >= 500:
        logger.error(f"VidRelay error: {exc.message}", extra=log_data)
    else:
        logger.warning(f"VidRelay error: {exc.message}", extra=log_data)

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def vidrelay_exception_handler(request: Request, exc: VidRelayException) -> JSONResponse:
    """FastAPI exception handler for VidRelay exceptions."""
    return render_vidrelay_exception(request, exc)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Catch-all middleware: any exception that escapes the routes still gets
    a JSON response.

    Exceptions raised after a streaming response has started never reach
    this middleware; the server aborts the connection instead.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        """
        Process request and handle any errors that occur.

        Args:
            request: FastAPI request object
            call_next: Next middleware/endpoint in the chain

        Returns:
            Response object with error handling applied
        """
        start_time = time.time()

        try:
            return await call_next(request)

        except VidRelayException as e:
            return render_vidrelay_exception(request, e, start_time)

        except Exception as e:
            return self._handle_unexpected_exception(request, e, start_time)

    def _handle_unexpected_exception(
        self,
        request: Request,
        exc: Exception,
        start_time: float
    ) -> JSONResponse:
        """Handle unexpected exceptions without exposing their details."""
        response_time = (time.time() - start_time) * 1000

        logger.error(
            f"Unexpected error: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "response_time_ms": round(response_time, 2),
                "traceback": traceback.format_exc()
            }
        )

        return JSONResponse(
            status_code=500,
            content={"success": False, "error": INTERNAL_ERROR_MESSAGE}
        )
