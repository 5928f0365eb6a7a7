"""
FastAPI dependency functions.
"""

import hmac
from typing import Optional

from fastapi import Query

from vidrelay.core.config import settings
from vidrelay.core.exceptions import AuthError


def verify_download_key(
    key: Optional[str] = Query(None, description="Shared secret, required when the service sets API_KEY")
) -> bool:
    """
    Dependency to verify the shared-secret ``key`` query parameter.

    Does nothing when no API key is configured. Raises AuthError (401) on mismatch.
    """
    if not settings.api_key:
        return True
    if key is None or not hmac.compare_digest(key.encode(), settings.api_key.encode()):
        raise AuthError("Invalid API key.")
    return True
