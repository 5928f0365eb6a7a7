"""
Outbound HTTP client factory.

Every upstream call gets its own short-lived client so no connection state
is shared between requests. Tests replace ``create_client`` to inject a
mock transport.
"""

from typing import Dict, Optional

import httpx


BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


def create_client(timeout: float, headers: Optional[Dict[str, str]] = None) -> httpx.AsyncClient:
    """
    Create an async HTTP client for a single upstream call.

    Args:
        timeout: Deadline in seconds applied to connect, read and write
        headers: Default headers sent with every request

    Returns:
        Unopened httpx.AsyncClient, to be used as an async context manager
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        headers=headers,
        follow_redirects=True
    )
