"""
Pytest configuration and fixtures for the VidRelay test suite.

Upstream services are never contacted: the ``upstream`` fixture swaps the
outbound client factory for one backed by ``httpx.MockTransport``.
"""

import pytest
import httpx
from unittest.mock import patch
from fastapi.testclient import TestClient

from vidrelay.main import app
from vidrelay.core.config import settings


class UpstreamStub:
    """Records outbound requests and answers them with a test-supplied handler."""

    def __init__(self):
        self.handler = None
        self.requests = []
        self.clients = []

    def respond_with(self, handler):
        """Set the callable that maps an httpx.Request to an httpx.Response (or raises)."""
        self.handler = handler

    def create_client(self, timeout, headers=None):
        self.clients.append({"timeout": timeout, "headers": dict(headers or {})})
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self._dispatch),
            timeout=timeout,
            headers=headers
        )

    def _dispatch(self, request):
        self.requests.append(request)
        if self.handler is None:
            raise AssertionError(f"Unexpected upstream request: {request.method} {request.url}")
        return self.handler(request)


@pytest.fixture
def upstream():
    """Replace outbound HTTP with a recording stub."""
    stub = UpstreamStub()
    with patch("vidrelay.services.http_client.create_client", side_effect=stub.create_client):
        yield stub


@pytest.fixture
def client():
    """Test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def api_key():
    """Configure a shared secret for the download endpoint."""
    with patch.object(settings, "api_key", "s3cret"):
        yield "s3cret"


@pytest.fixture
def no_api_key():
    """Make sure no shared secret is configured."""
    with patch.object(settings, "api_key", ""):
        yield


@pytest.fixture
def noembed_payload():
    """Typical noembed reply for a YouTube video."""
    return {
        "title": "Never Gonna Give You Up",
        "author_name": "Rick Astley",
        "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        "provider_name": "YouTube",
        "type": "video",
    }


@pytest.fixture
def tiktok_payload():
    """Typical tikwm reply with both playback links."""
    return {
        "code": 0,
        "msg": "success",
        "data": {
            "id": "7234567890123456789",
            "title": "My Dance Clip!",
            "duration": 65,
            "cover": "https://p16-sign.tiktokcdn.com/cover.jpeg",
            "play": "https://v16m.tiktokcdn.com/nowm.mp4",
            "wmplay": "https://v16m.tiktokcdn.com/wm.mp4",
            "play_count": 12345,
            "author": {"unique_id": "dancer", "nickname": "The Dancer"},
        },
    }


@pytest.fixture
def test_urls():
    """Provide test URLs for the supported platforms."""
    return {
        'youtube': [
            'https://www.youtube.com/watch?v=dQw4w9WgXcQ',
            'https://youtu.be/dQw4w9WgXcQ',
            'https://youtube.com/shorts/dQw4w9WgXcQ',
        ],
        'tiktok': [
            'https://www.tiktok.com/@test/video/1234567890123456789',
            'https://vm.tiktok.com/ZMeAbCdEf',
        ],
        'facebook': [
            'https://www.facebook.com/watch/?v=1234567890123456',
            'https://fb.watch/AbCdEfGhIj',
        ],
    }
