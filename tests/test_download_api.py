"""
Integration tests for the download API endpoint.

Tests GET /api/download: key check, validation, loader redirects and the
proxied TikTok stream.
"""

import httpx
import pytest


TIKTOK_URL = "https://www.tiktok.com/@dancer/video/7234567890123456789"


class InterruptedStream(httpx.AsyncByteStream):
    """CDN body that fails after its first chunk."""

    async def __aiter__(self):
        yield b"first-chunk"
        raise httpx.ReadError("Connection reset by peer")


def tiktok_upstream(tiktok_payload, video=b"\x00\x00\x00\x18ftypmp42"):
    """Answer tikwm with the payload and the CDN with video bytes."""
    def handler(request):
        if request.url.host == "www.tikwm.com":
            return httpx.Response(200, json=tiktok_payload)
        return httpx.Response(200, content=video, headers={"Content-Type": "video/mp4"})
    return handler


class TestDownloadAuth:
    """Shared-secret key checks."""

    @pytest.mark.parametrize("params", [
        {"url": TIKTOK_URL},
        {"url": TIKTOK_URL, "key": "wrong"},
        {"url": TIKTOK_URL, "key": ""},
    ])
    def test_wrong_or_missing_key(self, client, upstream, api_key, params):
        response = client.get("/api/download", params=params, follow_redirects=False)

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid API key."}
        assert upstream.requests == []

    def test_key_checked_before_url(self, client, api_key):
        response = client.get("/api/download", follow_redirects=False)

        assert response.status_code == 401

    def test_correct_key(self, client, api_key):
        response = client.get(
            "/api/download",
            params={"url": "https://fb.watch/AbCdEfGhIj", "key": api_key},
            follow_redirects=False
        )

        assert response.status_code == 302

    def test_no_key_configured(self, client, no_api_key):
        response = client.get(
            "/api/download",
            params={"url": "https://fb.watch/AbCdEfGhIj"},
            follow_redirects=False
        )

        assert response.status_code == 302


class TestDownloadValidation:
    """URL checks."""

    @pytest.mark.parametrize("params", [{}, {"url": ""}, {"url": "not-a-url"}, {"url": "ftp://x.com/a"}])
    def test_invalid_or_missing_url(self, client, no_api_key, params):
        response = client.get("/api/download", params=params, follow_redirects=False)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid or missing URL parameter."}

    def test_unsupported_platform(self, client, no_api_key):
        response = client.get(
            "/api/download",
            params={"url": "https://vimeo.com/123456789"},
            follow_redirects=False
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Unsupported platform for download."}


class TestDownloadRedirects:
    """YouTube and Facebook downloads are handed to external loaders."""

    def test_youtube_redirect(self, client, upstream, no_api_key):
        response = client.get(
            "/api/download",
            params={"url": "https://youtube.com/shorts/dQw4w9WgXcQ", "format": "audio"},
            follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers["location"] == (
            "https://loader.to/api/download/"
            "?url=https%3A%2F%2Fwww.youtube.com%2Fwatch%3Fv%3DdQw4w9WgXcQ&format=mp4"
        )
        assert upstream.requests == []

    def test_facebook_redirect(self, client, upstream, no_api_key):
        response = client.get(
            "/api/download",
            params={"url": "https://www.facebook.com/watch/?v=1234567890123456"},
            follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers["location"] == (
            "https://getmyfb.com/process/"
            "?url=https%3A%2F%2Fwww.facebook.com%2Fwatch%2F%3Fv%3D1234567890123456"
        )
        assert upstream.requests == []


class TestTikTokDownload:
    """TikTok downloads are streamed through the service."""

    def test_streams_no_watermark_by_default(self, client, upstream, no_api_key, tiktok_payload):
        upstream.respond_with(tiktok_upstream(tiktok_payload))

        response = client.get("/api/download", params={"url": TIKTOK_URL})

        assert response.status_code == 200
        assert response.content == b"\x00\x00\x00\x18ftypmp42"
        assert response.headers["content-type"] == "video/mp4"
        assert response.headers["content-disposition"] == 'attachment; filename="my_dance_clip_.mp4"'
        assert str(upstream.requests[1].url) == "https://v16m.tiktokcdn.com/nowm.mp4"
        assert upstream.requests[1].headers["Referer"] == "https://www.tiktok.com/"

    def test_requested_format(self, client, upstream, no_api_key, tiktok_payload):
        upstream.respond_with(tiktok_upstream(tiktok_payload))

        response = client.get("/api/download", params={"url": TIKTOK_URL, "format": "wm"})

        assert response.status_code == 200
        assert str(upstream.requests[1].url) == "https://v16m.tiktokcdn.com/wm.mp4"

    def test_unknown_format_falls_back_to_no_watermark(self, client, upstream, no_api_key, tiktok_payload):
        upstream.respond_with(tiktok_upstream(tiktok_payload))

        response = client.get("/api/download", params={"url": TIKTOK_URL, "format": "1080p"})

        assert response.status_code == 200
        assert str(upstream.requests[1].url) == "https://v16m.tiktokcdn.com/nowm.mp4"

    def test_unknown_format_falls_back_to_first_option(self, client, upstream, no_api_key, tiktok_payload):
        del tiktok_payload["data"]["play"]
        upstream.respond_with(tiktok_upstream(tiktok_payload))

        response = client.get("/api/download", params={"url": TIKTOK_URL, "format": "1080p"})

        assert response.status_code == 200
        assert str(upstream.requests[1].url) == "https://v16m.tiktokcdn.com/wm.mp4"

    def test_metadata_failure(self, client, upstream, no_api_key, tiktok_payload):
        del tiktok_payload["data"]["play"]
        del tiktok_payload["data"]["wmplay"]
        upstream.respond_with(tiktok_upstream(tiktok_payload))

        response = client.get("/api/download", params={"url": TIKTOK_URL})

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Download failed: TikTok: No video formats available for this TikTok.",
        }

    def test_cdn_rejects_stream(self, client, upstream, no_api_key, tiktok_payload):
        def handler(request):
            if request.url.host == "www.tikwm.com":
                return httpx.Response(200, json=tiktok_payload)
            return httpx.Response(403, content=b"Forbidden")

        upstream.respond_with(handler)

        response = client.get("/api/download", params={"url": TIKTOK_URL})

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Download failed: TikTok: Request failed with status code 403",
        }

    def test_resolver_timeout(self, client, upstream, no_api_key):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        upstream.respond_with(handler)

        response = client.get("/api/download", params={"url": TIKTOK_URL})

        assert response.status_code == 504
        assert response.json()["error"].startswith("Download failed: TikTok: ")

    def test_interrupted_stream_is_not_a_complete_download(self, client, upstream, no_api_key, tiktok_payload):
        def handler(request):
            if request.url.host == "www.tikwm.com":
                return httpx.Response(200, json=tiktok_payload)
            return httpx.Response(200, stream=InterruptedStream())

        upstream.respond_with(handler)

        # The body cannot end cleanly once the upstream read fails
        with pytest.raises(httpx.ReadError):
            client.get("/api/download", params={"url": TIKTOK_URL})
