"""
Download dispatch for VidRelay.

YouTube and Facebook downloads are redirects to external loader sites; the
service never touches their bytes. TikTok downloads are resolved to a direct
playback URL and streamed through to the client.
"""

import logging
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional
from urllib.parse import quote

import httpx

from vidrelay.core.config import settings as default_settings
from vidrelay.core.exceptions import NotFoundError, UnsupportedPlatformError
from vidrelay.core.upstream import upstream_errors
from vidrelay.models.video import DownloadOption, VideoMetadata
from vidrelay.services import http_client
from vidrelay.services.formatting import build_attachment_filename
from vidrelay.services.metadata_service import (
    MetadataService, metadata_service as default_metadata_service, TIKTOK_NO_WATERMARK
)
from vidrelay.services.platform_detector import Platform, clean_youtube_url


logger = logging.getLogger(__name__)

TIKTOK_REFERER = "https://www.tiktok.com/"

STREAM_CHUNK_SIZE = 64 * 1024

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode a value the way JavaScript's encodeURIComponent does."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def select_download_option(
    options: List[DownloadOption],
    requested_format: Optional[str] = None
) -> Optional[DownloadOption]:
    """
    Pick the option to download.

    Preference order: the option whose id equals ``requested_format``, then
    the no-watermark option, then the first option.
    """
    if requested_format:
        for option in options:
            if option.id == requested_format:
                return option

    for option in options:
        if option.id == TIKTOK_NO_WATERMARK:
            return option

    return options[0] if options else None


def content_type_for(option: DownloadOption) -> str:
    """Audio-only options are served as MP3, everything else as MP4."""
    return "audio/mpeg" if option.has_audio is False else "video/mp4"


class VideoStream:
    """
    An open upstream media response, consumed once via ``iter_bytes``.

    The client and response are closed when iteration ends, fails, or is
    abandoned because the downstream client disconnected.
    """

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response, source_url: str):
        self.client = client
        self.response = response
        self.source_url = source_url
        self.bytes_sent = 0

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.response.aiter_bytes(STREAM_CHUNK_SIZE):
                self.bytes_sent += len(chunk)
                yield chunk
        except httpx.HTTPError as e:
            # Headers are already sent; the connection must abort rather than end cleanly.
            logger.error(
                f"Upstream stream interrupted after {self.bytes_sent} bytes: {e}",
                extra={"source_url": self.source_url, "bytes_sent": self.bytes_sent}
            )
            raise
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self.response.aclose()
        await self.client.aclose()


@dataclass
class PreparedDownload:
    """A TikTok download ready to be streamed."""

    metadata: VideoMetadata
    option: DownloadOption
    stream: VideoStream

    @property
    def filename(self) -> str:
        return build_attachment_filename(self.metadata.title, self.option.ext)

    @property
    def content_type(self) -> str:
        return content_type_for(self.option)

    @property
    def headers(self) -> dict:
        return {"Content-Disposition": f'attachment; filename="{self.filename}"'}


class DownloadService:
    """Builds loader redirects and prepares proxied TikTok streams."""

    def __init__(self, settings=None, metadata_service: Optional[MetadataService] = None):
        """Initialize the service with settings and a metadata provider."""
        self.settings = settings or default_settings
        self.metadata_service = metadata_service or default_metadata_service

    def build_redirect_url(self, platform: Platform, url: str) -> str:
        """
        Build the external loader URL for a redirect-only platform.

        Args:
            platform: YouTube or Facebook
            url: Original video URL (YouTube URLs are cleaned here)

        Returns:
            Absolute URL of the external loader
        """
        if platform == Platform.YOUTUBE:
            target = encode_uri_component(clean_youtube_url(url))
            return f"{self.settings.youtube_loader_url}?url={target}&format=mp4"

        if platform == Platform.FACEBOOK:
            return f"{self.settings.facebook_loader_url}?url={encode_uri_component(url)}"

        raise UnsupportedPlatformError("Unsupported platform for download.", url=url)

    async def prepare_tiktok_download(self, url: str, requested_format: Optional[str] = None) -> PreparedDownload:
        """
        Resolve fresh TikTok metadata, choose an option and open its stream.

        Args:
            url: TikTok video URL
            requested_format: Option id requested by the client, if any

        Returns:
            PreparedDownload whose stream has not been read yet

        Raises:
            NotFoundError: If no option carries a playable URL
        """
        metadata = await self.metadata_service.get_tiktok_metadata(url)

        option = select_download_option(metadata.options, requested_format)
        if option is None or not option.url:
            raise NotFoundError(
                "No valid download URL found for the selected format.",
                details={"url": url, "format": requested_format}
            )

        logger.info(f"Streaming TikTok option '{option.id}' for {url}")

        stream = await self.open_stream(option.url)
        return PreparedDownload(metadata=metadata, option=option, stream=stream)

    @upstream_errors(Platform.TIKTOK.value)
    async def open_stream(self, media_url: str) -> VideoStream:
        """
        Start a streaming GET against a media URL.

        The response status is checked before any byte is forwarded, so
        failures here can still be reported as JSON.
        """
        headers = {
            "User-Agent": http_client.BROWSER_USER_AGENT,
            "Referer": TIKTOK_REFERER,
        }
        client = http_client.create_client(self.settings.stream_timeout, headers)
        try:
            request = client.build_request("GET", media_url)
            response = await client.send(request, stream=True)
        except Exception:
            await client.aclose()
            raise

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError:
            await response.aclose()
            await client.aclose()
            raise

        return VideoStream(client, response, media_url)


# Global service instance
download_service = DownloadService()
