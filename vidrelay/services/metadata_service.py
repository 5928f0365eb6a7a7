"""
Video metadata providers for VidRelay.

YouTube and Facebook metadata come from the noembed oEmbed proxy and carry a
fixed set of descriptive download options; the actual downloads for those
platforms are handed off to external loader sites. TikTok metadata comes from
the tikwm resolver and carries direct playback URLs that the download
endpoint streams through.
"""

import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from vidrelay.core.config import settings as default_settings
from vidrelay.core.exceptions import (
    ValidationError, UnclassifiedError, UnsupportedPlatformError,
    classify_error_message, exception_for_kind
)
from vidrelay.core.upstream import upstream_errors
from vidrelay.models.video import DownloadOption, VideoMetadata
from vidrelay.services import http_client
from vidrelay.services.formatting import UNKNOWN_DURATION, format_duration
from vidrelay.services.platform_detector import Platform, extract_youtube_id


logger = logging.getLogger(__name__)

YOUTUBE_THUMBNAIL_TEMPLATE = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

FETCH_CONTEXT = "Could not fetch video information"

YOUTUBE_OPTIONS = (
    {"id": "best", "label": "Best Quality (External)", "ext": "mp4", "quality": "1080p"},
    {"id": "720p", "label": "HD 720p (External)", "ext": "mp4", "quality": "720p"},
    {"id": "480p", "label": "SD 480p (External)", "ext": "mp4", "quality": "480p"},
    {"id": "audio", "label": "Audio Only (External)", "ext": "mp3", "quality": "audio"},
)

FACEBOOK_OPTIONS = (
    {"id": "best", "label": "Best Quality (External)", "ext": "mp4", "quality": "best"},
    {"id": "sd", "label": "Standard Quality (External)", "ext": "mp4", "quality": "480p"},
    {"id": "audio", "label": "Audio Only (External)", "ext": "mp3", "quality": "audio"},
)

TIKTOK_NO_WATERMARK = "nowm"
TIKTOK_WATERMARK = "wm"


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def _build_options(templates) -> List[DownloadOption]:
    return [DownloadOption(**template) for template in templates]


class MetadataService:
    """
    Fetches and normalizes video metadata from the upstream services.

    Each provider method is wrapped by ``upstream_errors`` so any failure
    surfaces as a single platform-prefixed VidRelayException.
    """

    def __init__(self, settings=None):
        """Initialize the service with application settings."""
        self.settings = settings or default_settings

    async def get_metadata(self, platform: Platform, url: str) -> VideoMetadata:
        """
        Fetch metadata for a URL of an already-detected platform.

        Args:
            platform: Detected platform
            url: Video URL (YouTube URLs are expected to be cleaned already)

        Returns:
            VideoMetadata for the video
        """
        if platform == Platform.YOUTUBE:
            return await self.get_youtube_metadata(url)
        if platform == Platform.TIKTOK:
            return await self.get_tiktok_metadata(url)
        if platform == Platform.FACEBOOK:
            return await self.get_facebook_metadata(url)

        raise UnsupportedPlatformError(f"Unsupported platform: {platform}", url=url)

    async def get_youtube_metadata(self, url: str) -> VideoMetadata:
        """
        Fetch YouTube metadata from noembed.

        Args:
            url: Cleaned ``https://www.youtube.com/watch?v=<id>`` URL

        Returns:
            VideoMetadata with four descriptive options and no resolved URLs
        """
        video_id = extract_youtube_id(url)
        if not video_id:
            raise ValidationError(
                "YouTube: Invalid video URL or ID could not be extracted.",
                details={"url": url}
            )

        return await self._fetch_youtube_metadata(url, video_id)

    @upstream_errors(Platform.YOUTUBE.value, FETCH_CONTEXT)
    async def _fetch_youtube_metadata(self, url: str, video_id: str) -> VideoMetadata:
        data = await self._fetch_noembed(url)

        return VideoMetadata(
            id=video_id,
            title=data.get("title") or "YouTube Video",
            uploader=data.get("author_name") or "YouTube",
            duration=UNKNOWN_DURATION,  # noembed has no duration
            thumbnail=YOUTUBE_THUMBNAIL_TEMPLATE.format(video_id=video_id),
            description=data.get("title") or "",
            view_count=None,
            upload_date=None,
            options=_build_options(YOUTUBE_OPTIONS),
            platform=Platform.YOUTUBE.value,
        )

    @upstream_errors(Platform.TIKTOK.value)
    async def get_tiktok_metadata(self, url: str) -> VideoMetadata:
        """
        Resolve a TikTok URL through tikwm.

        Args:
            url: TikTok video URL (any tiktok.com host, including vm. short links)

        Returns:
            VideoMetadata whose options carry direct playback URLs
        """
        headers = {
            "User-Agent": http_client.BROWSER_USER_AGENT,
            "Content-Type": "application/json",
        }

        async with http_client.create_client(self.settings.tiktok_timeout, headers) as client:
            response = await client.post(self.settings.tiktok_api_url, json={"url": url})
            response.raise_for_status()
            payload = response.json()

        if not isinstance(payload, dict):
            raise UnclassifiedError("Malformed response from TikTok resolver.")

        data = payload.get("data")
        if payload.get("code") != 0 or not data:
            message = f"TikTok API Error: {payload.get('msg') or 'Video not found or unavailable.'}"
            raise exception_for_kind(message, classify_error_message(message))

        options = []
        if data.get("play"):
            options.append(DownloadOption(
                id=TIKTOK_NO_WATERMARK,
                label="HD (No Watermark)",
                ext="mp4",
                quality="best",
                url=data["play"],
            ))
        if data.get("wmplay"):
            options.append(DownloadOption(
                id=TIKTOK_WATERMARK,
                label="Standard (With Watermark)",
                ext="mp4",
                quality="standard",
                url=data["wmplay"],
            ))

        if not options:
            raise UnclassifiedError("No video formats available for this TikTok.")

        author = data.get("author") or {}
        images = data.get("images") or []

        return VideoMetadata(
            id=str(data.get("id") or f"tiktok-{_timestamp_ms()}"),
            title=data.get("title") or "TikTok Video",
            uploader=author.get("nickname") or author.get("unique_id") or "TikTok User",
            duration=format_duration(data.get("duration")),
            thumbnail=data.get("cover") or (images[0] if images else None),
            description=data.get("title") or "",
            view_count=data.get("play_count"),
            options=options,
            platform=Platform.TIKTOK.value,
        )

    @upstream_errors(Platform.FACEBOOK.value, FETCH_CONTEXT)
    async def get_facebook_metadata(self, url: str) -> VideoMetadata:
        """
        Fetch Facebook metadata from noembed.

        Args:
            url: Facebook video URL as submitted

        Returns:
            VideoMetadata with three descriptive options and no resolved URLs
        """
        data = await self._fetch_noembed(url)

        video_id = urlparse(url).path.split("/")[-1] or f"fb-{_timestamp_ms()}"

        return VideoMetadata(
            id=video_id,
            title=data.get("title") or "Facebook Video",
            uploader=data.get("author_name") or "Facebook",
            duration=UNKNOWN_DURATION,
            thumbnail=data.get("thumbnail_url"),
            description=data.get("title") or "",
            view_count=None,
            options=_build_options(FACEBOOK_OPTIONS),
            platform=Platform.FACEBOOK.value,
        )

    async def _fetch_noembed(self, url: str) -> Dict[str, Any]:
        """Look a URL up on noembed; an ``error`` field in the reply fails the call."""
        async with http_client.create_client(self.settings.metadata_timeout) as client:
            response = await client.get(self.settings.noembed_api_url, params={"url": url})
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict):
            raise UnclassifiedError("Malformed response from metadata service.")

        error: Optional[str] = data.get("error")
        if error:
            raise exception_for_kind(str(error), classify_error_message(str(error)))

        return data


# Global service instance
metadata_service = MetadataService()
