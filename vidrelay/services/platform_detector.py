"""
Platform detection and URL processing service for VidRelay.

This module validates incoming URLs, maps them to one of the supported
platforms by hostname, and normalizes the many YouTube URL forms to a
single watch URL.
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import List, Optional
from urllib.parse import urlparse, parse_qs, urlencode


logger = logging.getLogger(__name__)


class Platform(str, Enum):
    """Supported platforms, valued by their display names."""

    YOUTUBE = "YouTube"
    TIKTOK = "TikTok"
    FACEBOOK = "Facebook"

    def __str__(self) -> str:
        return self.value


# Lookup order matters: the first platform with a matching entry wins.
PLATFORM_DOMAINS = MappingProxyType({
    Platform.YOUTUBE: ("youtube.com", "www.youtube.com", "youtu.be", "m.youtube.com"),
    Platform.TIKTOK: ("tiktok.com", "www.tiktok.com", "vm.tiktok.com"),
    Platform.FACEBOOK: ("facebook.com", "www.facebook.com", "m.facebook.com", "fb.watch"),
})

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch"


class PlatformDetector:
    """Hostname-based platform detection and YouTube URL normalization."""

    ALLOWED_SCHEMES = ("http", "https")

    @classmethod
    def is_valid_url(cls, url: str) -> bool:
        """
        Check whether a string is an absolute http(s) URL.

        Args:
            url: Candidate URL string

        Returns:
            True for absolute http/https URLs with a host, False otherwise
        """
        if not isinstance(url, str):
            return False

        if not url.lower().startswith(tuple(f"{scheme}://" for scheme in cls.ALLOWED_SCHEMES)):
            return False

        try:
            parsed = urlparse(url)
            return parsed.scheme in cls.ALLOWED_SCHEMES and bool(parsed.hostname)
        except ValueError:
            return False

    @classmethod
    def extract_platform(cls, url: str) -> Optional[Platform]:
        """
        Detect the platform from a given URL.

        Args:
            url: The video URL to analyze

        Returns:
            Platform if the hostname matches the domain table, None otherwise
        """
        try:
            hostname = (urlparse(url).hostname or "").lower()
        except (ValueError, AttributeError, TypeError):
            return None

        if not hostname:
            return None

        for platform, domains in PLATFORM_DOMAINS.items():
            if any(domain in hostname for domain in domains):
                return platform

        return None

    @classmethod
    def clean_youtube_url(cls, url: str) -> str:
        """
        Rewrite a YouTube URL (watch, short link or shorts) to the standard watch URL.

        Falls back to returning the input unchanged when no video ID can be found.

        Args:
            url: The raw YouTube URL

        Returns:
            ``https://www.youtube.com/watch?v=<id>`` or the original URL
        """
        try:
            parsed = urlparse(url)
            hostname = (parsed.hostname or "").lower()
            video_id = None

            if "youtu.be" in hostname or "/shorts/" in parsed.path:
                video_id = next(
                    (segment for segment in parsed.path.split("/") if 10 <= len(segment) <= 11),
                    None
                )

            if not video_id and "youtube.com" in hostname:
                video_id = parse_qs(parsed.query).get("v", [None])[0]

            if video_id:
                return f"{YOUTUBE_WATCH_URL}?{urlencode({'v': video_id})}"

        except (ValueError, AttributeError, TypeError) as e:
            logger.debug(f"URL cleaning failed for {url!r}: {e}")

        return url

    @classmethod
    def extract_youtube_id(cls, url: str) -> Optional[str]:
        """Read the ``v`` parameter from an already-cleaned YouTube URL."""
        try:
            return parse_qs(urlparse(url).query).get("v", [None])[0]
        except (ValueError, AttributeError, TypeError):
            return None

    @classmethod
    def get_supported_platforms(cls) -> List[str]:
        """Get list of all supported platforms."""
        return [platform.value for platform in PLATFORM_DOMAINS]


# Convenience functions
def is_valid_url(url: str) -> bool:
    """Check whether a string is an absolute http(s) URL."""
    return PlatformDetector.is_valid_url(url)


def extract_platform(url: str) -> Optional[Platform]:
    """Detect platform from URL."""
    return PlatformDetector.extract_platform(url)


def clean_youtube_url(url: str) -> str:
    """Normalize a YouTube URL to the standard watch URL."""
    return PlatformDetector.clean_youtube_url(url)


def extract_youtube_id(url: str) -> Optional[str]:
    """Extract the video ID from a cleaned YouTube URL."""
    return PlatformDetector.extract_youtube_id(url)


def get_supported_platforms() -> List[str]:
    """Get list of supported platforms."""
    return PlatformDetector.get_supported_platforms()
