"""
Services package for VidRelay.

This package contains platform detection, metadata providers and the
download dispatch logic.
"""

from .platform_detector import (
    Platform,
    PlatformDetector,
    PLATFORM_DOMAINS,
    is_valid_url,
    extract_platform,
    clean_youtube_url,
    extract_youtube_id,
    get_supported_platforms,
)

from .formatting import (
    format_duration,
    build_attachment_filename,
)

from .metadata_service import (
    MetadataService,
    metadata_service,
)

from .download_service import (
    DownloadService,
    PreparedDownload,
    VideoStream,
    download_service,
    select_download_option,
    content_type_for,
)

__all__ = [
    # Platform detection
    'Platform',
    'PlatformDetector',
    'PLATFORM_DOMAINS',
    'is_valid_url',
    'extract_platform',
    'clean_youtube_url',
    'extract_youtube_id',
    'get_supported_platforms',
    # Formatting
    'format_duration',
    'build_attachment_filename',
    # Metadata
    'MetadataService',
    'metadata_service',
    # Downloads
    'DownloadService',
    'PreparedDownload',
    'VideoStream',
    'download_service',
    'select_download_option',
    'content_type_for',
]
