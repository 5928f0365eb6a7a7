"""
Data models package for VidRelay.

This package contains Pydantic models for video metadata and API responses.
"""

from .video import DownloadOption, VideoMetadata, MetadataResponse, HealthResponse, ErrorResponse

__all__ = [
    'DownloadOption',
    'VideoMetadata',
    'MetadataResponse',
    'HealthResponse',
    'ErrorResponse',
]
