"""
Metadata API endpoint for VidRelay.

This module provides GET /api/metadata, which validates a video URL, detects
its platform and returns normalized metadata with download options.
"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from vidrelay.core.exceptions import ValidationError, UnsupportedPlatformError, VidRelayException
from vidrelay.models.video import ErrorResponse, MetadataResponse
from vidrelay.services.metadata_service import MetadataService, metadata_service
from vidrelay.services.platform_detector import (
    Platform, clean_youtube_url, extract_platform, get_supported_platforms, is_valid_url
)


# Configure logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(prefix="/api", tags=["metadata"])


def get_metadata_service() -> MetadataService:
    """Dependency to get the MetadataService instance."""
    return metadata_service


def require_supported_url(raw_url: Optional[str]) -> str:
    """
    Validate the ``url`` query parameter for the metadata endpoint.

    Returns:
        The trimmed URL

    Raises:
        ValidationError: If the URL is missing or not an http(s) URL
        UnsupportedPlatformError: If the host is not a supported platform
    """
    url = (raw_url or "").strip()

    if not url:
        raise ValidationError("URL parameter is required.")

    if not is_valid_url(url):
        raise ValidationError(
            "Invalid URL format. Must include http:// or https://",
            details={"url": url}
        )

    if extract_platform(url) is None:
        supported = ", ".join(get_supported_platforms())
        raise UnsupportedPlatformError(f"Unsupported platform. Supported: {supported}", url=url)

    return url


@router.get(
    "/metadata",
    response_model=MetadataResponse,
    responses={
        200: {"description": "Metadata extracted successfully"},
        400: {"model": ErrorResponse, "description": "Missing, invalid or unsupported URL"},
        404: {"model": ErrorResponse, "description": "Video not found"},
        500: {"model": ErrorResponse, "description": "Upstream failure"},
        504: {"model": ErrorResponse, "description": "Upstream timeout"}
    },
    summary="Get video metadata",
    description="Detect the platform of a video URL and return its metadata and download options."
)
async def get_metadata(
    url: Optional[str] = Query(None, description="Video URL (YouTube, TikTok or Facebook)"),
    service: MetadataService = Depends(get_metadata_service)
) -> JSONResponse:
    """
    Fetch metadata for a video URL.

    This endpoint:
    - Validates presence and format of the URL
    - Detects the platform from the hostname
    - Rewrites YouTube URLs to the standard watch form
    - Calls the matching metadata provider
    """
    start_time = time.time()
    url = require_supported_url(url)
    platform = extract_platform(url)

    if platform == Platform.YOUTUBE:
        url = clean_youtube_url(url)

    try:
        metadata = await service.get_metadata(platform, url)

    except VidRelayException as e:
        logger.warning(
            f"Metadata error for URL: {url} ({platform}): {e.message}",
            extra={"url": url, "platform": str(platform), "error_kind": e.error_kind.value}
        )
        return JSONResponse(status_code=e.status_code, content=e.to_dict())

    response_time = (time.time() - start_time) * 1000
    logger.info(f"Metadata fetched for {url} ({platform}), response time: {response_time:.2f}ms")

    response = MetadataResponse(success=True, data=metadata.to_response())
    return JSONResponse(status_code=200, content=response.model_dump())
