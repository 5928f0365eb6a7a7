"""
Download API endpoint for VidRelay.

GET /api/download redirects YouTube and Facebook requests to external loader
sites and streams TikTok videos through the service.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, RedirectResponse, StreamingResponse

from vidrelay.api.dependencies import verify_download_key
from vidrelay.core.exceptions import (
    ErrorKind, ValidationError, UnsupportedPlatformError, VidRelayException
)
from vidrelay.models.video import ErrorResponse
from vidrelay.middleware.error_handler import INTERNAL_ERROR_MESSAGE
from vidrelay.services.download_service import DownloadService, download_service
from vidrelay.services.platform_detector import Platform, extract_platform, is_valid_url


# Configure logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(prefix="/api", tags=["downloads"])


def get_download_service() -> DownloadService:
    """Dependency to get the DownloadService instance."""
    return download_service


def download_failed(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": f"Download failed: {message}"}
    )


@router.get(
    "/download",
    responses={
        200: {"description": "TikTok video streamed as an attachment"},
        302: {"description": "Redirect to an external loader (YouTube, Facebook)"},
        400: {"model": ErrorResponse, "description": "Missing, invalid or unsupported URL"},
        401: {"model": ErrorResponse, "description": "Invalid API key"},
        404: {"model": ErrorResponse, "description": "No downloadable URL"},
        500: {"model": ErrorResponse, "description": "Upstream failure"}
    },
    summary="Download video",
    description="Redirect to an external loader or stream the TikTok video directly."
)
async def download_video(
    url: Optional[str] = Query(None, description="Video URL (YouTube, TikTok or Facebook)"),
    requested_format: Optional[str] = Query(None, alias="format", description="Download option id from the metadata response"),
    _: bool = Depends(verify_download_key),
    service: DownloadService = Depends(get_download_service)
):
    """
    Start a download for a video URL.

    This endpoint:
    - Checks the shared-secret key when one is configured
    - Validates the URL and detects its platform
    - Redirects YouTube and Facebook downloads (302)
    - Streams TikTok downloads with an attachment filename
    """
    url = (url or "").strip()

    if not url or not is_valid_url(url):
        raise ValidationError("Invalid or missing URL parameter.", details={"url": url})

    platform = extract_platform(url)
    if platform is None:
        raise UnsupportedPlatformError("Unsupported platform for download.", url=url)

    logger.info(f"Download request: Platform={platform}, URL={url}, Format={requested_format}")

    try:
        if platform in (Platform.YOUTUBE, Platform.FACEBOOK):
            return RedirectResponse(url=service.build_redirect_url(platform, url), status_code=302)

        prepared = await service.prepare_tiktok_download(url, requested_format)

    except VidRelayException as e:
        logger.error(
            f"Download endpoint error for {url} ({platform}): {e.message}",
            extra={"url": url, "platform": str(platform), "error_kind": e.error_kind.value}
        )
        return download_failed(e.message, e.status_code)

    except Exception:
        logger.exception(f"Unexpected download error for {url} ({platform})")
        return download_failed(INTERNAL_ERROR_MESSAGE, ErrorKind.UNCLASSIFIED.status_code)

    return StreamingResponse(
        prepared.stream.iter_bytes(),
        media_type=prepared.content_type,
        headers=prepared.headers
    )
