"""
Health check endpoint for VidRelay.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from vidrelay.core.config import settings
from vidrelay.models.video import HealthResponse
from vidrelay.services.platform_detector import Platform


router = APIRouter(prefix="/api", tags=["health"])

PLATFORM_CAPABILITIES = {
    Platform.YOUTUBE.value: "Download: External Redirect; Metadata: Noembed",
    Platform.TIKTOK.value: "Download: Direct Proxy; Metadata: tikwm.com",
    Platform.FACEBOOK.value: "Download: External Redirect; Metadata: Noembed",
}


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Static capability summary. Makes no upstream calls."
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        success=True,
        message="Service is healthy",
        timestamp=_utc_timestamp(),
        environment=settings.environment,
        platforms=dict(PLATFORM_CAPABILITIES),
    )
