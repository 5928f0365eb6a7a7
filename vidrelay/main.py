from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from vidrelay import __version__
from vidrelay.api.health import router as health_router
from vidrelay.api.metadata import router as metadata_router
from vidrelay.api.downloads import router as downloads_router
from vidrelay.api.frontend import router as frontend_router
from vidrelay.core.config import settings
from vidrelay.core.exceptions import VidRelayException
from vidrelay.middleware.error_handler import ErrorHandlingMiddleware, vidrelay_exception_handler
from vidrelay.services.platform_detector import get_supported_platforms

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="VidRelay API",
    description="Video metadata lookup and download relay for YouTube, TikTok and Facebook",
    version=__version__,
    debug=settings.debug
)

# Error handling middleware (should be first)
app.add_middleware(ErrorHandlingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(VidRelayException, vidrelay_exception_handler)

# Include API routers; the frontend fallback must come last
app.include_router(health_router)
app.include_router(metadata_router)
app.include_router(downloads_router)
app.include_router(frontend_router)


@app.on_event("startup")
async def startup_event():
    """Log the service configuration on startup."""
    logger.info(f"Server running on port {settings.port} in {settings.environment} mode")
    logger.info(f"Supported platforms: {', '.join(get_supported_platforms())}")
    logger.info(
        "API Key Required: "
        + ('Yes (pass in "key" query param)' if settings.api_key_required else "No")
    )
    logger.info(f"Health check available at http://localhost:{settings.port}/api/health")


def run():
    """Console entry point: serve the app with uvicorn."""
    import uvicorn
    uvicorn.run(
        "vidrelay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    run()
