"""
Single-page app fallback for VidRelay.

Any GET that no API route handles is answered from the frontend build
directory: the requested file when it exists, otherwise ``index.html`` so the
client-side router can take over.
"""

import logging
from pathlib import Path
from fastapi import APIRouter
from fastapi.responses import FileResponse

from vidrelay.core.config import settings
from vidrelay.core.exceptions import NotFoundError


logger = logging.getLogger(__name__)

router = APIRouter(tags=["frontend"])

INDEX_FILE = "index.html"


def resolve_static_file(static_dir: Path, requested_path: str) -> Path:
    """
    Map a request path to a file in the frontend build.

    Args:
        static_dir: Frontend build directory
        requested_path: URL path without the leading slash

    Returns:
        Path of the file to serve

    Raises:
        NotFoundError: If neither the file nor index.html exists
    """
    root = static_dir.resolve()

    if requested_path:
        candidate = (root / requested_path).resolve()
        # Security: never serve anything outside the build directory
        if candidate.is_relative_to(root) and candidate.is_file():
            return candidate
        if not candidate.is_relative_to(root):
            logger.warning(f"Suspicious static path access attempt: {requested_path}")

    index = root / INDEX_FILE
    if index.is_file():
        return index

    raise NotFoundError("Not Found")


@router.get("/{full_path:path}", include_in_schema=False)
async def serve_frontend(full_path: str) -> FileResponse:
    """Serve a frontend asset or the SPA entry document."""
    if full_path == "api" or full_path.startswith("api/"):
        raise NotFoundError("Not Found")

    return FileResponse(resolve_static_file(Path(settings.static_dir), full_path))
