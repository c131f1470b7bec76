"""Static client bundle with single-page-app fallback to index.html."""

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from genius.core.config import Settings, get_settings

router = APIRouter()

INDEX_FILE = "index.html"

# Every method except OPTIONS, which is answered before routing.
FALLBACK_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


def resolve_static_path(static_dir: str | Path, rel_path: str) -> Path | None:
    """
    Map a request path to a file inside static_dir.

    Returns None when the path does not name an existing file, would resolve
    outside the static directory, or is not a valid filesystem path at all.
    """
    try:
        base = Path(static_dir).resolve()
        target = (base / rel_path).resolve()
        target.relative_to(base)
        if not target.is_file():
            return None
    except (ValueError, OSError):
        return None
    return target


@router.api_route("/{full_path:path}", methods=FALLBACK_METHODS, include_in_schema=False)
def serve_client(
    full_path: str,
    settings: Annotated[Settings, Depends(get_settings)],
) -> FileResponse:
    """Serve a bundle file if it exists, otherwise index.html for client-side routing."""
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    if full_path:
        target = resolve_static_path(settings.STATIC_DIR, full_path)
        if target is not None:
            return FileResponse(target)
    index = resolve_static_path(settings.STATIC_DIR, INDEX_FILE)
    if index is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client bundle not found")
    return FileResponse(index)
