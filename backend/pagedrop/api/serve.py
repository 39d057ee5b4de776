"""Serving of hosted site files."""
import mimetypes
from pathlib import Path
from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse, PlainTextResponse, Response
from sqlalchemy.orm import Session

from pagedrop.api.deps import get_store
from pagedrop.database import get_db
from pagedrop.services import registry
from pagedrop.services.store import SiteStore
from pagedrop.utils.exceptions import ValidationError
from pagedrop.utils.logger import logger
from pagedrop.utils.paths import is_site_id

router = APIRouter(prefix="/site", tags=["serve"])


def _not_found(message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status.HTTP_404_NOT_FOUND)


def _send_file(path: Path) -> FileResponse:
    """Stream a file with a content type inferred from its extension."""
    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return FileResponse(path, media_type=media_type)


@router.get("/{site_id}")
async def serve_site(
    site_id: str,
    db: Session = Depends(get_db),
    store: SiteStore = Depends(get_store),
) -> Response:
    """
    Serve a site's root document.

    last_accessed is only bumped once the site directory is known to exist.
    """
    try:
        if not is_site_id(site_id) or not store.exists(site_id):
            return _not_found("Site not found")

        registry.touch_site(db, site_id)

        path = store.resolve_root(site_id)
        if path is None:
            return _not_found("No files found in site")
        return _send_file(path)
    except Exception as e:
        logger.error(f"Serve site error for {site_id}: {e}", exc_info=True)
        return PlainTextResponse("Error serving site", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/{site_id}/{filename}")
async def serve_site_file(
    site_id: str,
    filename: str,
    db: Session = Depends(get_db),
    store: SiteStore = Depends(get_store),
) -> Response:
    """Serve a named file from a site. A missing file still counts as an access."""
    try:
        if not is_site_id(site_id) or not store.exists(site_id):
            return _not_found("Site not found")

        registry.touch_site(db, site_id)

        try:
            path = store.resolve_file(site_id, filename)
        except ValidationError:
            logger.warning(f"Rejected file name {filename!r} for site {site_id}")
            path = None
        if path is None:
            return _not_found("File not found")
        return _send_file(path)
    except Exception as e:
        logger.error(f"Serve file error for {site_id}/{filename}: {e}", exc_info=True)
        return PlainTextResponse("Error serving file", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
