"""Site deployment and directory endpoints."""
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from pagedrop.api.deps import get_fetcher, get_settings, get_store
from pagedrop.config import Settings
from pagedrop.database import get_db
from pagedrop.schemas import (
    DeleteResponse,
    DeployCodeRequest,
    DeployResponse,
    DeployUrlRequest,
    SiteFile,
    SiteInfoResponse,
    SiteResponse,
)
from pagedrop.services import ingestion, registry
from pagedrop.services.fetcher import UrlFetcher
from pagedrop.services.store import SiteStore
from pagedrop.utils.exceptions import (
    AppException,
    ValidationError,
    client_error,
    not_found_error,
    server_error,
)
from pagedrop.utils.logger import logger
from pagedrop.utils.paths import is_site_id
from pagedrop.utils.url import site_file_path, site_url

router = APIRouter(prefix="/api", tags=["sites"])


@router.post("/upload", response_model=DeployResponse)
async def upload_files(
    request: Request,
    projectName: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    store: SiteStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> DeployResponse:
    """
    Publish uploaded files as a new site.

    Args:
        projectName: Optional display name
        files: Up to max_upload_files parts, stored under their original names

    Returns:
        Deploy response with the new site ID and serving URL
    """
    try:
        site = await ingestion.ingest_upload(
            db,
            store,
            projectName,
            files,
            max_files=settings.max_upload_files,
            max_bytes=settings.max_upload_bytes,
        )
    except ValidationError as e:
        logger.warning(f"Upload rejected: {e}")
        raise client_error(e)
    except Exception as e:
        logger.error(f"Upload error: {e}", exc_info=True)
        raise server_error("Upload failed")

    return DeployResponse(
        success=True,
        siteId=site.site_id,
        url=site_url(request, site.site_id),
        message="Files uploaded successfully",
    )


@router.post("/deploy-url", response_model=DeployResponse)
async def deploy_url(
    request: Request,
    body: DeployUrlRequest,
    db: Session = Depends(get_db),
    store: SiteStore = Depends(get_store),
    fetcher: UrlFetcher = Depends(get_fetcher),
) -> DeployResponse:
    """
    Fetch a URL and publish its body as a new site.

    Failures embed the underlying cause, including the upstream status text.
    """
    try:
        site = await ingestion.ingest_url(db, store, fetcher, body.url, body.projectName)
    except ValidationError as e:
        logger.warning(f"Deploy URL rejected for {body.url}: {e}")
        raise client_error(e)
    except Exception as e:
        logger.error(f"Deploy URL error for {body.url}: {e}", exc_info=True)
        raise server_error(f"Failed to deploy URL: {e}")

    return DeployResponse(
        success=True,
        siteId=site.site_id,
        url=site_url(request, site.site_id),
        message="URL deployed successfully",
    )


@router.post("/deploy-code", response_model=DeployResponse)
async def deploy_code(
    request: Request,
    body: DeployCodeRequest,
    db: Session = Depends(get_db),
    store: SiteStore = Depends(get_store),
) -> DeployResponse:
    """Publish inline code as a new single-file site."""
    try:
        site = await ingestion.ingest_code(db, store, body.code, body.projectName, body.filename)
    except ValidationError as e:
        logger.warning(f"Deploy code rejected: {e}")
        raise client_error(e)
    except Exception as e:
        logger.error(f"Deploy code error: {e}", exc_info=True)
        raise server_error("Failed to deploy code")

    return DeployResponse(
        success=True,
        siteId=site.site_id,
        url=site_url(request, site.site_id),
        message="Code deployed successfully",
    )


@router.get("/site/{site_id}/info", response_model=SiteInfoResponse)
async def get_site_info(
    request: Request,
    site_id: str,
    db: Session = Depends(get_db),
    store: SiteStore = Depends(get_store),
) -> SiteInfoResponse:
    """
    Get a site's registry row and its current files.

    The file list is read live from disk, unlike file_count and size_bytes
    which were captured at creation.
    """
    try:
        site = registry.get_site(db, site_id) if is_site_id(site_id) else None
        if not site:
            raise not_found_error("Site")

        files = [
            SiteFile(name=name, path=site_file_path(site_id, name))
            for name in store.list_files(site_id)
        ]
        base = SiteResponse.from_site(site, site_url(request, site_id))
        return SiteInfoResponse(**base.model_dump(), files=files)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Get site info error for {site_id}: {e}", exc_info=True)
        raise server_error("Failed to get site info")


@router.get("/sites", response_model=list[SiteResponse])
async def get_sites(
    request: Request,
    db: Session = Depends(get_db),
) -> list[SiteResponse]:
    """Get all hosted sites, newest first."""
    try:
        return [
            SiteResponse.from_site(site, site_url(request, site.site_id))
            for site in registry.list_sites(db)
        ]
    except AppException as e:
        logger.error(f"Get sites error: {e}", exc_info=True)
        raise server_error("Failed to get sites")


@router.delete("/site/{site_id}", response_model=DeleteResponse)
async def delete_site(
    site_id: str,
    db: Session = Depends(get_db),
    store: SiteStore = Depends(get_store),
) -> DeleteResponse:
    """
    Delete a site's registry row, then its directory.

    A directory that is already gone is not an error. If removing the
    directory fails after the row is deleted, the directory is left orphaned
    and reported by /api/admin/orphans.
    """
    try:
        site = registry.delete_site(db, site_id) if is_site_id(site_id) else None
        if not site:
            raise not_found_error("Site")

        if not store.remove(site_id):
            logger.warning(f"Site {site_id} had no directory on disk")
        logger.info(f"Deleted site {site_id}")
        return DeleteResponse(success=True, message="Site deleted successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Delete site error for {site_id}: {e}", exc_info=True)
        raise server_error("Failed to delete site")
