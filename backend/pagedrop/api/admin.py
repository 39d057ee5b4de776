"""Admin statistics and site management endpoints."""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from pagedrop.api.deps import get_store
from pagedrop.constants import SiteType
from pagedrop.database import get_db
from pagedrop.schemas import AdminSiteResponse, AdminStatsResponse, OrphansResponse
from pagedrop.services import registry
from pagedrop.services.store import SiteStore
from pagedrop.utils.exceptions import AppException, server_error
from pagedrop.utils.logger import logger
from pagedrop.utils.url import site_url

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/stats", response_model=AdminStatsResponse)
async def get_admin_stats(db: Session = Depends(get_db)) -> AdminStatsResponse:
    """Count sites in total and per origin type."""
    try:
        counts = registry.count_sites(db)
    except AppException as e:
        logger.error(f"Admin stats error: {e}", exc_info=True)
        raise server_error("Failed to get admin stats")

    return AdminStatsResponse(
        totalSites=counts["total"],
        uploads=counts[SiteType.UPLOAD],
        codes=counts[SiteType.CODE],
        urls=counts[SiteType.URL],
    )


@router.get("/sites", response_model=list[AdminSiteResponse])
async def get_admin_sites(
    request: Request,
    db: Session = Depends(get_db),
) -> list[AdminSiteResponse]:
    """Get all sites with display-formatted timestamps and sizes, newest first."""
    try:
        sites = registry.list_sites(db)
    except AppException as e:
        logger.error(f"Admin sites error: {e}", exc_info=True)
        raise server_error("Failed to get admin sites")

    return [AdminSiteResponse.from_site(site, site_url(request, site.site_id)) for site in sites]


@router.get("/orphans", response_model=OrphansResponse)
async def get_orphans(
    db: Session = Depends(get_db),
    store: SiteStore = Depends(get_store),
) -> OrphansResponse:
    """
    List site directories left without a registry row.

    These come from deletions whose directory removal failed. Nothing is
    removed automatically.
    """
    try:
        orphans = store.orphans(registry.list_site_ids(db))
    except AppException as e:
        logger.error(f"Orphan scan error: {e}", exc_info=True)
        raise server_error("Failed to scan for orphaned sites")

    if orphans:
        logger.warning(f"Found {len(orphans)} orphaned site directories")
    return OrphansResponse(orphans=orphans, count=len(orphans))
