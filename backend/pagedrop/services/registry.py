"""Site registry queries against the hosted_sites table."""
from typing import Dict, List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pagedrop.constants import SiteType
from pagedrop.models import HostedSite
from pagedrop.utils.exceptions import PersistenceError
from pagedrop.utils.logger import logger


def create_site(
    db: Session,
    site_id: str,
    name: str,
    site_type: str,
    file_count: int,
    size_bytes: int,
) -> HostedSite:
    """
    Insert a registry row for a newly materialized site.

    Args:
        db: Database session
        site_id: Server-generated site identifier
        name: Display name
        site_type: One of SiteType.ALL
        file_count: Number of files written at creation
        size_bytes: Total bytes written at creation

    Returns:
        The persisted row

    Raises:
        PersistenceError: If the insert fails
    """
    site = HostedSite(
        site_id=site_id,
        name=name,
        type=site_type,
        file_count=file_count,
        size_bytes=size_bytes,
    )
    try:
        db.add(site)
        db.commit()
        db.refresh(site)
        return site
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to insert site {site_id}: {e}", exc_info=True)
        raise PersistenceError(f"Failed to insert site {site_id}") from e


def get_site(db: Session, site_id: str) -> Optional[HostedSite]:
    """Get a site row by its identifier, or None."""
    try:
        return db.query(HostedSite).filter(HostedSite.site_id == site_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Failed to load site {site_id}: {e}", exc_info=True)
        raise PersistenceError(f"Failed to load site {site_id}") from e


def list_sites(db: Session) -> List[HostedSite]:
    """Get all site rows, newest first."""
    try:
        return db.query(HostedSite).order_by(
            HostedSite.created_at.desc(),
            HostedSite.id.desc(),
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to list sites: {e}", exc_info=True)
        raise PersistenceError("Failed to list sites") from e


def touch_site(db: Session, site_id: str) -> None:
    """Set last_accessed to now. A missing row is not an error."""
    try:
        db.execute(
            update(HostedSite)
            .where(HostedSite.site_id == site_id)
            .values(last_accessed=func.now())
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to touch site {site_id}: {e}", exc_info=True)
        raise PersistenceError(f"Failed to touch site {site_id}") from e


def delete_site(db: Session, site_id: str) -> Optional[HostedSite]:
    """
    Delete a site row and return it.

    Args:
        db: Database session
        site_id: Site identifier

    Returns:
        The deleted row, or None if no row matched
    """
    try:
        site = db.query(HostedSite).filter(HostedSite.site_id == site_id).first()
        if not site:
            return None
        db.delete(site)
        db.commit()
        return site
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete site {site_id}: {e}", exc_info=True)
        raise PersistenceError(f"Failed to delete site {site_id}") from e


def count_sites(db: Session) -> Dict[str, int]:
    """
    Count sites in total and per origin type.

    Returns:
        Mapping with "total" plus one key per SiteType value
    """
    try:
        counts = {"total": db.query(func.count(HostedSite.id)).scalar() or 0}
        for site_type in SiteType.ALL:
            counts[site_type] = db.query(func.count(HostedSite.id)).filter(
                HostedSite.type == site_type
            ).scalar() or 0
        return counts
    except SQLAlchemyError as e:
        logger.error(f"Failed to count sites: {e}", exc_info=True)
        raise PersistenceError("Failed to count sites") from e


def list_site_ids(db: Session) -> List[str]:
    """Get every registered site identifier."""
    try:
        return [row[0] for row in db.query(HostedSite.site_id).all()]
    except SQLAlchemyError as e:
        logger.error(f"Failed to list site ids: {e}", exc_info=True)
        raise PersistenceError("Failed to list site ids") from e
