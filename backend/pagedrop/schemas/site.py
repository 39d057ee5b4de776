"""Schemas for site deployment, listing and administration."""
from pydantic import BaseModel, Field
from typing import List, Optional

from pagedrop.models import HostedSite
from pagedrop.utils.serialization import (
    format_locale_datetime,
    format_size_mb,
    serialize_datetime,
)


class DeployUrlRequest(BaseModel):
    """Request schema for /api/deploy-url endpoint."""
    url: Optional[str] = Field(None, description="URL to fetch and publish")
    projectName: Optional[str] = Field(None, description="Display name for the site")


class DeployCodeRequest(BaseModel):
    """Request schema for /api/deploy-code endpoint."""
    code: Optional[str] = Field(None, description="Content to publish verbatim")
    projectName: Optional[str] = Field(None, description="Display name for the site")
    filename: Optional[str] = Field(None, description="Target file name (default index.html)")


class DeployResponse(BaseModel):
    """Response schema for the three deployment endpoints."""
    success: bool
    siteId: str
    url: str
    message: str


class DeleteResponse(BaseModel):
    """Response schema for DELETE /api/site/{site_id}."""
    success: bool
    message: str


class SiteFile(BaseModel):
    """A file currently present in a site directory."""
    name: str
    path: str


class SiteResponse(BaseModel):
    """A registry row with its serving URL."""
    id: int
    site_id: str
    name: str
    type: str
    created_at: Optional[str]
    last_accessed: Optional[str]
    file_count: int
    size_bytes: int
    url: str

    @classmethod
    def from_site(cls, site: HostedSite, url: str) -> "SiteResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=site.id,
            site_id=site.site_id,
            name=site.name,
            type=site.type,
            created_at=serialize_datetime(site.created_at),
            last_accessed=serialize_datetime(site.last_accessed),
            file_count=site.file_count,
            size_bytes=site.size_bytes,
            url=url,
        )


class SiteInfoResponse(SiteResponse):
    """Registry row plus the live directory listing."""
    files: List[SiteFile]


class AdminStatsResponse(BaseModel):
    """Response schema for /api/admin/stats."""
    totalSites: int
    uploads: int
    codes: int
    urls: int


class AdminSiteResponse(BaseModel):
    """Registry row formatted for display in the admin table."""
    site_id: str
    name: str
    type: str
    created_at: Optional[str]
    last_accessed: Optional[str]
    file_count: int
    size_bytes: int
    size_mb: str
    url: str

    @classmethod
    def from_site(cls, site: HostedSite, url: str) -> "AdminSiteResponse":
        return cls(
            site_id=site.site_id,
            name=site.name,
            type=site.type,
            created_at=format_locale_datetime(site.created_at),
            last_accessed=format_locale_datetime(site.last_accessed),
            file_count=site.file_count,
            size_bytes=site.size_bytes,
            size_mb=format_size_mb(site.size_bytes),
            url=url,
        )


class OrphansResponse(BaseModel):
    """Site directories with no registry row."""
    orphans: List[str]
    count: int
