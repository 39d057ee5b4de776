"""Pydantic schemas for request/response validation."""
from pagedrop.schemas.site import (
    AdminSiteResponse,
    AdminStatsResponse,
    DeleteResponse,
    DeployCodeRequest,
    DeployResponse,
    DeployUrlRequest,
    OrphansResponse,
    SiteFile,
    SiteInfoResponse,
    SiteResponse,
)

__all__ = [
    "AdminSiteResponse",
    "AdminStatsResponse",
    "DeleteResponse",
    "DeployCodeRequest",
    "DeployResponse",
    "DeployUrlRequest",
    "OrphansResponse",
    "SiteFile",
    "SiteInfoResponse",
    "SiteResponse",
]
