"""URL utility functions."""
from fastapi import Request

from pagedrop.config import Settings


def base_url(request: Request) -> str:
    """
    Get the externally visible base URL for building site links.

    Args:
        request: The incoming request (used when no public base URL is configured)

    Returns:
        Base URL without a trailing slash
    """
    settings: Settings = request.app.state.settings
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    return str(request.base_url).rstrip("/")


def site_url(request: Request, site_id: str) -> str:
    """Build the fully-qualified serving URL for a site."""
    return f"{base_url(request)}/site/{site_id}"


def site_file_path(site_id: str, filename: str) -> str:
    """Build the relative serving path for a file within a site."""
    return f"/site/{site_id}/{filename}"
