"""Models package."""
from pagedrop.models.site import HostedSite

__all__ = ["HostedSite"]
