"""Serialization utilities for converting models to API responses."""
from datetime import datetime
from typing import Optional

from pagedrop.constants import BYTES_PER_MB

LOCALE_DATETIME_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


def serialize_datetime(value: Optional[datetime]) -> Optional[str]:
    """
    Serialize datetime to ISO format string.

    Args:
        value: Datetime value or None

    Returns:
        ISO format string or None
    """
    return value.isoformat() if value else None


def format_locale_datetime(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime for direct display, e.g. ``10/18/2026, 03:04:05 PM``."""
    return value.strftime(LOCALE_DATETIME_FORMAT) if value else None


def format_size_mb(size_bytes: Optional[int]) -> str:
    """Render a byte count as mebibytes rounded to two decimals."""
    return f"{(size_bytes or 0) / BYTES_PER_MB:.2f}"

