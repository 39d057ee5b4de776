"""Path validation for user-supplied file names and site identifiers."""
import uuid

from pagedrop.utils.exceptions import ValidationError


def safe_filename(name: str) -> str:
    """
    Validate a user-supplied file name before it is joined to a storage path.

    Args:
        name: File name from a request (upload part, JSON body or URL segment)

    Returns:
        The unchanged name when it is a single, non-special path component

    Raises:
        ValidationError: If the name is empty, a dot segment, or contains separators
    """
    if not name or not name.strip():
        raise ValidationError("Filename is required")
    if name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise ValidationError(f"Invalid filename: {name}")
    return name


def is_site_id(value: str) -> bool:
    """Return True if value is a canonical UUID string as generated for sites."""
    try:
        return str(uuid.UUID(value)) == value
    except (ValueError, TypeError):
        return False
