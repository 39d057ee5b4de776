"""Custom exceptions and error handling utilities."""
from fastapi import HTTPException, status
from typing import Optional


class AppException(Exception):
    """Base exception for application errors."""
    pass


class ValidationError(AppException):
    """Raised when request input is missing or malformed."""
    pass


class PayloadTooLargeError(ValidationError):
    """Raised when an upload exceeds the configured size limit."""
    pass


class UpstreamFetchError(AppException):
    """Raised when fetching a remote URL fails or returns a non-success status."""
    pass


class StorageError(AppException):
    """Raised when a filesystem operation on the site store fails."""
    pass


class PersistenceError(AppException):
    """Raised when a registry database operation fails."""
    pass


def not_found_error(resource: str, identifier: Optional[str] = None) -> HTTPException:
    """
    Create a standardized 404 error.

    Args:
        resource: Name of the resource (e.g., "Site", "File")
        identifier: Optional identifier that was not found

    Returns:
        HTTPException with 404 status
    """
    message = f"{resource} not found"
    if identifier:
        message += f": {identifier}"
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)


def validation_error(message: str) -> HTTPException:
    """
    Create a standardized 400 validation error.

    Args:
        message: Validation error message

    Returns:
        HTTPException with 400 status
    """
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def payload_too_large_error(message: str) -> HTTPException:
    """Create a standardized 413 error for oversized uploads."""
    return HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=message)


def server_error(message: str) -> HTTPException:
    """Create a standardized 500 error with a client-facing message."""
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


def client_error(error: ValidationError) -> HTTPException:
    """
    Convert a validation failure to the matching 4xx HTTP exception.

    Args:
        error: The validation error raised by a service

    Returns:
        HTTPException with 413 for oversized payloads, 400 otherwise
    """
    if isinstance(error, PayloadTooLargeError):
        return payload_too_large_error(str(error))
    return validation_error(str(error))
