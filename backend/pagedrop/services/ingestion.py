"""Ingestion of uploads, fetched URLs and inline code into new sites."""
import uuid
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from pagedrop.constants import DEFAULT_SITE_NAMES, INDEX_FILENAME, SiteType
from pagedrop.models import HostedSite
from pagedrop.services import registry
from pagedrop.services.fetcher import UrlFetcher
from pagedrop.services.store import SiteStore
from pagedrop.utils.exceptions import PayloadTooLargeError, ValidationError
from pagedrop.utils.logger import logger
from pagedrop.utils.paths import safe_filename


def new_site_id() -> str:
    """Generate a fresh site identifier."""
    return str(uuid.uuid4())


def _site_name(project_name: Optional[str], site_type: str) -> str:
    if project_name and project_name.strip():
        return project_name.strip()
    return DEFAULT_SITE_NAMES[site_type]


def _upload_size(upload: UploadFile) -> int:
    """Get the byte size of an uploaded file, measuring the spool if needed."""
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, 2)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


async def ingest_upload(
    db: Session,
    store: SiteStore,
    project_name: Optional[str],
    files: Optional[List[UploadFile]],
    max_files: int,
    max_bytes: int,
) -> HostedSite:
    """
    Publish a set of uploaded files as a new site.

    Every upload is closed before returning, which removes the multipart
    parser's temporary spool whether or not the ingestion succeeded.

    Args:
        db: Database session
        store: Site store
        project_name: Optional display name
        files: Uploaded file parts
        max_files: Maximum number of files accepted
        max_bytes: Maximum combined size accepted

    Returns:
        The registry row of the new site

    Raises:
        ValidationError: No files, too many files, an unsafe or repeated file name
        PayloadTooLargeError: Combined size over max_bytes
        StorageError, PersistenceError: On I/O or database failure
    """
    uploads = [f for f in (files or []) if f.filename]
    try:
        if not uploads:
            raise ValidationError("No files uploaded")
        if len(uploads) > max_files:
            raise ValidationError(f"Too many files (max {max_files})")

        names = [safe_filename(upload.filename) for upload in uploads]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValidationError(f"Duplicate filename: {', '.join(duplicates)}")
        if sum(_upload_size(upload) for upload in uploads) > max_bytes:
            raise PayloadTooLargeError(
                f"Upload exceeds {max_bytes // (1024 * 1024)} MB limit"
            )

        site_id = new_site_id()
        store.create(site_id)
        try:
            total_size = 0
            for name, upload in zip(names, uploads):
                total_size += store.write_stream(site_id, name, upload.file)

            site = registry.create_site(
                db,
                site_id=site_id,
                name=_site_name(project_name, SiteType.UPLOAD),
                site_type=SiteType.UPLOAD,
                file_count=len(uploads),
                size_bytes=total_size,
            )
        except Exception:
            store.discard(site_id)
            raise
    finally:
        for upload in files or []:
            await upload.close()

    logger.info(f"Published upload site {site_id} ({len(uploads)} files, {total_size} bytes)")
    return site


async def ingest_url(
    db: Session,
    store: SiteStore,
    fetcher: UrlFetcher,
    url: Optional[str],
    project_name: Optional[str],
) -> HostedSite:
    """
    Publish the body of a fetched URL as a single-file site.

    JSON responses are stored as data.json, anything else as index.html.

    Raises:
        ValidationError: If url is missing
        UpstreamFetchError: On network failure or non-success status
        StorageError, PersistenceError: On I/O or database failure
    """
    if not url or not url.strip():
        raise ValidationError("URL is required")

    site_id = new_site_id()
    store.create(site_id)
    try:
        fetched = await fetcher.fetch(url.strip())
        store.write_bytes(site_id, fetched.filename, fetched.content)
        site = registry.create_site(
            db,
            site_id=site_id,
            name=_site_name(project_name, SiteType.URL),
            site_type=SiteType.URL,
            file_count=1,
            size_bytes=fetched.size,
        )
    except Exception:
        store.discard(site_id)
        raise

    logger.info(f"Published url site {site_id} from {url} as {fetched.filename}")
    return site


async def ingest_code(
    db: Session,
    store: SiteStore,
    code: Optional[str],
    project_name: Optional[str],
    filename: Optional[str],
) -> HostedSite:
    """
    Publish inline content as a single-file site.

    Raises:
        ValidationError: If code is empty or filename is unsafe
        StorageError, PersistenceError: On I/O or database failure
    """
    if not code:
        raise ValidationError("Code is required")
    target = safe_filename(filename or INDEX_FILENAME)

    site_id = new_site_id()
    store.create(site_id)
    try:
        size = store.write_bytes(site_id, target, code.encode("utf-8"))
        site = registry.create_site(
            db,
            site_id=site_id,
            name=_site_name(project_name, SiteType.CODE),
            site_type=SiteType.CODE,
            file_count=1,
            size_bytes=size,
        )
    except Exception:
        store.discard(site_id)
        raise

    logger.info(f"Published code site {site_id} as {target}")
    return site
