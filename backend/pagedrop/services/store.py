"""Filesystem store holding each site's materialized files."""
import shutil
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, List, Optional

from pagedrop.constants import HTML_SUFFIX, INDEX_FILENAME
from pagedrop.utils.exceptions import StorageError
from pagedrop.utils.logger import logger
from pagedrop.utils.paths import safe_filename


class SiteStore:
    """Directory tree with one subdirectory per site identifier."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def ensure_root(self) -> None:
        """Create the storage root if it does not exist."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create storage root {self.root}: {e}") from e

    def site_path(self, site_id: str) -> Path:
        return self.root / site_id

    def exists(self, site_id: str) -> bool:
        return self.site_path(site_id).is_dir()

    def create(self, site_id: str) -> Path:
        """Create the directory for a new site."""
        path = self.site_path(site_id)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create site directory {site_id}: {e}") from e
        return path

    def write_bytes(self, site_id: str, filename: str, data: bytes) -> int:
        """Write data to a file in the site directory and return the byte count."""
        dest = self.site_path(site_id) / safe_filename(filename)
        try:
            dest.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Cannot write {filename} to site {site_id}: {e}") from e
        return len(data)

    def write_stream(self, site_id: str, filename: str, source: BinaryIO) -> int:
        """Copy a file object into the site directory and return the byte count."""
        dest = self.site_path(site_id) / safe_filename(filename)
        try:
            with open(dest, "wb") as buffer:
                shutil.copyfileobj(source, buffer)
            return dest.stat().st_size
        except OSError as e:
            raise StorageError(f"Cannot write {filename} to site {site_id}: {e}") from e

    def list_files(self, site_id: str) -> List[str]:
        """List the file names in a site directory, sorted. Empty if the site is absent."""
        path = self.site_path(site_id)
        if not path.is_dir():
            return []
        try:
            return sorted(entry.name for entry in path.iterdir() if entry.is_file())
        except OSError as e:
            raise StorageError(f"Cannot list site {site_id}: {e}") from e

    def resolve_file(self, site_id: str, filename: str) -> Optional[Path]:
        """Get the path of a named file in a site, or None if it is not there."""
        path = self.site_path(site_id) / safe_filename(filename)
        return path if path.is_file() else None

    def resolve_root(self, site_id: str) -> Optional[Path]:
        """
        Pick the file served at a site's root address.

        Strategies are tried in order: index.html, the first *.html file,
        then the first file of any kind.

        Args:
            site_id: Site identifier (directory must exist)

        Returns:
            Path of the chosen file, or None if the site has no files
        """
        files = self.list_files(site_id)
        strategies: List[Callable[[List[str]], Optional[str]]] = [
            _exact_index,
            _first_html,
            _first_file,
        ]
        for strategy in strategies:
            chosen = strategy(files)
            if chosen is not None:
                return self.site_path(site_id) / chosen
        return None

    def remove(self, site_id: str) -> bool:
        """
        Remove a site's directory tree.

        Returns:
            True if the directory existed and was removed, False if it was absent
        """
        path = self.site_path(site_id)
        if not path.exists():
            return False
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise StorageError(f"Cannot remove site {site_id}: {e}") from e
        return True

    def discard(self, site_id: str) -> None:
        """Remove a partially created site after a failed ingestion."""
        try:
            self.remove(site_id)
        except StorageError as e:
            logger.error(f"Orphaned directory left for site {site_id}: {e}")

    def orphans(self, known_ids: Iterable[str]) -> List[str]:
        """List site directories that have no registry row."""
        if not self.root.is_dir():
            return []
        known = set(known_ids)
        try:
            return sorted(
                entry.name for entry in self.root.iterdir()
                if entry.is_dir() and entry.name not in known
            )
        except OSError as e:
            raise StorageError(f"Cannot scan storage root {self.root}: {e}") from e


def _exact_index(files: List[str]) -> Optional[str]:
    return INDEX_FILENAME if INDEX_FILENAME in files else None


def _first_html(files: List[str]) -> Optional[str]:
    return next((name for name in files if name.endswith(HTML_SUFFIX)), None)


def _first_file(files: List[str]) -> Optional[str]:
    return files[0] if files else None
