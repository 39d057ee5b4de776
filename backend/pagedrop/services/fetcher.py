"""Outbound fetch of remote URLs for URL deployments."""
import httpx
from dataclasses import dataclass
from typing import Optional

from pagedrop.constants import INDEX_FILENAME, JSON_FILENAME
from pagedrop.utils.exceptions import UpstreamFetchError
from pagedrop.utils.logger import logger


@dataclass
class FetchedContent:
    """Body of a fetched URL and the file name it is stored under."""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


class UrlFetcher:
    """Fetches a URL with httpx and maps its content type to a site file name."""

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport

    async def fetch(self, url: str) -> FetchedContent:
        """
        Fetch a URL.

        Args:
            url: Absolute http(s) URL

        Returns:
            FetchedContent with the file name chosen from the content type

        Raises:
            UpstreamFetchError: On network failure or a non-success status
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Fetch of {url} failed: {e}")
            raise UpstreamFetchError(str(e) or e.__class__.__name__) from e

        if not response.is_success:
            logger.error(f"Fetch of {url} returned {response.status_code}")
            raise UpstreamFetchError(f"Failed to fetch: {response.reason_phrase}")

        content_type = response.headers.get("content-type")
        return FetchedContent(
            filename=self._filename_for(content_type),
            content=response.content,
            content_type=content_type,
        )

    @staticmethod
    def _filename_for(content_type: Optional[str]) -> str:
        """Get the stored file name for a response content type."""
        if content_type and "application/json" in content_type:
            return JSON_FILENAME
        # text/html and every other or missing type become the home page
        return INDEX_FILENAME
