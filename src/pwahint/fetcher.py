"""Content fetching for rules that need to look past the page itself.

Rules never talk to the network directly. They go through a ``ContentFetcher``
handed to them by the linter, which keeps transport, timeouts and redirect
policy in one place.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from urllib.parse import urlsplit
from urllib.request import url2pathname

import httpx

from .config import FetchConfig

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a resource cannot be retrieved."""


@dataclass(frozen=True)
class FetchResult:
    """Result of a successful fetch.

    ``status_code`` is None for local resources, where no HTTP status applies.
    """
    url: str
    status_code: int | None
    content: bytes = b""
    content_type: str | None = None

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class ContentFetcher(Protocol):
    """Anything that can retrieve a URL for a rule."""

    async def fetch(self, url: str) -> FetchResult:
        ...


def file_url_to_path(url: str) -> Path:
    """Convert a ``file:`` URL to a local path."""
    parts = urlsplit(url)
    path = url2pathname(parts.path)
    if parts.netloc and parts.netloc != "localhost":
        path = f"//{parts.netloc}{path}"
    return Path(path)


class HttpContentFetcher:
    """ContentFetcher backed by ``httpx.AsyncClient``.

    ``file:`` URLs are read from disk and report no status code. Use as an
    async context manager so the underlying connection pool is closed.
    """

    def __init__(self, config: FetchConfig | None = None,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.config = config or FetchConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpContentFetcher":
        self._client = self._create_client()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.timeout,
            follow_redirects=self.config.follow_redirects,
            headers={"User-Agent": self.config.user_agent},
            transport=self._transport,
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> FetchResult:
        scheme = urlsplit(url).scheme.lower()

        if scheme == "file":
            return self._read_local(url)
        if scheme not in ("http", "https"):
            raise FetchError(f"Unsupported URL scheme for {url!r}")

        if self._client is None:
            self._client = self._create_client()

        logger.debug(f"GET {url}")
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise FetchError(f"Request to {url} failed: {e}") from e

        logger.debug(f"GET {url} -> {response.status_code}")
        return FetchResult(
            url=str(response.url),
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get("content-type"),
        )

    def _read_local(self, url: str) -> FetchResult:
        path = file_url_to_path(url)
        logger.debug(f"Reading local resource {path}")
        try:
            content = path.read_bytes()
        except OSError as e:
            raise FetchError(f"Cannot read {path}: {e}") from e
        return FetchResult(url=url, status_code=None, content=content)
