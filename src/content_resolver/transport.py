"""Retrieval interface consumed by the resolver, with an httpx implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Protocol, runtime_checkable

import httpx

from content_resolver.exceptions import TransportError

logger = logging.getLogger(__name__)

MARKDOWN_ACCEPT = "text/markdown, text/plain;q=0.9, */*;q=0.1"
NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}

# Servers that refuse HEAD answer with one of these
_HEAD_UNSUPPORTED = frozenset({405, 501})
_HTML_TYPES = frozenset({"text/html", "application/xhtml+xml"})
# InvalidURL is raised before a request exists, outside the HTTPError tree
_REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


def is_html_content_type(content_type: str) -> bool:
    return content_type.split(";", 1)[0].strip().lower() in _HTML_TYPES


@dataclass(frozen=True, slots=True)
class RetrievalResponse:
    """Status and body of one retrieval."""

    url: str
    status_code: int
    text: str = ""
    content_type: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_html(self) -> bool:
        return is_html_content_type(self.content_type)


@runtime_checkable
class Retriever(Protocol):
    """Network fetch capability the resolver depends on."""

    async def get(self, url: str) -> RetrievalResponse:
        """Fetch *url* bypassing intermediate caches.

        Raises:
            TransportError: If the location cannot be reached.

        """
        ...

    async def probe(self, url: str) -> bool:
        """Return ``True`` when *url* exists and serves content (no body read)."""
        ...


class HttpxRetriever:
    """``Retriever`` backed by a shared ``httpx.AsyncClient``.

    Usage:
        async with HttpxRetriever(timeout=5.0) as retriever:
            response = await retriever.get("http://localhost:5173/content/posts/a.md")

    A client passed in by the caller is not closed by ``aclose``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 10.0,
        user_agent: str = "content-resolver",
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
        )

    async def __aenter__(self) -> HttpxRetriever:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this retriever created it."""
        if self._owns_client:
            await self._client.aclose()

    async def get(self, url: str) -> RetrievalResponse:
        headers = {"Accept": MARKDOWN_ACCEPT, **NO_CACHE_HEADERS}
        try:
            response = await self._client.get(url, headers=headers)
        except _REQUEST_ERRORS as exc:
            raise TransportError(url, exc) from exc
        return RetrievalResponse(
            url=url,
            status_code=response.status_code,
            text=response.text,
            content_type=response.headers.get("content-type", ""),
        )

    async def probe(self, url: str) -> bool:
        try:
            response = await self._client.head(url, headers=NO_CACHE_HEADERS)
            if response.status_code in _HEAD_UNSUPPORTED:
                response = await self._client.get(url, headers={"Accept": MARKDOWN_ACCEPT, **NO_CACHE_HEADERS})
        except _REQUEST_ERRORS as exc:
            logger.debug("Probe of %s failed: %s", url, exc)
            return False

        # Dev servers answer every unknown path with the HTML application shell
        return response.is_success and not is_html_content_type(response.headers.get("content-type", ""))
