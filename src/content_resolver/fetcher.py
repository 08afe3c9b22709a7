"""Single-file fetcher: one path in, one parsed document (or an absence) out."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from content_resolver.cache import ResolverCache
from content_resolver.config.settings import ResolverSettings
from content_resolver.exceptions import ParseError, TransportError
from content_resolver.markdown.frontmatter import parse_document
from content_resolver.paths import join_url, normalize_path
from content_resolver.transport import Retriever
from content_resolver.types import Document, Metadata

logger = logging.getLogger(__name__)

# Start of an HTML document, or the bootstrap script a dev server injects
# into the application shell it returns for unknown paths. Markers only count
# inside a script element of a body that is markup rather than prose.
_HTML_SHELL_START = re.compile(r"\A\s*<(!doctype\s+html|html[\s>])", re.IGNORECASE)
_DEV_SERVER_SCRIPT = re.compile(
    r"<script\b[^>]*\bsrc\s*=\s*[\"']?[^\"'>\s]*/@(?:vite/client|react-refresh)"
    r"|<script\b[^>]*>[^<]*window\.__vite_plugin_react_preamble_installed__",
    re.IGNORECASE,
)


class FetchStatus(str, Enum):
    """Why a fetch produced, or failed to produce, a document."""

    FOUND = "found"
    CACHED = "cached"
    NOT_FOUND = "not_found"
    EMPTY = "empty"
    HTML_SHELL = "html_shell"
    MALFORMED = "malformed"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of one fetch. ``document`` is set only when ``ok``."""

    path: str
    status: FetchStatus
    document: Document | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.document is not None


def looks_like_html_shell(text: str) -> bool:
    """Return ``True`` for an HTML page served in place of a Markdown file."""
    if _HTML_SHELL_START.match(text):
        return True
    return text.lstrip().startswith("<") and _DEV_SERVER_SCRIPT.search(text) is not None


class DocumentFetcher:
    """Retrieves, classifies and parses one content file.

    Every failure (transport, HTTP status, empty or HTML body, malformed
    header) comes back as a ``FetchResult`` without a document; nothing is
    raised past ``fetch``.
    """

    def __init__(self, retriever: Retriever, cache: ResolverCache, settings: ResolverSettings) -> None:
        self.retriever = retriever
        self.cache = cache
        self.settings = settings

    async def fetch(self, path: str, *, index_slug: bool = True) -> FetchResult:
        """Fetch and parse the document at *path*.

        Args:
            path: Request path; also the raw-document cache key as given.
            index_slug: Record the document's slug in the slug cache.

        """
        cached = self.cache.documents.get(path)
        if cached is not None:
            return FetchResult(path, FetchStatus.CACHED, cached)

        url = join_url(self.settings.http.origin, normalize_path(path))
        try:
            response = await self.retriever.get(url)
        except TransportError as exc:
            logger.debug("Transport failure for %s: %s", url, exc.reason)
            return FetchResult(path, FetchStatus.TRANSPORT_ERROR, detail=str(exc.reason))

        if not response.ok:
            logger.debug("No document at %s (HTTP %s)", url, response.status_code)
            return FetchResult(path, FetchStatus.NOT_FOUND, detail=f"HTTP {response.status_code}")

        text = response.text
        if not text.strip():
            logger.debug("Empty document at %s", url)
            return FetchResult(path, FetchStatus.EMPTY)

        if looks_like_html_shell(text):
            logger.debug("HTML served in place of %s", url)
            return FetchResult(path, FetchStatus.HTML_SHELL)

        try:
            header, body = parse_document(text)
        except ParseError as exc:
            logger.warning("Skipping %s: %s", url, exc)
            return FetchResult(path, FetchStatus.MALFORMED, detail=exc.reason)

        metadata = Metadata.from_header(header, path=path, body=body, settings=self.settings.documents)
        document = Document(metadata=metadata, body=body, path=path)
        self.cache.remember(path, document, index_slug=index_slug)
        return FetchResult(path, FetchStatus.FOUND, document)

    async def fetch_document(self, path: str, *, index_slug: bool = True) -> Document | None:
        """Like ``fetch`` but only the document, or ``None``."""
        result = await self.fetch(path, index_slug=index_slug)
        return result.document
