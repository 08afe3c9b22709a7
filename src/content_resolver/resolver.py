"""Public entry points: the post collection, a post by slug, a page by slug."""

from __future__ import annotations

import asyncio
import logging
from functools import cmp_to_key
from types import TracebackType

import httpx

from content_resolver.cache import ResolverCache
from content_resolver.config.settings import ResolverSettings
from content_resolver.discovery import DirectoryDiscoverer
from content_resolver.enumerator import FileEnumerator, qualify
from content_resolver.fetcher import DocumentFetcher, FetchResult
from content_resolver.paths import normalize_path
from content_resolver.transport import HttpxRetriever, Retriever
from content_resolver.types import Document

logger = logging.getLogger(__name__)

__all__ = [
    "ContentResolver",
    "get_default_resolver",
    "load_all_posts",
    "load_page",
    "load_post",
    "newest_first",
    "reset_default_resolver",
    "slug_variants",
]


def _compare_dates(a: Document, b: Document) -> int:
    a_date, b_date = a.published_at, b.published_at
    if a_date is None or b_date is None:
        return 0
    if a_date > b_date:
        return -1
    if a_date < b_date:
        return 1
    return 0


def newest_first(documents: list[Document]) -> list[Document]:
    """Stable sort by date, newest first.

    A pair where either side has no parseable date compares as equal.
    """
    return sorted(documents, key=cmp_to_key(_compare_dates))


def slug_variants(slug: str) -> list[str]:
    """Filename stems tried for *slug*: as given, ``-``→``_``, ``_``→``-``."""
    candidates = [slug, slug.replace("-", "_"), slug.replace("_", "-")]
    return list(dict.fromkeys(candidates))


class ContentResolver:
    """Resolves slugs into documents served from a discovered location.

    Owns the caches for its lifetime; construct one per process (or per
    test). Use as an async context manager to release the HTTP client:

        async with ContentResolver(settings) as resolver:
            posts = await resolver.load_all_posts()
    """

    def __init__(
        self,
        settings: ResolverSettings | None = None,
        *,
        retriever: Retriever | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or ResolverSettings()
        self._owns_retriever = retriever is None
        self.retriever: Retriever = retriever or HttpxRetriever(
            client,
            timeout=self.settings.http.timeout,
            user_agent=self.settings.http.user_agent,
        )
        self.cache = ResolverCache()
        self.fetcher = DocumentFetcher(self.retriever, self.cache, self.settings)
        self.discoverer = DirectoryDiscoverer(self.retriever, self.cache, self.settings)
        self.enumerator = FileEnumerator(self.retriever, self.settings)
        self.skipped: list[FetchResult] = []

    async def __aenter__(self) -> ContentResolver:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_retriever and isinstance(self.retriever, HttpxRetriever):
            await self.retriever.aclose()

    @property
    def skipped_paths(self) -> list[str]:
        """Paths the last collection load could not resolve."""
        return [result.path for result in self.skipped]

    def refresh(self) -> None:
        """Forget the post collection so the next load re-reads it."""
        self.cache.clear_collection()

    def clear_caches(self) -> None:
        self.cache.clear()
        self.skipped = []

    async def discover(self) -> str | None:
        return await self.discoverer.discover()

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    async def _fetch_all(self, paths: list[str]) -> list[FetchResult]:
        if self.settings.posts.concurrent_fetches:
            return list(await asyncio.gather(*(self.fetcher.fetch(path) for path in paths)))
        return [await self.fetcher.fetch(path) for path in paths]

    async def load_all_posts(self) -> list[Document]:
        """Return every post, newest first.

        The result is cached; later calls return the same list object until
        ``refresh`` is called. Files that fail to resolve are skipped and
        listed in ``skipped_paths``.
        """
        if self.cache.collection is not None:
            return self.cache.collection

        base = await self.discoverer.discover()
        if base is None:
            return []

        paths = await self.enumerator.enumerate(base)
        results = await self._fetch_all(paths)

        self.skipped = [result for result in results if not result.ok]
        for result in self.skipped:
            logger.warning("Skipped %s (%s)", result.path, result.status.value)

        documents = [result.document for result in results if result.document is not None]
        self.cache.collection = newest_first(documents)
        logger.info("Loaded %d post(s) from %s", len(self.cache.collection), base)
        return self.cache.collection

    # ------------------------------------------------------------------
    # Single items
    # ------------------------------------------------------------------

    async def load_post(self, slug: str) -> Document | None:
        """Return the post for *slug*, or ``None`` when there is none.

        Tried in order: the slug cache, filename variants of the slug under
        the discovered base, then an exact slug match in the collection.
        """
        slug = slug.strip()
        if not slug:
            return None

        cached_path = self.cache.slugs.get(slug)
        if cached_path is not None:
            document = await self.fetcher.fetch_document(cached_path)
            if document is not None:
                return document

        base = await self.discoverer.discover()
        if base is None:
            return None

        extension = self.settings.posts.extension
        for path in qualify(base, (f"{stem}{extension}" for stem in slug_variants(slug))):
            document = await self.fetcher.fetch_document(path)
            if document is not None:
                return document

        for document in await self.load_all_posts():
            if document.slug == slug:
                return document

        logger.debug("No post for slug %r", slug)
        return None

    async def load_page(self, slug: str) -> Document | None:
        """Return the page for *slug* from the first matching template.

        Pages never enter the slug cache or the post collection.
        """
        slug = slug.strip()
        if not slug:
            return None

        for template in self.settings.pages.templates:
            path = normalize_path(template.format(slug=slug))
            document = await self.fetcher.fetch_document(path, index_slug=False)
            if document is not None:
                return document

        logger.debug("No page for slug %r", slug)
        return None


_default_resolver: ContentResolver | None = None


def get_default_resolver() -> ContentResolver:
    """Return the process-wide resolver, building it from settings on first use."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = ContentResolver(ResolverSettings.load())
    return _default_resolver


async def reset_default_resolver() -> None:
    """Close and forget the process-wide resolver."""
    global _default_resolver
    if _default_resolver is not None:
        await _default_resolver.aclose()
        _default_resolver = None


async def load_all_posts() -> list[Document]:
    return await get_default_resolver().load_all_posts()


async def load_post(slug: str) -> Document | None:
    return await get_default_resolver().load_post(slug)


async def load_page(slug: str) -> Document | None:
    return await get_default_resolver().load_page(slug)
