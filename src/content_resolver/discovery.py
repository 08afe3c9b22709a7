"""Discovery of the base location that serves post files."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from content_resolver.cache import ResolverCache
from content_resolver.config.settings import ResolverSettings
from content_resolver.paths import join_path, join_url, normalize_path
from content_resolver.transport import Retriever

logger = logging.getLogger(__name__)


class DirectoryDiscoverer:
    """Finds which candidate base location answers for well-known files.

    A found base is memoized in the cache for the resolver's lifetime and
    never re-probed. A failed discovery is not memoized (unless a retry
    delay is configured), so content that appears later can still be found.
    """

    def __init__(self, retriever: Retriever, cache: ResolverCache, settings: ResolverSettings) -> None:
        self.retriever = retriever
        self.cache = cache
        self.settings = settings

    def probe_plan(self) -> Iterator[tuple[str, str]]:
        """Yield ``(base, probe path)`` pairs in the order they are tried."""
        for base in self.settings.posts.candidate_bases:
            for filename in self.settings.posts.probe_files:
                yield normalize_path(base), join_path(base, filename)

    async def discover(self) -> str | None:
        """Return the base location serving content, or ``None``."""
        if self.cache.base is not None:
            return self.cache.base

        if self.cache.discovery_backoff_active(self.settings.discovery.retry_after_seconds):
            logger.debug("Skipping discovery; last attempt failed recently")
            return None

        origin = self.settings.http.origin
        for base, probe_path in self.probe_plan():
            if await self.retriever.probe(join_url(origin, probe_path)):
                logger.info("Discovered content base %s (via %s)", base, probe_path)
                self.cache.remember_base(base)
                return base

        logger.warning(
            "No content base found at %s among %s",
            origin,
            ", ".join(self.settings.posts.candidate_bases),
        )
        self.cache.remember_discovery_failure()
        return None
