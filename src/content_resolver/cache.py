"""In-memory caches owned by a resolver instance."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from content_resolver.types import Document

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResolverCache:
    """The resolver's process-lifetime state.

    - ``documents``: request path, exactly as supplied, to parsed document.
      Two spellings of one file are cached separately.
    - ``slugs``: slug to the request path that produced it.
    - ``collection``: the sorted post list once loaded.
    - ``base``: the discovered base location.

    Entries are only written once a document has been fully parsed.
    """

    documents: dict[str, Document] = field(default_factory=dict)
    slugs: dict[str, str] = field(default_factory=dict)
    collection: list[Document] | None = None
    base: str | None = None
    discovery_failed_at: float | None = None

    def remember(self, path: str, document: Document, *, index_slug: bool = True) -> None:
        self.documents[path] = document
        if index_slug:
            self.slugs[document.slug] = path

    def remember_base(self, base: str) -> None:
        self.base = base
        self.discovery_failed_at = None

    def remember_discovery_failure(self) -> None:
        self.discovery_failed_at = time.monotonic()

    def discovery_backoff_active(self, retry_after_seconds: float) -> bool:
        """Whether a recent failed discovery should be trusted instead of re-probing."""
        if retry_after_seconds <= 0 or self.discovery_failed_at is None:
            return False
        return time.monotonic() - self.discovery_failed_at < retry_after_seconds

    def clear_collection(self) -> None:
        self.collection = None

    def clear(self) -> None:
        """Drop every cached entry, including the discovered base."""
        logger.debug(
            "Clearing caches (%d documents, %d slugs)", len(self.documents), len(self.slugs)
        )
        self.documents.clear()
        self.slugs.clear()
        self.collection = None
        self.base = None
        self.discovery_failed_at = None
