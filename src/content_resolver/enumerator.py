"""Listing the post files under a discovered base location."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from content_resolver.config.settings import ResolverSettings
from content_resolver.exceptions import TransportError
from content_resolver.fetcher import looks_like_html_shell
from content_resolver.paths import join_path, join_url
from content_resolver.transport import Retriever

logger = logging.getLogger(__name__)


def parse_manifest(text: str, *, extension: str) -> list[str]:
    """Return the filenames listed in a manifest, in order.

    One filename per line; blank lines, duplicates and entries that do not
    end in *extension* are ignored.
    """
    names: list[str] = []
    for line in text.splitlines():
        name = line.strip()
        if not name or not name.lower().endswith(extension.lower()):
            continue
        if name not in names:
            names.append(name)
    return names


class FileEnumerator:
    """Obtains the post filenames, from the manifest or the seed list."""

    def __init__(self, retriever: Retriever, settings: ResolverSettings) -> None:
        self.retriever = retriever
        self.settings = settings

    async def read_manifest(self, base: str) -> list[str] | None:
        """Return the manifest entries, or ``None`` when it is unavailable."""
        manifest_path = join_path(base, self.settings.posts.manifest)
        url = join_url(self.settings.http.origin, manifest_path)
        try:
            response = await self.retriever.get(url)
        except TransportError as exc:
            logger.info("Manifest %s unreachable: %s", manifest_path, exc.reason)
            return None

        if not response.ok or response.is_html or looks_like_html_shell(response.text):
            logger.info("No manifest at %s (HTTP %s)", manifest_path, response.status_code)
            return None

        names = parse_manifest(response.text, extension=self.settings.posts.extension)
        if not names:
            logger.info("Manifest %s lists no %s files", manifest_path, self.settings.posts.extension)
            return None
        return names

    async def enumerate(self, base: str) -> list[str]:
        """Return fully qualified paths of the post files under *base*."""
        names = await self.read_manifest(base)
        if names is None:
            logger.info("Falling back to %d seed filename(s)", len(self.settings.posts.seed_files))
            names = list(self.settings.posts.seed_files)
        return qualify(base, names)


def qualify(base: str, names: Iterable[str]) -> list[str]:
    """Join each filename to *base*, stripping duplicate separators."""
    return [join_path(base, name) for name in names]
