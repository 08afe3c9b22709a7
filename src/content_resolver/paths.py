"""Canonical forms for content paths and URLs.

Every path is normalized before it touches the network: exactly one leading
separator and no runs of separators. Absolute URLs keep their
``scheme://host`` prefix untouched.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

_SEPARATOR_RUN = re.compile(r"/{2,}")
_URL_PREFIX = re.compile(r"^(?P<prefix>[A-Za-z][A-Za-z0-9+.-]*://[^/]*)(?P<path>.*)$")


def _collapse(path: str) -> str:
    return "/" + _SEPARATOR_RUN.sub("/", path).lstrip("/")


def normalize_path(path: str) -> str:
    """Return *path* with one leading ``/`` and no duplicate separators.

    >>> normalize_path("content//posts/a.md")
    '/content/posts/a.md'
    >>> normalize_path("https://example.com//content///a.md")
    'https://example.com/content/a.md'
    """
    match = _URL_PREFIX.match(path)
    if match:
        return match.group("prefix") + _collapse(match.group("path"))
    return _collapse(path)


def join_url(origin: str, path: str) -> str:
    """Join a content *path* against *origin*.

    An absolute URL passed as *path* is only normalized, never re-rooted.
    """
    if _URL_PREFIX.match(path):
        return normalize_path(path)
    return origin.rstrip("/") + normalize_path(path)


def join_path(base: str, name: str) -> str:
    """Join a base location and a filename into a normalized path."""
    return normalize_path(f"{base.rstrip('/')}/{name.lstrip('/')}")


def filename_stem(path: str) -> str:
    """Return the last path segment without its extension."""
    name = normalize_path(path).rsplit("/", 1)[-1]
    return PurePosixPath(name).stem if name else ""
