"""Centralized exceptions for content-resolver."""

from __future__ import annotations


class ContentResolverError(Exception):
    """Base exception for all content-resolver errors."""


class ParseError(ContentResolverError):
    """Raised when a document header block is malformed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Malformed front matter: {reason}")


class TransportError(ContentResolverError):
    """Raised when the retrieval layer cannot reach a location."""

    def __init__(self, url: str, reason: str | Exception) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to retrieve {url}: {reason}")


class ConfigurationError(ContentResolverError):
    """Raised when the settings file cannot be loaded or validated."""
