"""Resolve post and page slugs into parsed Markdown documents served over HTTP."""

from content_resolver.config.settings import ResolverSettings
from content_resolver.exceptions import ConfigurationError, ContentResolverError, ParseError, TransportError
from content_resolver.resolver import (
    ContentResolver,
    get_default_resolver,
    load_all_posts,
    load_page,
    load_post,
    reset_default_resolver,
)
from content_resolver.types import Document, Metadata

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "ContentResolver",
    "ContentResolverError",
    "Document",
    "Metadata",
    "ParseError",
    "ResolverSettings",
    "TransportError",
    "get_default_resolver",
    "load_all_posts",
    "load_page",
    "load_post",
    "reset_default_resolver",
]
