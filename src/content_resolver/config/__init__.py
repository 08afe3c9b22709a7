"""Configuration models for content-resolver."""

from content_resolver.config.settings import (
    CONFIG_FILENAME,
    DiscoverySettings,
    DocumentSettings,
    HttpSettings,
    PageSettings,
    PostSettings,
    ResolverSettings,
)

__all__ = [
    "CONFIG_FILENAME",
    "DiscoverySettings",
    "DocumentSettings",
    "HttpSettings",
    "PageSettings",
    "PostSettings",
    "ResolverSettings",
]
