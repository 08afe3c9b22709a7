"""Settings for the content resolver.

Configuration comes from three layers, highest priority first:

1. Environment variables (``CONTENT_RESOLVER_SECTION__KEY``)
2. ``.content-resolver.toml`` in the site root
3. Defaults defined here

The ordered lists (candidate bases, probe files, page templates) are the
fallback strategies of the resolver; their order is significant.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from string import Formatter
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from content_resolver.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".content-resolver.toml"

DEFAULT_ORIGIN = "http://localhost:5173"
DEFAULT_EXTENSION = ".md"
DEFAULT_MANIFEST = "index.txt"
DEFAULT_EXCERPT_LENGTH = 100
DEFAULT_EXCERPT_SUFFIX = "..."


def _deep_merge(destination: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Merge source into destination, with source values overwriting."""
    for key, value in source.items():
        if isinstance(value, Mapping) and key in destination and isinstance(destination[key], Mapping):
            destination[key] = _deep_merge(dict(destination[key]), value)
        else:
            destination[key] = value
    return destination


class HttpSettings(BaseModel):
    """Where content is served from and how to reach it."""

    origin: str = Field(default=DEFAULT_ORIGIN, description="Origin every content path is joined against")
    timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")
    user_agent: str = Field(default="content-resolver", description="User-Agent header")

    @field_validator("origin")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if "://" not in value:
            msg = f"origin must be an absolute URL, got {value!r}"
            raise ValueError(msg)
        return value.rstrip("/")


class PostSettings(BaseModel):
    """Discovery and enumeration of the post collection."""

    candidate_bases: tuple[str, ...] = Field(
        default=("/content/posts", "/posts", "/public/content/posts", "/src/content/posts"),
        description="Base locations probed in order",
    )
    probe_files: tuple[str, ...] = Field(
        default=(DEFAULT_MANIFEST, "first-post.md", "second-post.md"),
        description="Well-known files whose presence marks a base location",
    )
    manifest: str = Field(default=DEFAULT_MANIFEST, description="Manifest listing one filename per line")
    seed_files: tuple[str, ...] = Field(
        default=("first-post.md", "second-post.md"),
        description="Filenames used when the manifest is unavailable",
    )
    extension: str = Field(default=DEFAULT_EXTENSION, description="Recognized document extension")
    concurrent_fetches: bool = Field(default=False, description="Fetch collection entries concurrently")

    @field_validator("extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        value = value.strip()
        return value if value.startswith(".") else f".{value}"


class PageSettings(BaseModel):
    """Page path templates, tried in order with ``{slug}`` substituted."""

    templates: tuple[str, ...] = Field(
        default=("/pages/{slug}.md", "/content/pages/{slug}.md"),
        description="Ordered page path templates",
    )

    @field_validator("templates")
    @classmethod
    def _require_slug_placeholder(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for template in value:
            fields = {name for _, name, _, _ in Formatter().parse(template) if name is not None}
            if fields != {"slug"}:
                msg = f"page template {template!r} must use {{slug}} as its only placeholder"
                raise ValueError(msg)
        return value


class DocumentSettings(BaseModel):
    """Defaults applied to metadata the header does not declare."""

    excerpt_length: int = Field(default=DEFAULT_EXCERPT_LENGTH, ge=0)
    excerpt_suffix: str = Field(default=DEFAULT_EXCERPT_SUFFIX)
    default_missing_date: bool = Field(
        default=True,
        description="Stamp documents without a date with the resolution time",
    )


class DiscoverySettings(BaseModel):
    """Discovery retry policy."""

    retry_after_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Seconds to wait before re-probing after a failed discovery (0 re-probes every call)",
    )


class ResolverSettings(BaseSettings):
    """Root configuration for the content resolver.

    Supports environment variable overrides with the pattern
    ``CONTENT_RESOLVER_SECTION__KEY`` (e.g. ``CONTENT_RESOLVER_HTTP__ORIGIN``).
    """

    http: HttpSettings = Field(default_factory=HttpSettings)
    posts: PostSettings = Field(default_factory=PostSettings)
    pages: PageSettings = Field(default_factory=PageSettings)
    documents: DocumentSettings = Field(default_factory=DocumentSettings)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="CONTENT_RESOLVER_",
        env_nested_delimiter="__",
    )

    @classmethod
    def load(cls, site_root: Path | None = None) -> ResolverSettings:
        """Load settings from ``.content-resolver.toml`` and the environment.

        Raises:
            ConfigurationError: If the file is not valid TOML or fails validation.

        """
        root_path = site_root if site_root is not None else Path.cwd()
        config_file = root_path / CONFIG_FILENAME

        file_settings: dict[str, Any] = {}
        if config_file.is_file():
            try:
                with config_file.open("rb") as f:
                    file_settings = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {config_file}: {exc}"
                raise ConfigurationError(msg) from exc
            logger.debug("Loaded settings from %s", config_file)

        try:
            env_settings = cls().model_dump(exclude_unset=True)
            merged = _deep_merge(file_settings, env_settings)
            return cls.model_validate(merged)
        except ValidationError as exc:
            msg = f"Invalid content-resolver settings: {exc}"
            raise ConfigurationError(msg) from exc
