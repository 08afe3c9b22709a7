"""Core data types for resolved content."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

from dateutil.parser import isoparse
from pydantic import BaseModel, ConfigDict, Field

from content_resolver.config.settings import DocumentSettings
from content_resolver.paths import filename_stem


def format_iso_utc(dt: datetime) -> str:
    """Provides a consistent ISO 8601 format with UTC timezone."""
    return dt.isoformat().replace("+00:00", "Z")


def parse_date(value: str | None) -> datetime | None:
    """Parse an ISO-8601 date string, returning ``None`` when it is not one.

    Naive values are assumed to be UTC so that every parsed date compares.
    """
    if not value:
        return None
    try:
        parsed = isoparse(value.strip())
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _as_iso(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class Metadata(BaseModel):
    """Header fields of a document.

    ``title`` and ``slug`` are always present once a document is built;
    any other header key is kept as an extra field.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    title: str
    slug: str
    date: str | None = None
    excerpt: str | None = None

    @property
    def extra(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    @classmethod
    def from_header(
        cls,
        header: dict[str, Any],
        *,
        path: str,
        body: str,
        settings: DocumentSettings | None = None,
        now: datetime | None = None,
    ) -> Metadata:
        """Build metadata from a parsed header, filling in the defaults.

        - ``slug`` falls back to the filename without its extension.
        - ``title`` falls back to the slug.
        - ``date`` falls back to the resolution time (*now*).
        - ``excerpt`` falls back to the start of the body plus a suffix.
        """
        settings = settings or DocumentSettings()
        fields = dict(header)

        slug = fields.pop("slug", None)
        slug = str(slug).strip() if slug not in (None, "") else filename_stem(path)

        title = fields.pop("title", None)
        title = str(title) if title not in (None, "") else slug

        raw_date = fields.pop("date", None)
        if raw_date not in (None, ""):
            date_value: str | None = _as_iso(raw_date)
        elif settings.default_missing_date:
            date_value = format_iso_utc(now or datetime.now(UTC))
        else:
            date_value = None

        excerpt = fields.pop("excerpt", None)
        if excerpt in (None, ""):
            excerpt = body[: settings.excerpt_length] + settings.excerpt_suffix
        else:
            excerpt = str(excerpt)

        return cls(title=title, slug=slug, date=date_value, excerpt=excerpt, **fields)


class Document(BaseModel):
    """A parsed content file: header metadata plus the Markdown body."""

    model_config = ConfigDict(frozen=True)

    metadata: Metadata
    body: str = ""
    path: str = Field(default="", description="Request path the document was loaded from")

    @property
    def slug(self) -> str:
        return self.metadata.slug

    @property
    def title(self) -> str:
        return self.metadata.title

    @property
    def date(self) -> str | None:
        return self.metadata.date

    @property
    def excerpt(self) -> str | None:
        return self.metadata.excerpt

    @property
    def published_at(self) -> datetime | None:
        """The parsed ``date``, or ``None`` when absent or not ISO-8601."""
        return parse_date(self.metadata.date)
