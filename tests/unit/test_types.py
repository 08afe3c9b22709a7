"""Tests for metadata defaults and the document model."""

from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from content_resolver.config.settings import DocumentSettings
from content_resolver.types import Document, Metadata, parse_date

NOW = datetime(2025, 3, 4, 5, 6, 7, tzinfo=UTC)


def build(header, *, path="/content/posts/hello-world.md", body="Body", **kwargs):
    return Metadata.from_header(header, path=path, body=body, now=NOW, **kwargs)


def test_declared_fields_are_kept():
    metadata = build({"title": "Hello", "slug": "hi", "date": "2024-01-02", "excerpt": "Short"})

    assert metadata.title == "Hello"
    assert metadata.slug == "hi"
    assert metadata.date == "2024-01-02"
    assert metadata.excerpt == "Short"


def test_slug_is_derived_from_filename():
    assert build({"title": "Hello"}).slug == "hello-world"


def test_title_falls_back_to_slug():
    assert build({}).title == "hello-world"
    assert build({"slug": "declared"}).title == "declared"


def test_missing_date_defaults_to_resolution_time():
    assert build({}).date == "2025-03-04T05:06:07Z"


def test_missing_date_can_stay_missing():
    metadata = build({}, settings=DocumentSettings(default_missing_date=False))

    assert metadata.date is None


def test_yaml_dates_become_iso_strings():
    assert build({"date": date(2024, 1, 2)}).date == "2024-01-02"
    assert build({"date": datetime(2024, 1, 2, 3, 4)}).date == "2024-01-02T03:04:00"


def test_excerpt_defaults_to_body_prefix():
    body = "x" * 250

    assert build({}, body=body).excerpt == "x" * 100 + "..."
    assert build({}, body="short").excerpt == "short..."


def test_excerpt_length_and_suffix_are_configurable():
    settings = DocumentSettings(excerpt_length=3, excerpt_suffix=" [more]")

    assert build({}, body="abcdef", settings=settings).excerpt == "abc [more]"


def test_extra_fields_pass_through():
    metadata = build({"title": "Hello", "author": "Ada", "tags": ["a"]})

    assert metadata.extra == {"author": "Ada", "tags": ["a"]}
    assert metadata.author == "Ada"


def test_documents_are_immutable():
    document = Document(metadata=build({"title": "Hello"}), body="Body", path="/a.md")

    with pytest.raises(ValidationError):
        document.body = "changed"


def test_document_shortcuts():
    document = Document(metadata=build({"title": "Hello", "date": "2024-01-02"}), body="Body")

    assert document.slug == "hello-world"
    assert document.title == "Hello"
    assert document.published_at == datetime(2024, 1, 2, tzinfo=UTC)


@pytest.mark.parametrize("value", [None, "", "next tuesday", "2024-13-45"])
def test_parse_date_rejects_non_iso_values(value):
    assert parse_date(value) is None


def test_parse_date_keeps_offsets():
    assert parse_date("2024-01-02T10:00:00+02:00") == datetime(2024, 1, 2, 8, tzinfo=UTC)
