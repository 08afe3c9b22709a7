"""Helpers for parsing YAML front matter from Markdown content."""

from __future__ import annotations

from typing import Any

import frontmatter
import yaml

from content_resolver.exceptions import ParseError

_YAML_HANDLER = frontmatter.YAMLHandler()


def parse_document(content: str) -> tuple[dict[str, Any], str]:
    """Split a leading front matter block from the Markdown body.

    Uses the python-frontmatter YAML handler directly so that a malformed
    header is reported instead of being folded into the body.

    Args:
        content: Raw file text, optionally starting with a ``---`` delimited
            YAML block.

    Returns:
        Tuple of (metadata dict, body string). Content without a header
        yields an empty dict and the whole (stripped) text as body.

    Raises:
        ParseError: If the opening delimiter is never closed, the YAML is
            invalid, a value cannot be constructed, or the header is
            not a mapping.

    """
    text = content.lstrip("\ufeff").strip()
    if not _YAML_HANDLER.detect(text):
        return {}, text

    try:
        header, body = _YAML_HANDLER.split(text)
    except ValueError as exc:
        msg = "opening '---' delimiter has no matching closing delimiter"
        raise ParseError(msg) from exc

    try:
        raw_metadata = _YAML_HANDLER.load(header)
    except yaml.YAMLError as exc:
        raise ParseError(f"invalid YAML: {exc}") from exc
    except ValueError as exc:
        # Date-shaped scalars outside the calendar, e.g. 2024-13-45
        raise ParseError(f"invalid value: {exc}") from exc

    if raw_metadata is None:
        raw_metadata = {}
    if not isinstance(raw_metadata, dict):
        msg = f"header is a {type(raw_metadata).__name__}, not a mapping"
        raise ParseError(msg)

    return {str(key): value for key, value in raw_metadata.items()}, body.strip()
