"""Markdown helpers."""

from content_resolver.markdown.frontmatter import parse_document

__all__ = ["parse_document"]
