"""Tests for the command line interface."""

import logging

import pytest
from rich.logging import RichHandler
from typer.testing import CliRunner

from content_resolver.cli import app
from content_resolver.logging_setup import configure_logging
from tests.helpers.site import ORIGIN, post

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_posts_lists_titles(site):
    site.add("/content/posts/index.txt", "a.md\nb.md\n", content_type="text/plain")
    site.add("/content/posts/a.md", post("Alpha", date="2024-01-02"))
    site.add("/content/posts/b.md", post("Beta", date="2024-01-01"))

    result = runner.invoke(app, ["--origin", ORIGIN, "posts"])

    assert result.exit_code == 0, result.output
    assert "Alpha" in result.output
    assert result.output.index("Alpha") < result.output.index("Beta")


def test_posts_without_content_exits_nonzero(site):
    result = runner.invoke(app, ["--origin", ORIGIN, "posts"])

    assert result.exit_code == 1


def test_post_prints_metadata_and_body(site):
    site.add("/content/posts/first-post.md", post("First", body="Hello [world](x)."))

    result = runner.invoke(app, ["--origin", ORIGIN, "post", "first-post"])

    assert result.exit_code == 0, result.output
    assert "First" in result.output
    assert "Hello [world](x)." in result.output


def test_missing_page_exits_nonzero(site):
    result = runner.invoke(app, ["--origin", ORIGIN, "page", "nowhere"])

    assert result.exit_code == 1
    assert "Page not found" in result.output


def test_discover_prints_base(site):
    site.add("/posts/first-post.md", post("First"))

    result = runner.invoke(app, ["--origin", ORIGIN, "discover"])

    assert result.exit_code == 0, result.output
    assert "/posts" in result.output


def test_invalid_origin_is_reported(site):
    result = runner.invoke(app, ["--origin", "not-a-url", "discover"])

    assert result.exit_code == 2


def test_configure_logging_installs_one_handler():
    first = configure_logging("DEBUG")
    second = configure_logging("WARNING")

    managed = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
    assert first is second
    assert managed == [first]
    assert logging.getLogger().level == logging.WARNING


def test_log_level_comes_from_the_environment(monkeypatch):
    monkeypatch.setenv("CONTENT_RESOLVER_LOG_LEVEL", "debug")
    configure_logging()

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_unknown_log_level_falls_back_to_info():
    configure_logging("chatty")

    assert logging.getLogger().level == logging.INFO
