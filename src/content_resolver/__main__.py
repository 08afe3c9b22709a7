"""Allow ``python -m content_resolver``."""

from content_resolver.cli import app

if __name__ == "__main__":
    app()
