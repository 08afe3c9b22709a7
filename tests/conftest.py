from __future__ import annotations

import pytest
import pytest_asyncio
import respx

from content_resolver.config.settings import HttpSettings, ResolverSettings
from content_resolver.resolver import ContentResolver
from tests.helpers.site import HOST, ORIGIN, FakeSite


@pytest.fixture
def site():
    """A fake content server; every request to ``ORIGIN`` is routed to it."""
    fake = FakeSite()
    with respx.mock(assert_all_called=False) as router:
        router.route(host=HOST).mock(side_effect=fake.handle)
        yield fake


@pytest.fixture
def settings() -> ResolverSettings:
    return ResolverSettings(http=HttpSettings(origin=ORIGIN))


@pytest_asyncio.fixture
async def resolver(site, settings):
    async with ContentResolver(settings) as instance:
        yield instance
