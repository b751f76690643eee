"""Tests for HeadlessPage."""

import pytest

from tests.conftest import ORIGIN, page_html
from wds_client.document import Page
from wds_client.errors import WDSNavigationError


class TestLocation:
    def test_location_parts(self, make_page):
        page = make_page("/docs/guide.html?x=1#top")
        assert page.origin == ORIGIN
        assert page.pathname == "/docs/guide.html"

    def test_satisfies_protocol(self, make_page):
        assert isinstance(make_page("/"), Page)


class TestNavigation:
    @pytest.mark.asyncio
    async def test_load_parses_document(self, site, make_page):
        site.serve("/", page_html("Loaded"))
        page = make_page("/")
        await page.load()
        assert page.document.title == "Loaded"

    @pytest.mark.asyncio
    async def test_replace_does_not_push_history(self, site, make_page):
        site.serve("/a", page_html("A"))
        page = make_page("/a")
        await page.replace(f"{ORIGIN}/a?_v=1")
        await page.replace(f"{ORIGIN}/a?_v=2")
        assert page.history == [f"{ORIGIN}/a?_v=2"]
        assert page.url == f"{ORIGIN}/a?_v=2"
        assert page.reload_count == 2

    @pytest.mark.asyncio
    async def test_failed_replace_keeps_location(self, site, make_page):
        page = make_page("/a", page_html("A"))
        before = page.document
        with pytest.raises(WDSNavigationError):
            await page.replace(f"{ORIGIN}/gone?_v=1")
        assert page.url == f"{ORIGIN}/a"
        assert page.history == [f"{ORIGIN}/a"]
        assert page.document is before
        assert page.reload_count == 0

    @pytest.mark.asyncio
    async def test_load_failure(self, make_page):
        page = make_page("/missing")
        with pytest.raises(WDSNavigationError) as info:
            await page.load()
        assert info.value.url == f"{ORIGIN}/missing"

    @pytest.mark.asyncio
    async def test_fetch_bypasses_caches(self, site, make_page):
        site.serve("/x", "body")
        page = make_page("/")
        assert await page.fetch_text(f"{ORIGIN}/x") == "body"
        headers = site.requests[0].headers
        assert headers["cache-control"] == "no-store"
        assert headers["pragma"] == "no-cache"
