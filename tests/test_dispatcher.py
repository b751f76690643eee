"""Tests for notification routing."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from wds_client.config import ClientConfig
from wds_client.dispatcher import MessageDispatcher

PATCH = ClientConfig(patch_mode_enabled=True)
NO_PATCH = ClientConfig(patch_mode_enabled=False)


@pytest.fixture
def applier():
    a = MagicMock()
    a.full_reload = AsyncMock()
    a.apply_html = AsyncMock(return_value=True)
    a.apply_css = AsyncMock(return_value=True)
    return a


@pytest.fixture
def dispatcher_for(make_page, applier):
    def _make(config: ClientConfig, path: str = "/about") -> MessageDispatcher:
        return MessageDispatcher(config, make_page(path), applier)

    return _make


def _nothing_called(applier) -> bool:
    return not (
        applier.full_reload.called
        or applier.apply_html.called
        or applier.apply_css.called
    )


class TestReload:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("config", [PATCH, NO_PATCH])
    async def test_reload_always_reloads(self, dispatcher_for, applier, config):
        await dispatcher_for(config).dispatch(
            {"type": "reload", "resource": "html", "path": "/about"}
        )
        applier.full_reload.assert_awaited_once()
        applier.apply_html.assert_not_called()


class TestDiffWithoutPatchMode:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource", ["html", "css", "js"])
    async def test_falls_back_to_reload(self, dispatcher_for, applier, resource):
        await dispatcher_for(NO_PATCH).dispatch(
            {"type": "diff", "resource": resource, "path": "/x"}
        )
        applier.full_reload.assert_awaited_once()
        applier.apply_html.assert_not_called()
        applier.apply_css.assert_not_called()


class TestHtmlDiff:
    @pytest.mark.asyncio
    async def test_matching_path_applies_diff(self, dispatcher_for, applier):
        await dispatcher_for(PATCH, "/about").dispatch(
            {"type": "diff", "resource": "html", "path": "/about/"}
        )
        applier.apply_html.assert_awaited_once_with("/about/")
        applier.full_reload.assert_not_called()

    @pytest.mark.asyncio
    async def test_index_file_matches_directory_page(self, dispatcher_for, applier):
        await dispatcher_for(PATCH, "/docs/").dispatch(
            {"type": "diff", "resource": "html", "path": "/docs/index.html"}
        )
        applier.apply_html.assert_awaited_once_with("/docs/index.html")

    @pytest.mark.asyncio
    async def test_other_page_is_skipped(self, dispatcher_for, applier):
        await dispatcher_for(PATCH, "/about").dispatch(
            {"type": "diff", "resource": "html", "path": "/contact/"}
        )
        assert _nothing_called(applier)

    @pytest.mark.asyncio
    async def test_missing_path_reloads(self, dispatcher_for, applier):
        await dispatcher_for(PATCH).dispatch({"type": "diff", "resource": "html"})
        applier.full_reload.assert_awaited_once()
        applier.apply_html.assert_not_called()


class TestCssDiff:
    @pytest.mark.asyncio
    async def test_css_is_not_path_gated(self, dispatcher_for, applier):
        await dispatcher_for(PATCH, "/about").dispatch(
            {"type": "diff", "resource": "css", "path": "/styles/app.css"}
        )
        applier.apply_css.assert_awaited_once_with("/styles/app.css")

    @pytest.mark.asyncio
    async def test_missing_path_reloads(self, dispatcher_for, applier):
        await dispatcher_for(PATCH).dispatch({"type": "diff", "resource": "css"})
        applier.full_reload.assert_awaited_once()
        applier.apply_css.assert_not_called()


class TestOtherMessages:
    @pytest.mark.asyncio
    async def test_unknown_resource_reloads(self, dispatcher_for, applier):
        await dispatcher_for(PATCH).dispatch(
            {"type": "diff", "resource": "js", "path": "/app.js"}
        )
        applier.full_reload.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "message",
        [None, 42, "reload", [], {}, {"type": None}, {"type": "hello"}],
    )
    async def test_ignored(self, dispatcher_for, applier, message):
        await dispatcher_for(PATCH).dispatch(message)
        assert _nothing_called(applier)
