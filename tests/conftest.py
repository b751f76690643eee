"""Shared fixtures: in-memory pages served through httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from wds_client.document import SoupDocument
from wds_client.page import HeadlessPage

ORIGIN = "http://127.0.0.1:3000"


class StepClock:
    """Freshness clock returning "1", "2", "3", ..."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        return str(self.calls)


class Site:
    """Tiny fake development server: path -> (status, body)."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, str]] = {}
        self.requests: list[httpx.Request] = []

    def serve(self, path: str, body: str, status: int = 200) -> None:
        self.routes[path] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get(request.url.path, (404, "Not Found"))
        return httpx.Response(status, text=body)

    def requested_paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def page_html(title: str = "Home", head: str = "", body: str = "<p>hi</p>") -> str:
    return (
        "<!DOCTYPE html><html><head>"
        f"<title>{title}</title>{head}"
        '<script id="__web_dev_server_config">'
        'window.__WEB_DEV_SERVER_CONFIG__ = {"wsPath":"/_live/ws","diffMode":true};'
        "</script>"
        '<script id="__web_dev_server_client" defer src="/_live/script.js"></script>'
        f"</head><body>{body}</body></html>"
    )


@pytest.fixture
def site() -> Site:
    return Site()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def make_page(site):
    """Build a HeadlessPage at *path* showing *html*, backed by ``site``."""

    def _make(path: str = "/", html: str | None = None) -> HeadlessPage:
        url = ORIGIN + path
        markup = html if html is not None else page_html()
        http = httpx.AsyncClient(transport=httpx.MockTransport(site.handler))
        return HeadlessPage(url, http=http, document=SoupDocument.parse(markup, url))

    return _make
