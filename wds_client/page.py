# =============================================================================
# WDS Live Client -- Headless Page
# =============================================================================
#
# A browsing context without a rendering engine: the current location, a
# single-entry-per-navigation history and a parsed SoupDocument.  Network
# access goes through one shared httpx.AsyncClient.
# =============================================================================

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

import httpx

from ._logging import logger
from .constants import HTTP_TIMEOUT
from .document import SoupDocument
from .errors import WDSNavigationError

_NO_CACHE_HEADERS = {"Cache-Control": "no-store", "Pragma": "no-cache"}


class HeadlessPage:
    """Page implementation backed by httpx and BeautifulSoup.

    Args:
        url: Absolute URL of the page.
        http: Shared HTTP client.  One is created (and owned) when omitted.
        document: Already-parsed document for *url*; fetched by :meth:`load`
            otherwise.
    """

    def __init__(
        self,
        url: str,
        *,
        http: httpx.AsyncClient | None = None,
        document: SoupDocument | None = None,
    ) -> None:
        self._url = url
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=HTTP_TIMEOUT)
        self._document = document or SoupDocument.parse("", url)
        self.history: list[str] = [url]
        self.reload_count = 0

    async def __aenter__(self) -> HeadlessPage:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # -- Location -------------------------------------------------------------

    @property
    def url(self) -> str:
        return self._url

    @property
    def origin(self) -> str:
        parts = urlsplit(self._url)
        return f"{parts.scheme}://{parts.netloc}"

    @property
    def pathname(self) -> str:
        return urlsplit(self._url).path or "/"

    @property
    def document(self) -> SoupDocument:
        return self._document

    # -- Navigation -----------------------------------------------------------

    async def load(self) -> SoupDocument:
        """Fetch the current URL and swap in the parsed document."""
        try:
            text = await self.fetch_text(self._url)
        except httpx.HTTPError as exc:
            raise WDSNavigationError(self._url, str(exc)) from exc
        self._document = SoupDocument.parse(text, self._url)
        return self._document

    async def replace(self, url: str) -> None:
        """Navigate to *url* without pushing a new history entry.

        On failure the location and history are left as they were.
        """
        logger.info("Reloading %s", url)
        previous, self._url = self._url, url
        try:
            await self.load()
        except WDSNavigationError:
            self._url = previous
            raise
        self.history[-1] = url
        self.reload_count += 1

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._http.get(url, **kwargs)

    async def fetch_text(self, url: str) -> str:
        response = await self.get(url, headers=_NO_CACHE_HEADERS)
        response.raise_for_status()
        return response.text
