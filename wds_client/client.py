# =============================================================================
# WDS Live Client -- Client
# =============================================================================
#
# Primary public API.  Wires page, diff applier, dispatcher and connection
# manager together; async context manager.
# =============================================================================

from __future__ import annotations

import asyncio
import time
from typing import Any
from urllib.parse import urljoin, urlsplit

import httpx

from ._logging import logger
from .config import ClientConfig
from .connection import ConnectionManager, Connector, RetryBackoff
from .constants import HEALTH_PATH, HEALTH_POLL_INTERVAL
from .diff import DiffApplier
from .dispatcher import MessageDispatcher
from .page import HeadlessPage
from .paths import FreshnessClock
from .types import ConnectionState


def socket_url(page_url: str, notification_path: str) -> str:
    """``wss://host/path`` for https pages, ``ws://host/path`` otherwise."""
    parts = urlsplit(page_url)
    scheme = "wss" if parts.scheme == "https" else "ws"
    return f"{scheme}://{parts.netloc}{notification_path}"


class LiveReloadClient:
    """Keeps a page in sync with a development server.

    Args:
        page: The page to patch or reload.
        config: Notification path and patch mode.  Defaults to
            ``ClientConfig()`` (``/_live/ws``, patch mode off).
        backoff: Reconnect delay state.
        connector: Socket factory override, mainly for tests.
        clock: Freshness token source for cache busting.

    Example::

        async with await LiveReloadClient.open("http://127.0.0.1:3000/") as client:
            await client.wait_closed()
    """

    def __init__(
        self,
        page: HeadlessPage,
        config: ClientConfig | None = None,
        *,
        backoff: RetryBackoff | None = None,
        connector: Connector | None = None,
        clock: FreshnessClock | None = None,
    ) -> None:
        self._page = page
        self._config = config or ClientConfig()
        self._applier = DiffApplier(page, clock=clock)
        self._dispatcher = MessageDispatcher(self._config, page, self._applier)
        self._connection = ConnectionManager(
            socket_url(page.url, self._config.notification_path),
            on_message=self._dispatcher.dispatch,
            backoff=backoff,
            connector=connector,
        )
        self._task: asyncio.Task[None] | None = None

    @classmethod
    async def open(
        cls,
        url: str,
        config: ClientConfig | None = None,
        *,
        http: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> LiveReloadClient:
        """Load *url* and build a client for it.

        Without an explicit *config*, the page's injected configuration
        carrier is used.
        """
        page = HeadlessPage(url, http=http)
        try:
            await page.load()
        except Exception:
            await page.close()
            raise
        if config is None:
            config = ClientConfig.from_document(page.document)
        return cls(page, config, **kwargs)

    # -- Context manager ------------------------------------------------------

    async def __aenter__(self) -> LiveReloadClient:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()
        await self._page.close()

    # -- Properties -----------------------------------------------------------

    @property
    def page(self) -> HeadlessPage:
        return self._page

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def state(self) -> ConnectionState:
        return self._connection.state

    @property
    def socket_url(self) -> str:
        return self._connection.url

    # -- Lifecycle ------------------------------------------------------------

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._connection.run())

    async def stop(self) -> None:
        await self._connection.stop()
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None

    async def wait_closed(self) -> None:
        """Block until the client is stopped."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    # -- Health ---------------------------------------------------------------

    async def check_health(self) -> bool:
        """True when the server answers its health endpoint with OK."""
        url = urljoin(self._page.origin, HEALTH_PATH)
        try:
            response = await self._page.get(url)
        except httpx.HTTPError as exc:
            logger.debug("Health check failed: %s", exc)
            return False
        return response.status_code == 200 and response.text.strip() == "OK"

    async def wait_until_healthy(self, timeout: float = 10.0) -> bool:
        """Poll the health endpoint until it answers or *timeout* expires."""
        deadline = time.monotonic() + timeout
        while True:
            if await self.check_health():
                return True
            if time.monotonic() >= deadline:
                return False
            await asyncio.sleep(HEALTH_POLL_INTERVAL)
