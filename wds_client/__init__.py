"""Headless live-reload client for a development web server.

Keeps a page in sync with the server's change notifications: full reloads
for ``reload`` messages, in-place HTML/CSS patches for ``diff`` messages
when patch mode is on.

Usage::

    from wds_client import watch

    async with await watch("http://127.0.0.1:3000/about/") as client:
        await client.wait_closed()

Optional extras::

    pip install wds-client[fast]   # orjson frame decoding
"""

from ._version import __version__
from .client import LiveReloadClient, socket_url
from .config import ClientConfig
from .connection import ConnectionManager, RetryBackoff
from .diff import DiffApplier
from .dispatcher import MessageDispatcher
from .document import LiveDocument, Page, SoupDocument
from .errors import (
    WDSConnectionError,
    WDSError,
    WDSNavigationError,
    WDSPatchError,
    WDSProtocolError,
)
from .page import HeadlessPage
from .paths import cache_bust_url, normalize_html_path
from .types import (
    ChangeNotification,
    ConnectionState,
    DiffNotification,
    ReloadNotification,
    ResourceKind,
)


async def watch(
    url: str,
    config: ClientConfig | None = None,
    **kwargs,
) -> LiveReloadClient:
    """Load *url* and return a client bound to it.

    Use the result as an async context manager.  Keyword arguments are
    forwarded to :class:`LiveReloadClient`.

    Args:
        url: Page URL on the development server.
        config: Overrides the configuration injected into the page.

    Raises:
        WDSNavigationError: If the page cannot be loaded.
    """
    return await LiveReloadClient.open(url, config, **kwargs)


__all__ = [
    "__version__",
    "watch",
    "LiveReloadClient",
    "socket_url",
    "ClientConfig",
    "ConnectionManager",
    "RetryBackoff",
    "DiffApplier",
    "MessageDispatcher",
    "LiveDocument",
    "Page",
    "SoupDocument",
    "HeadlessPage",
    "cache_bust_url",
    "normalize_html_path",
    "ChangeNotification",
    "ConnectionState",
    "DiffNotification",
    "ReloadNotification",
    "ResourceKind",
    "WDSError",
    "WDSConnectionError",
    "WDSProtocolError",
    "WDSPatchError",
    "WDSNavigationError",
]
