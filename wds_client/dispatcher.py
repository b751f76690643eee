# =============================================================================
# WDS Live Client -- Message Dispatcher
# =============================================================================
#
#   reload                      -> full reload (patch mode irrelevant)
#   diff, patch mode off        -> full reload
#   diff/html, path matches     -> HTML diff
#   diff/html, other page       -> skipped
#   diff/css                    -> CSS diff
#   diff/<other> or no path     -> full reload
#   anything else               -> ignored
# =============================================================================

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._logging import logger
from .paths import paths_match
from .protocol import parse_notification
from .types import DiffNotification, ReloadNotification, ResourceKind

if TYPE_CHECKING:
    from .config import ClientConfig
    from .diff import DiffApplier
    from .document import Page


class MessageDispatcher:
    """Routes decoded notifications to the diff applier or a full reload."""

    def __init__(self, config: ClientConfig, page: Page, applier: DiffApplier) -> None:
        self._config = config
        self._page = page
        self._applier = applier

    async def dispatch(self, message: Any) -> None:
        notification = parse_notification(message)

        if isinstance(notification, ReloadNotification):
            await self._applier.full_reload()
        elif isinstance(notification, DiffNotification):
            await self._dispatch_diff(notification)

    async def _dispatch_diff(self, notification: DiffNotification) -> None:
        if not self._config.patch_mode_enabled:
            await self._applier.full_reload()
            return

        path = notification.path
        if path is None:
            await self._applier.full_reload()
            return

        if notification.resource is ResourceKind.HTML:
            current = self._page.pathname
            if not paths_match(path, current, self._page.origin):
                logger.debug(
                    "Skipping HTML diff for non-matching path %s (viewing %s)",
                    path,
                    current,
                )
                return
            await self._applier.apply_html(path)
        elif notification.resource is ResourceKind.CSS:
            await self._applier.apply_css(path)
        else:
            await self._applier.full_reload()
