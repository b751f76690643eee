# =============================================================================
# WDS Live Client -- Diff Applier
# =============================================================================
#
# html -- fetch the changed page (cache-busted, no-store), parse, merge
# css  -- rewrite the href of every matching stylesheet link
#
# Any failure, ambiguity or missing path degrades to a full reload.
# =============================================================================

from __future__ import annotations

from typing import TYPE_CHECKING

from ._logging import logger
from .constants import STYLESHEET_SELECTOR
from .document import SoupDocument
from .errors import WDSNavigationError
from .merge import merge_document
from .paths import FreshnessClock, cache_bust_url, pathname, resolve, with_freshness

if TYPE_CHECKING:
    from .document import Page


class DiffApplier:
    """Applies change notifications to a page.

    Args:
        page: The page being kept up to date.
        clock: Source of freshness tokens (default: wall-clock milliseconds).
    """

    def __init__(self, page: Page, *, clock: FreshnessClock | None = None) -> None:
        self._page = page
        self._clock = clock or FreshnessClock()
        # Bumped by every HTML diff and full reload; older results are dropped
        self._html_generation = 0

    async def full_reload(self) -> None:
        """Replace the current history entry with a cache-busted reload."""
        # HTML diffs still in flight must not land on the reloaded document
        self._html_generation += 1
        url = cache_bust_url(self._page.pathname, self._page.origin, self._clock)
        try:
            await self._page.replace(url)
        except WDSNavigationError as exc:
            logger.error("Full reload failed: %s", exc)

    async def apply_html(self, path: str | None) -> bool:
        """Fetch *path* and merge it into the live document.

        Returns True when the document was patched in place.
        """
        if not path:
            await self.full_reload()
            return False

        self._html_generation += 1
        generation = self._html_generation
        url = cache_bust_url(path, self._page.origin, self._clock)

        try:
            text = await self._page.fetch_text(url)
            if generation != self._html_generation:
                logger.debug("Discarding superseded HTML diff for %s", path)
                return False
            fetched = SoupDocument.parse(text, url)
            merge_document(self._page.document, fetched)
        except Exception as exc:
            if generation != self._html_generation:
                logger.debug("Superseded HTML diff for %s failed: %s", path, exc)
                return False
            logger.error("Failed to apply HTML diff for %s: %s", path, exc)
            await self.full_reload()
            return False

        logger.info("Patched %s in place", path)
        return True

    async def apply_css(self, path: str | None) -> bool:
        """Refresh every stylesheet link that points at *path*.

        Returns True when at least one link was refreshed.
        """
        if not path:
            await self.full_reload()
            return False

        document = self._page.document
        target = pathname(path, self._page.origin)
        updated = 0

        for link in document.select(STYLESHEET_SELECTOR):
            href = document.get_attribute(link, "href")
            if href is None:
                continue
            absolute = resolve(href, self._page.url)
            if pathname(absolute, self._page.origin) != target:
                continue
            document.set_attribute(link, "href", with_freshness(absolute, self._clock()))
            updated += 1

        if not updated:
            logger.info("No stylesheet link matches %s, reloading", path)
            await self.full_reload()
            return False

        logger.info("Refreshed %d stylesheet(s) for %s", updated, path)
        return True
