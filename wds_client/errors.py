# =============================================================================
# WDS Live Client -- Error Types
# =============================================================================


class WDSError(Exception):
    """Base exception for all live client errors."""


class WDSConnectionError(WDSError):
    """Connection-related errors (failed to connect, illegal state change)."""


class WDSProtocolError(WDSError):
    """Wire protocol errors (malformed JSON, oversized frames)."""


class WDSPatchError(WDSError):
    """An in-place patch could not be applied; callers fall back to reload."""


class WDSNavigationError(WDSError):
    """The page could not be loaded from the given URL."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(f"Failed to load {url}: {reason}")
