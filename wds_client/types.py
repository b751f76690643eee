# =============================================================================
# WDS Live Client -- Type Definitions
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConnectionState(str, Enum):
    """Notification socket lifecycle state.

    Flow: CONNECTING -> OPEN -> CLOSED_RETRY_PENDING -> CONNECTING ...
    A failed attempt goes straight from CONNECTING to CLOSED_RETRY_PENDING.
    There is no terminal state; retries continue for the page lifetime.
    """

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED_RETRY_PENDING = "closed-retry-pending"


class ResourceKind(str, Enum):
    """Kind of changed resource carried by a ``diff`` notification."""

    HTML = "html"
    CSS = "css"
    OTHER = "other"

    @classmethod
    def from_wire(cls, value: object) -> ResourceKind:
        if value == cls.HTML.value:
            return cls.HTML
        if value == cls.CSS.value:
            return cls.CSS
        return cls.OTHER


@dataclass(frozen=True, slots=True)
class ReloadNotification:
    """``{"type": "reload"}`` -- reload the page unconditionally."""


@dataclass(frozen=True, slots=True)
class DiffNotification:
    """``{"type": "diff", "resource": ..., "path": ...}``.

    Attributes:
        resource: Classified resource kind; unknown values map to OTHER.
        path: Web path of the changed file, ``None`` when absent or not a
            string.
    """

    resource: ResourceKind
    path: str | None = None


ChangeNotification = ReloadNotification | DiffNotification
