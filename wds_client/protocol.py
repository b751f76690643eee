# =============================================================================
# WDS Live Client -- Wire Protocol
# =============================================================================
#
# Incoming (server -> client), JSON text frames:
#   {"type": "reload"}
#   {"type": "diff", "resource": "html" | "css" | <other>, "path": "<string>"}
#
# The client never sends application frames.
# =============================================================================

from __future__ import annotations

import json
from typing import Any

from .constants import MAX_MESSAGE_SIZE, MESSAGE_TYPE_DIFF, MESSAGE_TYPE_RELOAD
from .errors import WDSProtocolError
from .types import ChangeNotification, DiffNotification, ReloadNotification, ResourceKind

try:
    import orjson

    def _json_loads(data: str | bytes) -> Any:
        return orjson.loads(data)

except ImportError:

    def _json_loads(data: str | bytes) -> Any:
        return json.loads(data)


def decode_frame(data: str | bytes) -> Any:
    """Parse a raw socket frame as JSON.

    Raises:
        WDSProtocolError: The frame is oversized, not UTF-8, or not JSON.
    """
    size = len(data) if isinstance(data, bytes) else len(data.encode("utf-8"))
    if size > MAX_MESSAGE_SIZE:
        raise WDSProtocolError(f"Frame exceeds max size ({size} bytes)")
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise WDSProtocolError(f"Frame is not UTF-8: {exc}") from exc
    try:
        return _json_loads(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise WDSProtocolError(f"Malformed JSON: {exc}") from exc


def parse_notification(message: Any) -> ChangeNotification | None:
    """Turn a decoded frame into a notification.

    Returns ``None`` for anything that is not a record with a string
    ``type`` naming a known message type.
    """
    if not isinstance(message, dict):
        return None
    kind = message.get("type")
    if not isinstance(kind, str):
        return None

    if kind == MESSAGE_TYPE_RELOAD:
        return ReloadNotification()
    if kind == MESSAGE_TYPE_DIFF:
        path = message.get("path")
        return DiffNotification(
            resource=ResourceKind.from_wire(message.get("resource")),
            path=path if isinstance(path, str) and path else None,
        )
    return None
