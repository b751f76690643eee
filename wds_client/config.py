# =============================================================================
# WDS Live Client -- Configuration
# =============================================================================
#
# The development server injects a configuration carrier into every HTML page:
#
#   <script id="__web_dev_server_config">
#     window.__WEB_DEV_SERVER_CONFIG__ = {"wsPath": "/_live/ws", "diffMode": true};
#   </script>
#
# ClientConfig is the explicit form of that object, supplied once when the
# client is built.
# =============================================================================

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._logging import logger
from .constants import CONFIG_CARRIER_ID, CONFIG_GLOBAL_KEY, DEFAULT_NOTIFICATION_PATH
from .errors import WDSProtocolError
from .protocol import decode_frame

if TYPE_CHECKING:
    from .document import LiveDocument

_ASSIGNMENT_RE = re.compile(
    r"window\.%s\s*=\s*(\{.*\})\s*;?\s*$" % re.escape(CONFIG_GLOBAL_KEY),
    re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Live client configuration.

    Attributes:
        notification_path: Path of the notification socket on the page host.
        patch_mode_enabled: Apply HTML/CSS changes in place instead of
            reloading the page.
    """

    notification_path: str = DEFAULT_NOTIFICATION_PATH
    patch_mode_enabled: bool = False

    @classmethod
    def from_mapping(cls, raw: Any) -> ClientConfig:
        """Build from the injected ``{wsPath, diffMode}`` object."""
        if not isinstance(raw, Mapping):
            return cls()
        ws_path = raw.get("wsPath")
        return cls(
            notification_path=(
                ws_path if isinstance(ws_path, str) else DEFAULT_NOTIFICATION_PATH
            ),
            patch_mode_enabled=bool(raw.get("diffMode")),
        )

    @classmethod
    def from_document(cls, document: LiveDocument) -> ClientConfig:
        """Read the configuration carrier script of a served page.

        Missing or unreadable carriers yield the defaults.
        """
        carriers = document.select(f"script#{CONFIG_CARRIER_ID}")
        if not carriers:
            return cls()

        match = _ASSIGNMENT_RE.search(document.text_content(carriers[0]).strip())
        if match is None:
            logger.warning("Configuration carrier has an unexpected shape")
            return cls()

        try:
            raw = decode_frame(match.group(1))
        except WDSProtocolError as exc:
            logger.warning("Configuration carrier is not valid JSON: %s", exc)
            return cls()
        return cls.from_mapping(raw)
