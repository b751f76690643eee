# =============================================================================
# WDS Live Client -- Path Normalizer & Cache-Bust URL Builder
# =============================================================================

from __future__ import annotations

import re
import time
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from .constants import FRESHNESS_PARAM

_INDEX_SEGMENT_RE = re.compile(r"(^|/)index\.html?$", re.IGNORECASE)


class FreshnessClock:
    """Millisecond timestamps that never go backwards."""

    def __init__(self) -> None:
        self._last = 0

    def __call__(self) -> str:
        now = int(time.time() * 1000)
        if now < self._last:
            now = self._last
        self._last = now
        return str(now)


_default_clock = FreshnessClock()


def resolve(path: str, base: str) -> str:
    """Resolve *path* against *base* and return the absolute URL."""
    return urljoin(base, path)


def pathname(path: str, base: str) -> str:
    """Path component of *path* resolved against *base*."""
    return urlsplit(resolve(path, base)).path or "/"


def normalize_html_path(path: str, origin: str) -> str:
    """Canonical form of a page path, used to compare HTML notifications.

    ``/foo/index.html``, ``/foo/`` and ``/foo`` all normalize to ``/foo``;
    the root stays ``/``.
    """
    result = pathname(path, origin)
    # "/a/index.html/index.html" needs more than one pass to settle
    while True:
        stripped = _INDEX_SEGMENT_RE.sub(r"\1", result)
        if len(stripped) > 1:
            stripped = stripped.rstrip("/")
        if stripped == result:
            break
        result = stripped
    if not result.startswith("/"):
        result = f"/{result}"
    return result


def paths_match(message_path: str, current_path: str, origin: str) -> bool:
    return normalize_html_path(message_path, origin) == normalize_html_path(
        current_path, origin
    )


def with_freshness(url: str, token: str) -> str:
    """Set (or overwrite) the freshness query parameter on an absolute URL."""
    parts = urlsplit(url)
    query = [
        (k, v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
        if k != FRESHNESS_PARAM
    ]
    query.append((FRESHNESS_PARAM, token))
    return urlunsplit(parts._replace(query=urlencode(query)))


def cache_bust_url(
    path: str,
    origin: str,
    clock: FreshnessClock | None = None,
) -> str:
    """Absolute URL for *path* with a fresh ``_v`` parameter."""
    token = (clock or _default_clock)()
    return with_freshness(resolve(path, origin), token)
