# =============================================================================
# WDS Live Client -- Connection Manager
# =============================================================================
#
# Notification socket lifecycle as a state machine:
#
#   CONNECTING --opened--> OPEN --frame_received--> OPEN
#   CONNECTING|OPEN --close_observed--> CLOSED_RETRY_PENDING
#   CLOSED_RETRY_PENDING --retry_timer_fired--> CONNECTING
#
# An observed error is handled as an immediate close.  Retries never stop;
# the delay goes 500, 1000, 2000, 4000, 8000, 8000, ... ms and resets on
# every successful open.
# =============================================================================

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import websockets.asyncio.client

from ._logging import logger
from .constants import (
    CONNECTION_TIMEOUT,
    MAX_MESSAGE_SIZE,
    RECONNECT_FACTOR,
    RECONNECT_INITIAL_DELAY_MS,
    RECONNECT_MAX_DELAY_MS,
)
from .errors import WDSConnectionError, WDSProtocolError
from .protocol import decode_frame
from .types import ConnectionState

# Opens a socket to the given URL; used as ``async with connector(url) as ws``
Connector = Callable[[str], Any]
Sleep = Callable[[float], Awaitable[Any]]

_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.CONNECTING: frozenset(
        {ConnectionState.OPEN, ConnectionState.CLOSED_RETRY_PENDING}
    ),
    ConnectionState.OPEN: frozenset({ConnectionState.CLOSED_RETRY_PENDING}),
    ConnectionState.CLOSED_RETRY_PENDING: frozenset({ConnectionState.CONNECTING}),
}


def default_connector(url: str) -> Any:
    return websockets.asyncio.client.connect(
        url,
        max_size=MAX_MESSAGE_SIZE,
        open_timeout=CONNECTION_TIMEOUT,
    )


class RetryBackoff:
    """Bounded doubling reconnect delay, in milliseconds.

    Args:
        initial_ms: Delay after the first failure and after every reset.
        max_ms: Ceiling for the doubled delay.
    """

    def __init__(
        self,
        initial_ms: int = RECONNECT_INITIAL_DELAY_MS,
        max_ms: int = RECONNECT_MAX_DELAY_MS,
    ) -> None:
        self._initial_ms = initial_ms
        self._max_ms = max_ms
        self._current_ms = initial_ms

    @property
    def current_ms(self) -> int:
        return self._current_ms

    def next_delay(self) -> int:
        """Return the delay for this outage, then double it (capped)."""
        delay = self._current_ms
        self._current_ms = min(self._current_ms * RECONNECT_FACTOR, self._max_ms)
        return delay

    def reset(self) -> None:
        self._current_ms = self._initial_ms


class ConnectionManager:
    """Owns the notification socket, its state and the retry delay.

    Decoded frames are handed to *on_message*; a coroutine result is run as
    a background task so a slow patch never blocks the socket.

    Args:
        url: ``ws://`` or ``wss://`` notification endpoint.
        on_message: Receives every successfully decoded frame.
        backoff: Retry delay state (default: 500 ms doubling to 8000 ms).
        connector: Socket factory, ``websockets`` by default.
        sleep: Timer used between attempts, ``asyncio.sleep`` by default.
        on_state_change: Called with each new state.
    """

    def __init__(
        self,
        url: str,
        *,
        on_message: Callable[[Any], Any],
        backoff: RetryBackoff | None = None,
        connector: Connector | None = None,
        sleep: Sleep | None = None,
        on_state_change: Callable[[ConnectionState], Any] | None = None,
    ) -> None:
        self._url = url
        self._on_message = on_message
        self._backoff = backoff or RetryBackoff()
        self._connector = connector or default_connector
        self._sleep = sleep or asyncio.sleep
        self._on_state_change = on_state_change

        self._state = ConnectionState.CONNECTING
        self._stopped = False
        self._background_tasks: set[asyncio.Task[Any]] = set()

    # -- Properties -----------------------------------------------------------

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def retry_delay_ms(self) -> int:
        return self._backoff.current_ms

    @property
    def is_open(self) -> bool:
        return self._state == ConnectionState.OPEN

    # -- Run loop -------------------------------------------------------------

    async def run(self) -> None:
        """Connect, read frames and reconnect until :meth:`stop` is called."""
        while not self._stopped:
            try:
                async with self._connector(self._url) as ws:
                    self.opened()
                    async for frame in ws:
                        self.frame_received(frame)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                self.error_observed(exc)

            if self._stopped:
                break
            delay_ms = self.close_observed()
            await self._sleep(delay_ms / 1000)
            if self._stopped:
                break
            self.retry_timer_fired()

    async def stop(self) -> None:
        """Stop reconnecting and cancel in-flight message handlers."""
        self._stopped = True
        tasks = list(self._background_tasks)
        for task in tasks:
            task.cancel()
        self._background_tasks.clear()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # -- Transition triggers --------------------------------------------------

    def opened(self) -> None:
        self._set_state(ConnectionState.OPEN)
        self._backoff.reset()
        logger.info("Connected to %s", self._url)

    def frame_received(self, data: str | bytes) -> None:
        try:
            message = decode_frame(data)
        except WDSProtocolError as exc:
            logger.warning("Received malformed message: %s", exc)
            return

        try:
            result = self._on_message(message)
        except Exception as exc:
            logger.error("Message handler error: %s", exc)
            return
        if asyncio.iscoroutine(result):
            self._fire_task(result)

    def error_observed(self, exc: BaseException) -> None:
        logger.debug("Socket error (%s), closing: %s", type(exc).__name__, exc)

    def close_observed(self) -> int:
        """Enter the retry-pending state and return the delay (ms)."""
        self._set_state(ConnectionState.CLOSED_RETRY_PENDING)
        delay_ms = self._backoff.next_delay()
        logger.info("Disconnected, reconnecting in %d ms", delay_ms)
        return delay_ms

    def retry_timer_fired(self) -> None:
        self._set_state(ConnectionState.CONNECTING)

    # -- Internals ------------------------------------------------------------

    def _fire_task(self, coro: Any) -> None:
        """Schedule a coroutine with a strong reference to prevent GC."""
        task = asyncio.ensure_future(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._background_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Message handler error: %s", task.exception())

    def _set_state(self, new_state: ConnectionState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise WDSConnectionError(
                f"Illegal transition {self._state.value} -> {new_state.value}"
            )
        old = self._state
        self._state = new_state
        logger.debug("State: %s -> %s", old.value, new_state.value)
        if self._on_state_change:
            self._on_state_change(new_state)
