"""TickTimer: fixed-interval listeners driven by world time.

The host calls ``advance`` once per frame with the current world time.
A listener fires when its interval has elapsed since it last fired.  If
the host falls behind, missed firings are dropped, not replayed: one
late call fires a listener once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], None]


@dataclass
class _Listener:
    callback: TickCallback
    interval_ms: int
    last_ms: int
    running: bool = False


class TickTimer:
    """Registry of periodic callbacks.

    Attributes:
        now_ms: World time seen by the last ``advance`` call.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self.now_ms = start_ms
        self._listeners: dict[int, _Listener] = {}
        self._next_id = 1

    def register(self, callback: TickCallback, interval_ms: int) -> int:
        """Call ``callback`` every ``interval_ms`` of world time.

        Args:
            callback: Receives seconds elapsed since its previous call.
            interval_ms: Period in milliseconds.

        Returns:
            Listener id for ``unregister``.

        Raises:
            ValueError: If ``interval_ms`` is not positive.
        """
        if interval_ms <= 0:
            msg = f"interval_ms must be > 0, got {interval_ms}"
            raise ValueError(msg)
        listener_id = self._next_id
        self._next_id += 1
        self._listeners[listener_id] = _Listener(callback, interval_ms, self.now_ms)
        return listener_id

    def unregister(self, listener_id: int) -> None:
        self._listeners.pop(listener_id, None)

    def advance(self, now_ms: int) -> int:
        """Fire every listener whose interval has elapsed.

        Args:
            now_ms: Current world time in milliseconds.

        Returns:
            Number of callbacks fired.
        """
        self.now_ms = now_ms
        fired = 0
        for listener in list(self._listeners.values()):
            elapsed = now_ms - listener.last_ms
            if elapsed < listener.interval_ms or listener.running:
                continue
            if elapsed >= 2 * listener.interval_ms:
                logger.debug(
                    "Listener %r running late by %d ms, dropping missed ticks",
                    listener.callback,
                    elapsed - listener.interval_ms,
                )
            listener.last_ms = now_ms
            listener.running = True
            try:
                listener.callback(elapsed / 1000.0)
            finally:
                listener.running = False
            fired += 1
        return fired

    def __len__(self) -> int:
        return len(self._listeners)
