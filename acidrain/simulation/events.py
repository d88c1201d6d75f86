"""EventBus: lifecycle signals between the host and its systems.

The server sends two kinds of signal:

- Connection changes (``player_join``, ``player_leave``) go out with
  ``emit`` and reach subscribers before the call returns.  A player who
  leaves and rejoins between two frames is therefore never evaluated
  with the state of the old session.
- Deaths (``entity_death``) are raised while health is being changed.
  They are queued with ``publish`` and delivered by ``flush`` at the end
  of the frame, once every timer callback has returned.

Payloads:

- ``player_join``: ``uid``
- ``player_leave``: ``uid``
- ``entity_death``: ``player``, ``source``
"""

from __future__ import annotations

from typing import Any, Callable

Handler = Callable[[str, dict[str, Any]], None]


class EventBus:
    """Named signals with immediate or end-of-frame delivery.

    Handlers are called as ``handler(signal_name, data)`` in the order
    they subscribed.  A handler may subscribe or unsubscribe while a
    signal is being delivered; the change applies to the next signal.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, signal_name: str, handler: Handler) -> None:
        self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(self, signal_name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(signal_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, signal_name: str, **data: Any) -> None:
        """Deliver a signal now, ahead of anything still queued."""
        self._deliver(signal_name, data)

    def publish(self, signal_name: str, **data: Any) -> None:
        """Queue a signal for the next ``flush``."""
        self._queue.append((signal_name, data))

    def flush(self) -> int:
        """Deliver queued signals in publish order.

        Signals published by a handler during the flush wait for the
        next one.

        Returns:
            Number of signals delivered.
        """
        batch, self._queue = self._queue, []
        for signal_name, data in batch:
            self._deliver(signal_name, data)
        return len(batch)

    def clear(self) -> None:
        """Drop queued signals without delivering them."""
        self._queue.clear()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def _deliver(self, signal_name: str, data: dict[str, Any]) -> None:
        for handler in tuple(self._subscribers.get(signal_name, ())):
            handler(signal_name, data)
