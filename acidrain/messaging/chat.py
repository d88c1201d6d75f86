"""ChatLog: in-process stand-in for the server chat transport."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from acidrain.weather.interfaces import Participant

logger = logging.getLogger(__name__)


def styled(text: str, color: str) -> str:
    """Wrap ``text`` in the chat markup for a coloured line."""
    return f'<font color="{color}">{text}</font>'


@dataclass(frozen=True)
class ChatMessage:
    """One delivered line.

    Attributes:
        recipient: Player uid, or None for a broadcast.
        text: Message body including any markup.
        world_ms: World time of delivery.
    """

    recipient: str | None
    text: str
    world_ms: int


@dataclass
class ChatLog:
    """Records every notification and broadcast.

    Attributes:
        clock: Returns the current world time in milliseconds.
        messages: Delivered lines, oldest first.
    """

    clock: Callable[[], int] = lambda: 0
    messages: list[ChatMessage] = field(default_factory=list)

    def notify(self, participant: Participant, text: str) -> None:
        """Send ``text`` to a single player."""
        self.messages.append(ChatMessage(participant.uid, text, self.clock()))
        logger.info("[to %s] %s", participant.uid, text)

    def broadcast(self, text: str) -> None:
        """Send ``text`` to everyone."""
        self.messages.append(ChatMessage(None, text, self.clock()))
        logger.info("[all] %s", text)

    def for_player(self, uid: str) -> list[ChatMessage]:
        """Return the lines addressed to ``uid`` (broadcasts excluded)."""
        return [m for m in self.messages if m.recipient == uid]

    def broadcasts(self) -> list[ChatMessage]:
        """Return the lines sent to everyone."""
        return [m for m in self.messages if m.recipient is None]

    def recent(self, n: int = 10) -> list[ChatMessage]:
        """Return the last ``n`` lines."""
        return self.messages[-n:]
