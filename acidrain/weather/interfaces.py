"""Interfaces: what the hazard core needs from its host.

The evaluator never touches the world, the chat transport or player
storage directly.  It talks to them through the small protocols below so
the host (or a test) can supply any implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from acidrain.world.player import Vec3


class GameMode(Enum):
    """How the world treats a player."""

    SURVIVAL = auto()
    CREATIVE = auto()
    SPECTATOR = auto()
    GUEST = auto()

    @property
    def takes_damage(self) -> bool:
        """Return True if environmental damage applies in this mode."""
        return self is GameMode.SURVIVAL


class DamageKind(Enum):
    """Where a hit came from."""

    WEATHER = auto()
    FALL = auto()
    ENTITY = auto()
    UNKNOWN = auto()


class DamageType(Enum):
    """What kind of harm a hit does."""

    POISON = auto()
    BLUNT = auto()
    HEAL = auto()


@dataclass(frozen=True)
class DamageSource:
    """Classification attached to every damage event.

    Attributes:
        source: Origin of the damage.
        type: Nature of the damage.
    """

    source: DamageKind = DamageKind.UNKNOWN
    type: DamageType = DamageType.BLUNT


ACID_RAIN_DAMAGE = DamageSource(source=DamageKind.WEATHER, type=DamageType.POISON)


class RandomSource(Protocol):
    """Anything with a uniform ``random()`` in [0, 1).

    ``numpy.random.Generator`` satisfies this.
    """

    def random(self) -> float: ...


class WeatherQuery(Protocol):
    """Precipitation and height-map lookups."""

    def precipitation_at(self, pos: Vec3) -> float: ...

    def surface_height_at(self, x: int, z: int) -> float: ...


class AttributeStore(Protocol):
    """Persistent per-player attributes keyed by string."""

    def set_timestamp(self, key: str, value: int) -> None: ...

    def get_timestamp(self, key: str, default: int | None = None) -> int | None: ...


class Participant(Protocol):
    """A connected player as seen by the hazard evaluator."""

    uid: str
    display_name: str | None
    position: Vec3 | None
    alive: bool
    game_mode: GameMode
    attributes: AttributeStore

    def receive_damage(self, source: DamageSource, amount: float) -> bool: ...


class Messenger(Protocol):
    """Chat delivery."""

    def notify(self, participant: Participant, text: str) -> None: ...

    def broadcast(self, text: str) -> None: ...
