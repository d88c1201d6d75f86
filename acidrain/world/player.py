"""Player: a connected participant and their persistent record.

The ``attributes`` tree belongs to the player record, not to any
server-side system, and outlives a disconnect.  Systems that need to
remember something about a player across sessions write it there.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from acidrain.weather.interfaces import GameMode

if TYPE_CHECKING:
    from numpy.random import Generator

    from acidrain.weather.interfaces import DamageSource
    from acidrain.world.world import World


@dataclass
class Vec3:
    """A position in block space; ``y`` is up."""

    x: float
    y: float
    z: float


@dataclass
class AttributeTree:
    """Typed key/value storage attached to a player record."""

    values: dict[str, object] = field(default_factory=dict)

    def set_timestamp(self, key: str, value: int) -> None:
        self.values[key] = int(value)

    def get_timestamp(self, key: str, default: int | None = None) -> int | None:
        value = self.values.get(key)
        if value is None:
            return default
        return int(value)

    def __contains__(self, key: object) -> bool:
        return key in self.values


@dataclass
class Player:
    """A player connected to the server.

    Attributes:
        uid: Stable identity across sessions.
        display_name: Name shown in chat, None if the player has no tag.
        position: Feet position, None while the player has no body in the
            world (still loading in, or between death and respawn).
        game_mode: Survival, creative and so on.
        max_health: Health after a respawn.
        health: Current health.
        alive: False from the killing blow until respawn.
        attributes: Persistent per-player record.
        last_damage: Classification of the most recent hit.
        died_at_ms: World time of death, None while alive.
    """

    uid: str
    display_name: str | None = None
    position: Vec3 | None = None
    game_mode: GameMode = GameMode.SURVIVAL
    max_health: float = 15.0
    health: float = 15.0
    alive: bool = True
    attributes: AttributeTree = field(default_factory=AttributeTree)
    last_damage: DamageSource | None = None
    died_at_ms: int | None = None

    def receive_damage(self, source: DamageSource, amount: float) -> bool:
        """Apply ``amount`` damage.

        Args:
            source: Classification of the hit.
            amount: Health to remove (non-positive amounts do nothing).

        Returns:
            True if the hit landed.
        """
        if not self.alive or amount <= 0:
            return False
        self.last_damage = source
        self.health = max(0.0, self.health - amount)
        if self.health <= 0:
            self.alive = False
        return True

    def spawn_at(self, world: World, x: int, z: int) -> None:
        """Place the player standing on column ``(x, z)`` at full health."""
        self.position = Vec3(x + 0.5, world.standing_height(x, z), z + 0.5)
        self.health = self.max_health
        self.alive = True
        self.died_at_ms = None

    def wander(self, world: World, rng: Generator) -> None:
        """Take one step to a neighbouring column and stand on it."""
        if self.position is None:
            return
        angle = float(rng.uniform(0.0, 2.0 * math.pi))
        x = int(self.position.x) + round(math.cos(angle))
        z = int(self.position.z) + round(math.sin(angle))
        if not world.in_bounds(x, z):
            return
        self.position = Vec3(x + 0.5, world.standing_height(x, z), z + 0.5)
