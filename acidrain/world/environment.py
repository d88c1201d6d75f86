"""Environment: precipitation over the world.

A global storm intensity rises suddenly and fades slowly.  A cloud-cover
field (0.0-1.0 per column) drifts east with the wind and scales the
storm locally, so rain starts and stops at different times for players
in different places.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from numpy.random import Generator

    from acidrain.world.player import Vec3
    from acidrain.world.world import World


@dataclass
class Environment:
    """Weather state that changes each server frame.

    Attributes:
        world: Map used for height queries and grid size.
        storm_chance: Per-frame probability that a new storm rolls in.
        rain_decay: Intensity lost per frame once a storm has peaked.
        cloud_drift_frames: Frames between one-column cloud shifts.
        frame: Frames seen so far.
        rain_intensity: Global storm strength (0.0-1.0).
        clouds: Cloud cover per column, indexed ``[z, x]``.
        loaded: False until the first update has generated clouds.
    """

    world: World
    storm_chance: float = 0.005
    rain_decay: float = 0.002
    cloud_drift_frames: int = 10
    frame: int = 0
    rain_intensity: float = 0.0
    clouds: NDArray[np.float64] = field(init=False, repr=False)
    loaded: bool = False

    def __post_init__(self) -> None:
        self.clouds = np.zeros((self.world.depth, self.world.width), dtype=np.float64)

    def update(self, rng: Generator) -> None:
        """Advance the weather by one frame.

        Args:
            rng: Seeded random generator.
        """
        if not self.loaded:
            self.clouds = self._generate_clouds(rng)
            self.loaded = True

        self.frame += 1
        if self.cloud_drift_frames > 0 and self.frame % self.cloud_drift_frames == 0:
            self.clouds = np.roll(self.clouds, 1, axis=1)

        if rng.random() < self.storm_chance:
            self.rain_intensity = max(self.rain_intensity, float(rng.uniform(0.2, 1.0)))
        elif self.rain_intensity > 0:
            self.rain_intensity = max(0.0, self.rain_intensity - self.rain_decay)

    def precipitation_at(self, pos: Vec3) -> float:
        """Rain intensity over the column containing ``pos``."""
        x, z = self._column(pos.x, pos.z)
        return self.rain_intensity * float(self.clouds[z, x])

    def surface_height_at(self, x: int, z: int) -> float:
        """Height of the first rain-blocking surface at ``(x, z)``."""
        return float(self.world.rain_map_height(x, z))

    def _column(self, x: float, z: float) -> tuple[int, int]:
        cx = min(max(int(x), 0), self.world.width - 1)
        cz = min(max(int(z), 0), self.world.depth - 1)
        return cx, cz

    def _generate_clouds(self, rng: Generator) -> NDArray[np.float64]:
        """Smooth random cover: white noise box-blurred, then stretched to 0-1."""
        noise = rng.random((self.world.depth, self.world.width))
        smooth = noise
        for _ in range(4):
            smooth = (
                smooth
                + np.roll(smooth, 1, axis=0)
                + np.roll(smooth, -1, axis=0)
                + np.roll(smooth, 1, axis=1)
                + np.roll(smooth, -1, axis=1)
            ) / 5.0
        lo, hi = float(smooth.min()), float(smooth.max())
        if hi - lo < 1e-9:
            return np.ones_like(smooth)
        return (smooth - lo) / (hi - lo)
