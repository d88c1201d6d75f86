"""World: the block heightmap players walk on and shelter under.

Terrain and roofs are stored as integer NumPy grids indexed
``[z, x]``.  The rain-map height of a column is the higher of its
terrain and its roof, i.e. the first surface rain would hit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from numpy.random import Generator

NO_ROOF = -1


@dataclass
class World:
    """A rectangular block world.

    Attributes:
        width: Number of columns along x.
        depth: Number of rows along z.
        sea_level: Terrain height before hills are added.
        terrain: Height of the topmost ground block per column.
        roofs: Height of the roof block per column, ``NO_ROOF`` if open.
    """

    width: int
    depth: int
    sea_level: int = 64
    terrain: NDArray[np.int64] = field(init=False, repr=False)
    roofs: NDArray[np.int64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Start with flat ground and open sky."""
        self.terrain = np.full((self.depth, self.width), self.sea_level, dtype=np.int64)
        self.roofs = np.full((self.depth, self.width), NO_ROOF, dtype=np.int64)

    def in_bounds(self, x: int, z: int) -> bool:
        """Return True if ``(x, z)`` lies on the map."""
        return 0 <= x < self.width and 0 <= z < self.depth

    def _check(self, x: int, z: int) -> None:
        if not self.in_bounds(x, z):
            msg = f"({x}, {z}) out of bounds for {self.width}x{self.depth}"
            raise IndexError(msg)

    def ground_height(self, x: int, z: int) -> int:
        """Return the terrain height of column ``(x, z)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        self._check(x, z)
        return int(self.terrain[z, x])

    def standing_height(self, x: int, z: int) -> float:
        """Feet height of a player standing on column ``(x, z)``."""
        return float(self.ground_height(x, z) + 1)

    def rain_map_height(self, x: int, z: int) -> int:
        """Height of the first rain-blocking block in column ``(x, z)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        self._check(x, z)
        return int(max(self.terrain[z, x], self.roofs[z, x]))

    def is_sheltered(self, x: int, z: int) -> bool:
        """Return True if a roof sits above the ground in this column."""
        self._check(x, z)
        return bool(self.roofs[z, x] > self.terrain[z, x])

    def populate(
        self,
        rng: Generator,
        *,
        num_hills: int = 6,
        hill_radius: int = 8,
        hill_height: tuple[int, int] = (2, 8),
    ) -> None:
        """Raise rounded hills across the map.

        Args:
            rng: Seeded random generator.
            num_hills: Number of hills to place.
            hill_radius: Radius of each hill in columns.
            hill_height: (min, max) peak height above sea level.
        """
        lo, hi = hill_height
        zz, xx = np.mgrid[0 : self.depth, 0 : self.width]
        for _ in range(num_hills):
            cx = int(rng.integers(0, self.width))
            cz = int(rng.integers(0, self.depth))
            peak = int(rng.integers(lo, hi + 1))
            dist = np.sqrt((xx - cx) ** 2 + (zz - cz) ** 2)
            # Linear falloff from the peak to the rim
            rise = np.clip(peak * (1.0 - dist / (hill_radius + 1)), 0, None)
            self.terrain = np.maximum(self.terrain, self.sea_level + rise.astype(np.int64))

    def build_roof(self, x0: int, z0: int, x1: int, z1: int, clearance: int = 3) -> None:
        """Put a flat roof over the rectangle ``[x0, x1] x [z0, z1]``.

        The roof sits ``clearance`` blocks above the highest ground under
        it.  Columns outside the map are ignored.

        Args:
            x0: First column.
            z0: First row.
            x1: Last column (inclusive).
            z1: Last row (inclusive).
            clearance: Blocks between the highest ground and the roof.
        """
        xs = slice(max(0, min(x0, x1)), min(self.width, max(x0, x1) + 1))
        zs = slice(max(0, min(z0, z1)), min(self.depth, max(z0, z1) + 1))
        ground = self.terrain[zs, xs]
        if ground.size == 0:
            return
        self.roofs[zs, xs] = int(ground.max()) + clearance

    def place_shelters(
        self,
        rng: Generator,
        count: int,
        *,
        size: tuple[int, int] = (2, 5),
    ) -> None:
        """Scatter ``count`` rectangular shelters over the map.

        Args:
            rng: Seeded random generator.
            count: Number of shelters.
            size: (min, max) side length in columns.
        """
        lo, hi = size
        for _ in range(count):
            w = int(rng.integers(lo, hi + 1))
            d = int(rng.integers(lo, hi + 1))
            x0 = int(rng.integers(0, max(1, self.width - w)))
            z0 = int(rng.integers(0, max(1, self.depth - d)))
            self.build_roof(x0, z0, x0 + w - 1, z0 + d - 1)
