"""Config: load hazard and host parameters from YAML files.

Two layers live here.  ``HazardConfig`` holds the acid-rain tunables and
is read once at startup, then never changes.  ``SimulationConfig`` holds
the host-world knobs (map size, storm frequency, player count) used by
the demo server and nests a ``HazardConfig``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HazardConfig:
    """Acid-rain configuration.

    Attributes:
        damage_per_tick: HP removed from an exposed player each tick.
        min_rain_intensity: Precipitation at or above this counts as rain.
        event_chance: Probability that a rain spell turns acidic.
        tick_interval_ms: Milliseconds between hazard evaluations.
        warning_color: Colour token for the danger notification.
        safe_color: Colour token for the all-clear notification.

    Raises:
        ValueError: If a value is outside its allowed range.
    """

    damage_per_tick: float = 0.25
    min_rain_intensity: float = 0.05
    event_chance: float = 0.1
    tick_interval_ms: int = 2000
    warning_color: str = "#841414"
    safe_color: str = "#148421"

    def __post_init__(self) -> None:
        if self.damage_per_tick < 0:
            msg = f"damage_per_tick must be >= 0, got {self.damage_per_tick}"
            raise ValueError(msg)
        if self.min_rain_intensity < 0:
            msg = f"min_rain_intensity must be >= 0, got {self.min_rain_intensity}"
            raise ValueError(msg)
        if not 0.0 <= self.event_chance <= 1.0:
            msg = f"event_chance must lie in [0, 1], got {self.event_chance}"
            raise ValueError(msg)
        if self.tick_interval_ms <= 0:
            msg = f"tick_interval_ms must be > 0, got {self.tick_interval_ms}"
            raise ValueError(msg)

    @classmethod
    def from_dict(cls, data: dict) -> HazardConfig:
        """Build a config from a mapping, defaulting missing keys."""
        return cls(
            damage_per_tick=float(data.get("damage_per_tick", cls.damage_per_tick)),
            min_rain_intensity=float(
                data.get("min_rain_intensity", cls.min_rain_intensity),
            ),
            event_chance=float(data.get("event_chance", cls.event_chance)),
            tick_interval_ms=int(data.get("tick_interval_ms", cls.tick_interval_ms)),
            warning_color=str(data.get("warning_color", cls.warning_color)),
            safe_color=str(data.get("safe_color", cls.safe_color)),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> HazardConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated HazardConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If a value is out of range.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def to_yaml(self, path: str | Path) -> None:
        """Write this configuration to ``path``."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w") as f:
            yaml.safe_dump(asdict(self), f, sort_keys=False)


def load_hazard_config(path: str | Path) -> HazardConfig:
    """Load the hazard config, falling back to defaults, then store it.

    A missing, unreadable or invalid file never stops the server: the
    defaults are used instead and written back so the operator has a
    file to edit next time.

    Args:
        path: Location of the hazard YAML file.

    Returns:
        The effective configuration.
    """
    path = Path(path)
    try:
        config = HazardConfig.from_yaml(path)
    except FileNotFoundError:
        logger.info("No hazard config at %s, using defaults", path)
        config = HazardConfig()
    except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Could not load hazard config %s (%s), using defaults", path, exc)
        config = HazardConfig()

    try:
        config.to_yaml(path)
    except OSError as exc:
        logger.warning("Could not store hazard config %s: %s", path, exc)
    return config


@dataclass
class SimulationConfig:
    """Top-level configuration for the demo server.

    Attributes:
        seed: RNG seed for deterministic replay.
        world_width: Number of columns along x.
        world_depth: Number of rows along z.
        frame_ms: World milliseconds per server frame.
        player_count: Players spawned at startup.
        roof_count: Number of rectangular shelters placed on the map.
        storm_chance: Per-frame probability that a storm rolls in.
        rain_decay: Rain intensity lost per frame once a storm peaks.
        cloud_drift_frames: Frames between one-column cloud shifts.
        move_chance: Per-frame probability that a player takes a step.
        respawn_delay_ms: World time a dead player waits to respawn.
        hazard: Acid-rain tunables.
    """

    seed: int = 42
    world_width: int = 48
    world_depth: int = 48
    frame_ms: int = 200
    player_count: int = 6
    roof_count: int = 8

    # Weather
    storm_chance: float = 0.005
    rain_decay: float = 0.002
    cloud_drift_frames: int = 10

    # Players
    move_chance: float = 0.3
    respawn_delay_ms: int = 10_000

    hazard: HazardConfig = field(default_factory=HazardConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        try:
            hazard = HazardConfig.from_dict(data.get("hazard") or {})
        except (ValueError, TypeError, AttributeError) as exc:
            logger.warning("Invalid hazard block in %s (%s), using defaults", path, exc)
            hazard = HazardConfig()

        return cls(
            seed=data.get("seed", cls.seed),
            world_width=data.get("world_width", cls.world_width),
            world_depth=data.get("world_depth", cls.world_depth),
            frame_ms=data.get("frame_ms", cls.frame_ms),
            player_count=data.get("player_count", cls.player_count),
            roof_count=data.get("roof_count", cls.roof_count),
            storm_chance=data.get("storm_chance", cls.storm_chance),
            rain_decay=data.get("rain_decay", cls.rain_decay),
            cloud_drift_frames=data.get(
                "cloud_drift_frames",
                cls.cloud_drift_frames,
            ),
            move_chance=data.get("move_chance", cls.move_chance),
            respawn_delay_ms=data.get(
                "respawn_delay_ms",
                cls.respawn_delay_ms,
            ),
            hazard=hazard,
        )
