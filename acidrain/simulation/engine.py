"""ServerSimulation: the host loop the hazard system plugs into.

Each frame follows the same order:

1. Advance world time
2. Update the weather
3. Move living players
4. Fire due timer listeners (the acid-rain tick among them)
5. Publish deaths that happened this frame
6. Respawn players whose respawn delay has passed
7. Flush queued death signals to subscribers

Joins and leaves are delivered as soon as they happen, outside the frame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from acidrain.messaging.chat import ChatLog
from acidrain.messaging.lang import Translator
from acidrain.simulation.config import SimulationConfig
from acidrain.simulation.events import EventBus
from acidrain.simulation.timer import TickTimer
from acidrain.weather.evaluator import TickEvaluator
from acidrain.weather.interfaces import GameMode, WeatherQuery
from acidrain.weather.state import ParticipantStateStore
from acidrain.world.environment import Environment
from acidrain.world.player import AttributeTree, Player
from acidrain.world.world import World

logger = logging.getLogger(__name__)


@dataclass
class ServerSimulation:
    """Drives the demo server forward frame by frame.

    Attributes:
        config: Loaded simulation configuration.
        translator: Message text lookup.
        world: The block heightmap.
        environment: Weather over the world.
        players: Connected players by uid.
        records: Persistent attributes of players who have left.
        chat: Delivered chat lines.
        bus: Lifecycle signals.
        timer: Periodic listeners.
        weather_states: Per-player acid-rain state.
        evaluator: The acid-rain system.
        rng: Master seeded random generator.
        elapsed_ms: World time in milliseconds.
        frame: Frames simulated so far.
    """

    config: SimulationConfig
    translator: Translator = field(default_factory=Translator)
    world: World = field(init=False)
    environment: Environment = field(init=False)
    players: dict[str, Player] = field(init=False, default_factory=dict)
    records: dict[str, AttributeTree] = field(init=False, default_factory=dict)
    chat: ChatLog = field(init=False)
    bus: EventBus = field(init=False)
    timer: TickTimer = field(init=False)
    weather_states: ParticipantStateStore = field(init=False)
    evaluator: TickEvaluator = field(init=False)
    rng: Generator = field(init=False)
    elapsed_ms: int = 0
    frame: int = 0

    def __post_init__(self) -> None:
        """Build world, weather, messaging and the hazard system from config."""
        self.rng = np.random.default_rng(self.config.seed)
        self.world = World(width=self.config.world_width, depth=self.config.world_depth)
        self.world.populate(self.rng)
        self.world.place_shelters(self.rng, self.config.roof_count)
        self.environment = Environment(
            world=self.world,
            storm_chance=self.config.storm_chance,
            rain_decay=self.config.rain_decay,
            cloud_drift_frames=self.config.cloud_drift_frames,
        )
        self.chat = ChatLog(clock=self.world_time)
        self.bus = EventBus()
        self.timer = TickTimer(start_ms=self.elapsed_ms)
        self.weather_states = ParticipantStateStore()
        self.evaluator = TickEvaluator(
            self.config.hazard,
            self.weather_states,
            roster=lambda: list(self.players.values()),
            weather=self._weather,
            messenger=self.chat,
            translator=self.translator,
            rng=self.rng,
            clock=self.world_time,
        )
        self.evaluator.attach(self.bus)
        self.timer.register(self.evaluator.tick, self.config.hazard.tick_interval_ms)

        for i in range(self.config.player_count):
            self.add_player(f"player-{i}", display_name=f"Player{i}")

    def world_time(self) -> int:
        """World time in milliseconds."""
        return self.elapsed_ms

    def add_player(
        self,
        uid: str,
        *,
        display_name: str | None = None,
        game_mode: GameMode = GameMode.SURVIVAL,
        x: int | None = None,
        z: int | None = None,
    ) -> Player:
        """Connect a player and stand them on the map.

        A returning uid gets its old persistent attributes back.

        Args:
            uid: Stable player identity.
            display_name: Chat name.
            game_mode: Damage classification.
            x: Spawn column (random if None).
            z: Spawn row (random if None).

        Returns:
            The connected player.
        """
        if x is None:
            x = int(self.rng.integers(0, self.world.width))
        if z is None:
            z = int(self.rng.integers(0, self.world.depth))
        player = Player(uid=uid, display_name=display_name, game_mode=game_mode)
        saved = self.records.get(uid)
        if saved is not None:
            player.attributes = saved
        player.spawn_at(self.world, x, z)
        self.players[uid] = player
        logger.info("%s joined at (%d, %d)", uid, x, z)
        self.bus.emit("player_join", uid=uid)
        return player

    def remove_player(self, uid: str) -> None:
        """Disconnect a player; their attributes are kept for rejoin.

        ``player_leave`` is delivered before this returns, so the
        weather state is gone even if the uid rejoins before the next frame.
        """
        player = self.players.pop(uid, None)
        if player is None:
            return
        self.records[uid] = player.attributes
        logger.info("%s left", uid)
        self.bus.emit("player_leave", uid=uid)

    def respawn(self, uid: str) -> None:
        """Bring a dead player back at a random column."""
        player = self.players[uid]
        x = int(self.rng.integers(0, self.world.width))
        z = int(self.rng.integers(0, self.world.depth))
        player.spawn_at(self.world, x, z)
        logger.info("%s respawned at (%d, %d)", uid, x, z)

    def step(self) -> None:
        """Advance the server by one frame."""
        self.elapsed_ms += self.config.frame_ms
        self.environment.update(self.rng)

        for player in self.players.values():
            if player.alive and self.rng.random() < self.config.move_chance:
                player.wander(self.world, self.rng)

        self.timer.advance(self.elapsed_ms)
        self._publish_deaths()
        self._respawn_due()
        self.bus.flush()
        self.frame += 1

    def run(self, frames: int) -> None:
        """Run the server for a fixed number of frames.

        Args:
            frames: Number of frames to advance.
        """
        for _ in range(frames):
            self.step()

    def _weather(self) -> WeatherQuery | None:
        return self.environment if self.environment.loaded else None

    def _publish_deaths(self) -> None:
        for player in self.players.values():
            if player.alive or player.died_at_ms is not None:
                continue
            player.died_at_ms = self.elapsed_ms
            player.position = None
            logger.info("%s died (%s)", player.uid, player.last_damage)
            self.bus.publish("entity_death", player=player, source=player.last_damage)

    def _respawn_due(self) -> None:
        delay = self.config.respawn_delay_ms
        for player in self.players.values():
            if player.died_at_ms is None or player.alive:
                continue
            if self.elapsed_ms - player.died_at_ms >= delay:
                self.respawn(player.uid)
