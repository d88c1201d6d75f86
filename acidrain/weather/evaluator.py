"""TickEvaluator: decides, every hazard tick, who is standing in acid rain.

Per player and per tick:

1. Read precipitation at the player's position and compare it with the
   rain threshold.
2. On the first rainy tick of a spell, roll once to decide whether this
   spell is acidic for the player.  A dry tick ends the spell and clears
   the roll.
3. Compare the player's head height with the rain-map height of their
   column to decide whether they are under open sky.
4. Warn on the rising edge of the hazard, give the all-clear on the
   falling edge, and never repeat either while nothing changes.
5. Damage exposed survival-mode players and stamp the time of the hit
   on their persistent record so a death shortly after can be blamed on
   the rain.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable

from acidrain.messaging.chat import styled
from acidrain.weather.interfaces import ACID_RAIN_DAMAGE

if TYPE_CHECKING:
    from acidrain.messaging.lang import Translator
    from acidrain.simulation.config import HazardConfig
    from acidrain.simulation.events import EventBus
    from acidrain.weather.interfaces import (
        DamageSource,
        Messenger,
        Participant,
        RandomSource,
        WeatherQuery,
    )
    from acidrain.weather.state import ParticipantStateStore

logger = logging.getLogger(__name__)

EXPOSURE_MARGIN = 1.2  # head height above the feet
CORRELATION_WINDOW_MS = 4000
DAMAGE_MARK_KEY = "last_acid_damage_ms"
FALLBACK_NAME = "Survivor"

WARNING_KEY = "acidrain:warning-msg"
SAFE_KEY = "acidrain:safe-msg"
DEATH_KEY = "acidrain:death-msg"


class TickEvaluator:
    """Runs the acid-rain decision for every connected player.

    Attributes:
        config: Hazard tunables.
        store: Per-player weather state.
        roster: Returns the players currently connected.
        weather: Returns the precipitation/height source, or None while
            the weather system has not loaded.
        messenger: Chat delivery.
        translator: Keyed message text.
        rng: Uniform random source for the per-spell roll.
        clock: Returns the current world time in milliseconds.
    """

    def __init__(
        self,
        config: HazardConfig,
        store: ParticipantStateStore,
        *,
        roster: Callable[[], Iterable[Participant]],
        weather: Callable[[], WeatherQuery | None],
        messenger: Messenger,
        translator: Translator,
        rng: RandomSource,
        clock: Callable[[], int],
    ) -> None:
        self.config = config
        self.store = store
        self.roster = roster
        self.weather = weather
        self.messenger = messenger
        self.translator = translator
        self.rng = rng
        self.clock = clock

    def attach(self, bus: EventBus) -> None:
        """Subscribe to the host's leave and death signals."""
        bus.subscribe("player_leave", self._handle_leave)
        bus.subscribe("entity_death", self._handle_death)

    def detach(self, bus: EventBus) -> None:
        """Undo ``attach``."""
        bus.unsubscribe("player_leave", self._handle_leave)
        bus.unsubscribe("entity_death", self._handle_death)

    def tick(self, dt: float = 0.0) -> None:
        """Evaluate every connected player once.

        Skips the whole tick if the weather source is not ready yet.

        Args:
            dt: Seconds since the previous tick (unused, passed by the
                timer).
        """
        weather = self.weather()
        if weather is None:
            logger.debug("Weather system not ready, skipping hazard tick")
            return

        for participant in self.roster():
            if participant.position is None or not participant.alive:
                continue
            self.evaluate(participant, weather)

    def evaluate(self, participant: Participant, weather: WeatherQuery) -> bool:
        """Advance one player's state machine.

        Args:
            participant: A present, living player.
            weather: Precipitation and height-map source.

        Returns:
            True if the player is in the hazard this tick.
        """
        state = self.store.get_or_create(participant.uid)
        pos = participant.position

        rain = weather.precipitation_at(pos)
        is_raining = rain >= self.config.min_rain_intensity

        if is_raining and not state.was_raining_last_tick:
            state.in_hazard_event = self.rng.random() < self.config.event_chance
            if state.in_hazard_event:
                logger.debug("Acid shower started over %s", participant.uid)
        elif not is_raining:
            state.in_hazard_event = False
        state.was_raining_last_tick = is_raining

        surface = weather.surface_height_at(int(pos.x), int(pos.z))
        exposed = pos.y + EXPOSURE_MARGIN >= surface
        hazard_now = is_raining and state.in_hazard_event and exposed

        if hazard_now and not state.is_warned:
            self._notify(participant, WARNING_KEY, self.config.warning_color)
            state.is_warned = True
        elif not hazard_now and state.is_warned:
            self._notify(participant, SAFE_KEY, self.config.safe_color)
            state.is_warned = False

        if hazard_now and participant.game_mode.takes_damage:
            participant.attributes.set_timestamp(DAMAGE_MARK_KEY, self.clock())
            participant.receive_damage(ACID_RAIN_DAMAGE, self.config.damage_per_tick)

        return hazard_now

    def on_participant_leave(self, uid: str) -> None:
        """Drop the weather state of a departing player."""
        self.store.remove(uid)

    def on_participant_death(
        self,
        participant: Participant,
        source: DamageSource | None = None,
    ) -> bool:
        """Announce the death if acid damage landed within the window.

        Args:
            participant: The player who died.
            source: Classification of the killing blow (not consulted;
                the timestamp decides).

        Returns:
            True if a death announcement was broadcast.
        """
        mark = participant.attributes.get_timestamp(DAMAGE_MARK_KEY, None)
        if mark is None:
            return False
        if self.clock() - mark >= CORRELATION_WINDOW_MS:
            return False

        name = participant.display_name or FALLBACK_NAME
        self.messenger.broadcast(self.translator.get(DEATH_KEY, name))
        return True

    def _notify(self, participant: Participant, key: str, color: str) -> None:
        self.messenger.notify(participant, styled(self.translator.get(key), color))

    def _handle_leave(self, _signal: str, data: dict[str, Any]) -> None:
        self.on_participant_leave(data["uid"])

    def _handle_death(self, _signal: str, data: dict[str, Any]) -> None:
        self.on_participant_death(data["player"], data.get("source"))
