"""Per-player weather state and the store that owns it."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ParticipantWeatherState:
    """What the evaluator remembers about one player between ticks.

    Attributes:
        in_hazard_event: The current rain spell was rolled as acid.
        is_warned: The player has been told they are in danger and has
            not been told they are safe since.
        was_raining_last_tick: The previous tick found rain over the
            player.
    """

    in_hazard_event: bool = False
    is_warned: bool = False
    was_raining_last_tick: bool = False


@dataclass
class ParticipantStateStore:
    """Mapping from player uid to weather state.

    Entries are created on first sight and must be removed when the
    player leaves, otherwise the map grows with every visitor.
    """

    _states: dict[str, ParticipantWeatherState] = field(default_factory=dict)

    def get_or_create(self, uid: str) -> ParticipantWeatherState:
        """Return the state for ``uid``, inserting a fresh one if needed."""
        state = self._states.get(uid)
        if state is None:
            state = ParticipantWeatherState()
            self._states[uid] = state
        return state

    def get(self, uid: str) -> ParticipantWeatherState | None:
        """Return the state for ``uid`` without creating one."""
        return self._states.get(uid)

    def remove(self, uid: str) -> None:
        """Forget ``uid``.  Unknown ids are ignored."""
        self._states.pop(uid, None)

    def __contains__(self, uid: object) -> bool:
        return uid in self._states

    def __len__(self) -> int:
        return len(self._states)
