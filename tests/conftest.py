"""Shared fixtures for the acid-rain test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from acidrain.messaging.chat import ChatLog
from acidrain.messaging.lang import Translator
from acidrain.simulation.config import HazardConfig, SimulationConfig
from acidrain.weather.evaluator import TickEvaluator
from acidrain.weather.state import ParticipantStateStore
from acidrain.world.player import Player, Vec3
from acidrain.world.world import World
from tests.fakes import FakeClock, FakeWeather, Harness, ScriptedRandom


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def hazard_config() -> HazardConfig:
    """The stock acid-rain settings."""
    return HazardConfig()


@pytest.fixture
def small_config() -> SimulationConfig:
    """A tiny demo server with no initial players."""
    return SimulationConfig(
        seed=7,
        world_width=12,
        world_depth=12,
        player_count=0,
        roof_count=2,
    )


@pytest.fixture
def small_world() -> World:
    """A flat 8x8 world for fast tests."""
    return World(width=8, depth=8)


@pytest.fixture
def player() -> Player:
    """A survival player standing in the open one block above the rain map."""
    return Player(uid="p1", display_name="Alice", position=Vec3(3.5, 65.0, 7.5))


@pytest.fixture
def harness(hazard_config: HazardConfig, player: Player) -> Harness:
    """Evaluator over one exposed player; tests script the random draws."""
    clock = FakeClock(now=10_000)
    h = Harness(
        store=ParticipantStateStore(),
        weather=FakeWeather(),
        rng=ScriptedRandom(),
        chat=ChatLog(clock=clock),
        clock=clock,
        players=[player],
    )
    h.evaluator = TickEvaluator(
        hazard_config,
        h.store,
        roster=lambda: h.players,
        weather=lambda: h.weather if h.weather_ready else None,
        messenger=h.chat,
        translator=Translator(),
        rng=h.rng,
        clock=clock,
    )
    return h
