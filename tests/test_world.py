"""Tests for acidrain.world: heightmap, weather and players."""

import numpy as np
import pytest
from numpy.random import Generator

from acidrain.weather.interfaces import ACID_RAIN_DAMAGE, GameMode
from acidrain.world.environment import Environment
from acidrain.world.player import AttributeTree, Player, Vec3
from acidrain.world.world import NO_ROOF, World


class TestWorld:
    def test_dimensions(self, small_world: World) -> None:
        assert small_world.width == 8
        assert small_world.depth == 8
        assert small_world.terrain.shape == (8, 8)
        assert (small_world.roofs == NO_ROOF).all()

    def test_open_sky_rain_map_is_ground(self, small_world: World) -> None:
        assert small_world.rain_map_height(3, 3) == 64
        assert small_world.standing_height(3, 3) == 65.0
        assert not small_world.is_sheltered(3, 3)

    def test_out_of_bounds(self, small_world: World) -> None:
        with pytest.raises(IndexError):
            small_world.rain_map_height(8, 0)
        with pytest.raises(IndexError):
            small_world.ground_height(0, -1)

    def test_roof_raises_rain_map(self, small_world: World) -> None:
        small_world.build_roof(2, 2, 4, 3, clearance=3)
        assert small_world.rain_map_height(3, 3) == 67
        assert small_world.is_sheltered(2, 2)
        assert small_world.is_sheltered(4, 3)
        assert not small_world.is_sheltered(5, 3)
        assert not small_world.is_sheltered(3, 4)

    def test_roof_clipped_to_map(self, small_world: World) -> None:
        small_world.build_roof(6, 6, 20, 20)
        assert small_world.is_sheltered(7, 7)

    def test_populate_raises_hills(self, rng: Generator) -> None:
        world = World(width=24, depth=24)
        world.populate(rng, num_hills=4)
        assert world.terrain.max() > world.sea_level
        assert world.terrain.min() >= world.sea_level

    def test_place_shelters(self, rng: Generator) -> None:
        world = World(width=24, depth=24)
        world.place_shelters(rng, 3)
        assert (world.roofs > world.terrain).any()


class TestEnvironment:
    def test_not_loaded_until_first_update(
        self,
        small_world: World,
        rng: Generator,
    ) -> None:
        env = Environment(world=small_world)
        assert not env.loaded
        env.update(rng)
        assert env.loaded
        assert env.clouds.min() >= 0.0
        assert env.clouds.max() <= 1.0

    def test_dry_sky(self, small_world: World) -> None:
        env = Environment(world=small_world)
        assert env.precipitation_at(Vec3(1, 65, 1)) == 0.0

    def test_precipitation_scales_with_clouds(self, small_world: World) -> None:
        env = Environment(world=small_world, rain_intensity=0.8)
        env.clouds[2, 5] = 0.5
        assert env.precipitation_at(Vec3(5.7, 65, 2.2)) == pytest.approx(0.4)

    def test_storm_always_arrives_at_chance_one(
        self,
        small_world: World,
        rng: Generator,
    ) -> None:
        env = Environment(world=small_world, storm_chance=1.0)
        env.update(rng)
        assert 0.2 <= env.rain_intensity <= 1.0

    def test_rain_decays(self, small_world: World, rng: Generator) -> None:
        env = Environment(
            world=small_world,
            storm_chance=0.0,
            rain_decay=0.1,
            rain_intensity=0.25,
        )
        for _ in range(3):
            env.update(rng)
        assert env.rain_intensity == 0.0

    def test_clouds_drift(self, small_world: World, rng: Generator) -> None:
        env = Environment(world=small_world, storm_chance=0.0, cloud_drift_frames=1)
        env.update(rng)
        before = env.clouds.copy()
        env.update(rng)
        assert np.array_equal(env.clouds, np.roll(before, 1, axis=1))

    def test_surface_height_follows_roofs(self, small_world: World) -> None:
        small_world.build_roof(0, 0, 1, 1, clearance=4)
        env = Environment(world=small_world)
        assert env.surface_height_at(0, 0) == 68.0
        assert env.surface_height_at(5, 5) == 64.0


class TestAttributeTree:
    def test_default_when_missing(self) -> None:
        tree = AttributeTree()
        assert tree.get_timestamp("k") is None
        assert tree.get_timestamp("k", 0) == 0

    def test_overwrite(self) -> None:
        tree = AttributeTree()
        tree.set_timestamp("k", 100)
        tree.set_timestamp("k", 250)
        assert tree.get_timestamp("k") == 250
        assert "k" in tree


class TestPlayer:
    def test_damage_reduces_health(self) -> None:
        player = Player(uid="a", position=Vec3(0, 65, 0))
        assert player.receive_damage(ACID_RAIN_DAMAGE, 1.0)
        assert player.health == 14.0
        assert player.last_damage == ACID_RAIN_DAMAGE

    def test_lethal_damage_kills(self) -> None:
        player = Player(uid="a", health=0.5)
        player.receive_damage(ACID_RAIN_DAMAGE, 1.0)
        assert player.health == 0.0
        assert not player.alive

    def test_dead_players_take_no_damage(self) -> None:
        player = Player(uid="a", alive=False, health=0.0)
        assert not player.receive_damage(ACID_RAIN_DAMAGE, 1.0)

    def test_only_survival_takes_damage(self) -> None:
        assert GameMode.SURVIVAL.takes_damage
        assert not GameMode.CREATIVE.takes_damage
        assert not GameMode.SPECTATOR.takes_damage
        assert not GameMode.GUEST.takes_damage

    def test_spawn_at_stands_on_ground(self, small_world: World) -> None:
        player = Player(uid="a", alive=False, health=0.0)
        player.spawn_at(small_world, 2, 3)
        assert player.position == Vec3(2.5, 65.0, 3.5)
        assert player.alive
        assert player.health == player.max_health

    def test_wander_stays_on_map(self, small_world: World, rng: Generator) -> None:
        player = Player(uid="a")
        player.spawn_at(small_world, 0, 0)
        for _ in range(200):
            player.wander(small_world, rng)
            assert small_world.in_bounds(int(player.position.x), int(player.position.z))
