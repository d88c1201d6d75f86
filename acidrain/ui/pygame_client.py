"""Pygame top-down view of the acid-rain demo server.

Draws the heightmap, shelters, the current rain over each column, and
players coloured by their hazard state.  The server steps at a
configurable frame rate while the display refreshes at the Pygame frame
rate.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

if TYPE_CHECKING:
    from acidrain.simulation.engine import ServerSimulation
    from acidrain.world.player import Player

# Colour palette
_BG = (20, 20, 24)
_ROOF = (110, 80, 55)
_GROUND_LO = np.array([40, 70, 30], dtype=np.float64)
_GROUND_HI = np.array([150, 170, 110], dtype=np.float64)
_RAIN_COLOUR = (90, 140, 255)
_ACID_COLOUR = (170, 255, 60)

# Player colours by hazard state
_PLAYER_SAFE = (230, 230, 230)
_PLAYER_RAINED_ON = (120, 170, 255)
_PLAYER_WARNED = (255, 70, 70)
_PLAYER_DEAD = (90, 90, 90)

_MARKUP = re.compile(r"<[^>]+>")


class PygameRenderer:
    """Renders a ServerSimulation into a Pygame window.

    Attributes:
        server: The server to visualise.
        cell_size: Pixel size of each map column.
        screen: The Pygame display surface.
    """

    # Speed presets: server frames per second
    _SPEED_STEPS: ClassVar[list[float]] = [
        1.0,
        5.0,
        10.0,
        25.0,
        50.0,
        100.0,
        250.0,
        500.0,
    ]

    def __init__(
        self,
        server: ServerSimulation,
        cell_size: int = 14,
        frames_per_second: float = 25.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            server: The server to render.
            cell_size: Pixel width/height per map column.
            frames_per_second: Server frames per real-time second.
        """
        self.server = server
        self.cell_size = cell_size
        self.frames_per_second = frames_per_second
        self._speed_index = self._nearest_speed(frames_per_second)
        self._frame_accumulator = 0.0

        w = server.world.width * cell_size
        h = server.world.depth * cell_size
        self._panel_width = 360
        self._win_w = w + self._panel_width
        self._win_h = max(h, 480)

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Acid Rain")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 13)
        self.running = True
        self.paused = False

    def _nearest_speed(self, fps: float) -> int:
        """Return the index of the closest speed preset."""
        return min(
            range(len(self._SPEED_STEPS)),
            key=lambda i: abs(self._SPEED_STEPS[i] - fps),
        )

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, step server, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0  # seconds elapsed
            self._handle_events()
            if not self.paused:
                self._frame_accumulator += self.frames_per_second * dt
                steps = int(self._frame_accumulator)
                self._frame_accumulator -= steps
                for _ in range(steps):
                    self.server.step()
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._speed_index = min(
                        len(self._SPEED_STEPS) - 1,
                        self._speed_index + 1,
                    )
                    self.frames_per_second = self._SPEED_STEPS[self._speed_index]
                elif event.key == pygame.K_MINUS:
                    self._speed_index = max(0, self._speed_index - 1)
                    self.frames_per_second = self._SPEED_STEPS[self._speed_index]

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_terrain()
        self._draw_rain_overlay()
        self._draw_players()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_terrain(self) -> None:
        """Shade ground by height; draw roofs on top."""
        cs = self.cell_size
        world = self.server.world
        lo = float(world.terrain.min())
        span = max(1.0, float(world.terrain.max()) - lo)
        for z in range(world.depth):
            for x in range(world.width):
                if world.is_sheltered(x, z):
                    colour = _ROOF
                else:
                    t = (float(world.terrain[z, x]) - lo) / span
                    colour = (_GROUND_LO + t * (_GROUND_HI - _GROUND_LO)).astype(int).tolist()
                pygame.draw.rect(self.screen, colour, (x * cs, z * cs, cs, cs))

    def _draw_rain_overlay(self) -> None:
        """Draw rain as a translucent overlay, green while any spell is acidic."""
        env = self.server.environment
        if env.rain_intensity <= 0:
            return
        cs = self.cell_size
        threshold = self.server.config.hazard.min_rain_intensity
        states = (self.server.weather_states.get(uid) for uid in self.server.players)
        acid = any(s is not None and s.in_hazard_event for s in states)
        colour = _ACID_COLOUR if acid else _RAIN_COLOUR
        overlay = pygame.Surface(
            (self.server.world.width * cs, self.server.world.depth * cs),
            pygame.SRCALPHA,
        )
        rain = env.rain_intensity * env.clouds
        for z in range(rain.shape[0]):
            for x in range(rain.shape[1]):
                val = float(rain[z, x])
                if val >= threshold:
                    alpha = int(min(val, 1.0) * 140)
                    pygame.draw.rect(overlay, (*colour, alpha), (x * cs, z * cs, cs, cs))
        self.screen.blit(overlay, (0, 0))

    def _player_colour(self, player: Player) -> tuple[int, int, int]:
        if not player.alive:
            return _PLAYER_DEAD
        state = self.server.weather_states.get(player.uid)
        if state is None:
            return _PLAYER_SAFE
        if state.is_warned:
            return _PLAYER_WARNED
        if state.was_raining_last_tick:
            return _PLAYER_RAINED_ON
        return _PLAYER_SAFE

    def _draw_players(self) -> None:
        """Draw each present player as a dot with a health bar."""
        cs = self.cell_size
        radius = max(3, cs // 3)
        for player in self.server.players.values():
            if player.position is None:
                continue
            cx = int(player.position.x * cs)
            cz = int(player.position.z * cs)
            pygame.draw.circle(self.screen, self._player_colour(player), (cx, cz), radius)
            frac = player.health / player.max_health if player.max_health else 0.0
            bar_w = int(cs * frac)
            pygame.draw.rect(self.screen, (200, 40, 40), (cx - cs // 2, cz - cs, bar_w, 2))

    def _draw_info_panel(self) -> None:
        """Draw server stats and recent chat on the right side of the window."""
        panel_x = self.server.world.width * self.cell_size + 10
        y = 10
        env = self.server.environment

        lines = [
            f"Time: {self.server.elapsed_ms / 1000:.1f}s",
            f"Speed: {self.frames_per_second:.0f} f/s",
            f"{'PAUSED' if self.paused else 'RUNNING'}",
            f"Storm: {env.rain_intensity:.2f}",
            "",
            "--- Players ---",
        ]
        for player in self.server.players.values():
            status = "dead" if not player.alive else f"{player.health:.2f} hp"
            lines.append(f"{player.display_name or player.uid}: {status}")

        lines += ["", "--- Chat ---"]
        for message in self.server.chat.recent(8):
            text = _MARKUP.sub("", message.text)
            target = message.recipient or "all"
            lines.append(f"[{target}] {text}"[:44])

        lines += [
            "",
            "--- Controls ---",
            "SPACE: pause",
            "+/-: speed",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, (200, 200, 200))
            self.screen.blit(surf, (panel_x, y))
            y += 16
