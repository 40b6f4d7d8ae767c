"""
Simulator window using pygame.

Hosts the game on the desktop: maps keyboard and pointer input to
commands on the event bus, drives one tick per display frame and
shows the rendered playfield next to a debug panel.
"""

import asyncio
import logging
from typing import Optional

import pygame

from flapcube.settings import WindowSettings
from flapcube.core.state import GameState, StateMachine
from flapcube.core.events import EventBus, EventType, command_event, tick_event
from flapcube.graphics.renderer import FrameRenderer

logger = logging.getLogger(__name__)


class SimulatorWindow:
    """
    Main simulator window.

    Keyboard Mapping:
        RETURN: Start (title screen) / Restart (game over)
        UP, SPACE: Jump
        Left mouse button: Tap (start, jump or restart by state)
        D: Toggle debug panel
        S: Capture screenshot
        ESC, Q: Exit simulator
    """

    def __init__(
        self,
        renderer: FrameRenderer,
        state_machine: StateMachine,
        event_bus: EventBus,
        config: Optional[WindowSettings] = None,
        fps: int = 60,
    ) -> None:
        self.config = config or WindowSettings()
        self.renderer = renderer
        self.state_machine = state_machine
        self.event_bus = event_bus
        self.fps = fps

        # Pygame setup
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._running = False
        self._frame_count = 0
        self._show_debug = self.config.show_debug

        self._small_font: pygame.font.Font | None = None
        self._playfield = pygame.Rect(
            0, 0,
            renderer.width * self.config.scale,
            renderer.height * self.config.scale,
        )

        # Log capture for the debug panel
        self._log_buffer: list[str] = []
        self._max_log_lines = 12
        self._log_handler: logging.Handler | None = None

        self.event_bus.subscribe(EventType.QUIT, lambda event: self.stop())

        logger.info("SimulatorWindow created")

    @property
    def running(self) -> bool:
        return self._running

    @property
    def size(self) -> tuple[int, int]:
        panel = self.config.panel_width if self._show_debug else 0
        return self._playfield.width + panel, self._playfield.height

    def _setup_log_capture(self) -> None:
        """Setup log capturing for the debug panel."""
        class SimulatorLogHandler(logging.Handler):
            def __init__(self, window: 'SimulatorWindow'):
                super().__init__()
                self.window = window

            def emit(self, record):
                msg = self.format(record)
                self.window._log_buffer.append(msg)
                if len(self.window._log_buffer) > self.window._max_log_lines * 2:
                    self.window._log_buffer = self.window._log_buffer[-self.window._max_log_lines:]

        handler = SimulatorLogHandler(self)
        handler.setFormatter(logging.Formatter('%(levelname).1s %(name)s: %(message)s'))
        logging.getLogger().addHandler(handler)
        self._log_handler = handler

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)
        self._screen = pygame.display.set_mode(self.size, pygame.DOUBLEBUF)
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._small_font = pygame.font.SysFont(None, 18)

        self._setup_log_capture()
        logger.info(f"Pygame initialized: {self.size[0]}x{self.size[1]}")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                self._handle_pointer(event)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key

        if key in (pygame.K_ESCAPE, pygame.K_q):
            self._running = False
        elif key == pygame.K_d:
            self._show_debug = not self._show_debug
            if self._screen is not None:
                self._screen = pygame.display.set_mode(self.size, pygame.DOUBLEBUF)
        elif key == pygame.K_s:
            self._capture_screenshot()

        elif key == pygame.K_RETURN:
            if self.state_machine.state == GameState.GAME_OVER:
                self._emit(EventType.RESTART, "keyboard")
            else:
                self._emit(EventType.START, "keyboard")
        elif key in (pygame.K_UP, pygame.K_SPACE):
            self._emit(EventType.JUMP, "keyboard")

    def _handle_pointer(self, event: pygame.event.Event) -> None:
        """Left click inside the playfield is a tap."""
        if event.button == 1 and self._playfield.collidepoint(event.pos):
            self._emit(EventType.TAP, "pointer")

    def _emit(self, event_type: EventType, source: str) -> None:
        """Queue a command; it is applied before the next tick."""
        self.event_bus.queue_event(command_event(event_type, source))

    def _render(self) -> None:
        """Blit the playfield and panels."""
        if not self._screen:
            return

        self._screen.fill(self.config.bg_color)

        surface = pygame.surfarray.make_surface(self.renderer.buffer.swapaxes(0, 1))
        if self.config.scale != 1:
            surface = pygame.transform.scale(surface, self._playfield.size)
        self._screen.blit(surface, self._playfield.topleft)

        if self._show_debug:
            self._render_debug_panel()

        pygame.display.flip()

    def _render_debug_panel(self) -> None:
        """Render the debug information panel."""
        rect = pygame.Rect(
            self._playfield.right, 0, self.config.panel_width, self._playfield.height
        )
        pygame.draw.rect(self._screen, self.config.panel_color, rect)

        if not self._small_font:
            return

        lines = [
            f"FPS: {self._clock.get_fps():.1f}" if self._clock else "FPS: --",
            f"Frame: {self._frame_count}",
            f"State: {self.state_machine.state.name}",
            "",
            "---- CONTROLS ----",
            "ENTER   Start/Restart",
            "UP      Jump",
            "CLICK   Tap",
            "D       Debug panel",
            "S       Screenshot",
            "Q       Quit",
            "",
            "---- LOG ----",
        ]

        y = rect.y + 10
        for line in lines:
            text_surface = self._small_font.render(line, True, self.config.text_color)
            self._screen.blit(text_surface, (rect.x + 10, y))
            y += 18

        for line in self._log_buffer[-self._max_log_lines:]:
            display_line = line[:34] + "..." if len(line) > 37 else line
            text_surface = self._small_font.render(display_line, True, self.config.accent_color)
            self._screen.blit(text_surface, (rect.x + 10, y))
            y += 16
            if y > rect.bottom - 10:
                break

    def _capture_screenshot(self) -> None:
        """Capture and save a screenshot."""
        if self._screen:
            filename = f"screenshot_{self._frame_count}.png"
            pygame.image.save(self._screen, filename)
            logger.info(f"Screenshot saved: {filename}")

    async def run(self) -> None:
        """Main simulator loop: input, queued commands, one tick, display."""
        self._init_pygame()
        self._running = True

        logger.info("Simulator started")

        try:
            while self._running:
                self._handle_events()

                # Commands from this frame land before the tick, never inside it
                await self.event_bus.process_queue()

                delta = self._clock.get_time() / 1000.0 if self._clock else 0.0
                self.event_bus.emit(tick_event(delta, self._frame_count))

                self._render()

                if self._clock:
                    self._clock.tick(self.fps)

                self._frame_count += 1

                # Yield to other tasks
                await asyncio.sleep(0)
        finally:
            self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        if self._log_handler is not None:
            logging.getLogger().removeHandler(self._log_handler)
            self._log_handler = None
        pygame.quit()
        logger.info("Simulator stopped")

    def stop(self) -> None:
        """Stop the simulator."""
        self._running = False
