"""Frame renderer: turns a FrameSnapshot into an RGB buffer."""

from dataclasses import dataclass

from flapcube.core.state import GameState
from flapcube.game.snapshot import FrameSnapshot, ObstacleSnapshot, Rect
from flapcube.graphics.primitives import (
    Buffer, Color, new_buffer, fill, draw_rect, draw_text, draw_centered_text, measure_text,
)


@dataclass
class Palette:
    background: Color = (255, 255, 255)
    text: Color = (0, 0, 0)
    obstacle: Color = (0, 255, 0)
    obstacle_rim: Color = (0, 153, 0)
    body: Color = (255, 220, 0)
    body_outline: Color = (120, 90, 0)


class FrameRenderer:
    """Render hook implementation drawing into a numpy buffer.

    Call the instance with a snapshot; read the result from ``buffer``.
    """

    RIM_HEIGHT = 15
    RIM_OVERHANG = 5

    def __init__(self, width: int, height: int, palette: Palette | None = None):
        self.width = width
        self.height = height
        self.palette = palette or Palette()
        self.buffer: Buffer = new_buffer(width, height)
        self.frames_rendered = 0

    def __call__(self, snapshot: FrameSnapshot) -> None:
        self.render(snapshot)

    def render(self, snapshot: FrameSnapshot) -> Buffer:
        fill(self.buffer, self.palette.background)

        if snapshot.state == GameState.START:
            self._render_start()
        elif snapshot.state == GameState.COUNTDOWN:
            self._render_countdown(snapshot)
        elif snapshot.state == GameState.PLAYING:
            self._render_playing(snapshot)
        else:
            self._render_game_over(snapshot)

        self.frames_rendered += 1
        return self.buffer

    def _render_start(self) -> None:
        h = self.height
        draw_centered_text(self.buffer, "FLAPCUBE!", h // 3, self.palette.text, scale=8)
        draw_centered_text(self.buffer, "PRESS ENTER OR TAP TO START", h // 2, self.palette.text, scale=3)
        draw_centered_text(self.buffer, "UP ARROW OR TAP TO JUMP", h // 2 + 40, self.palette.text, scale=2)

    def _render_countdown(self, snapshot: FrameSnapshot) -> None:
        if snapshot.countdown is None:
            return
        scale = 12
        _, text_h = measure_text("0", scale)
        draw_centered_text(
            self.buffer, str(snapshot.countdown), (self.height - text_h) // 2,
            self.palette.text, scale=scale,
        )

    def _render_playing(self, snapshot: FrameSnapshot) -> None:
        for obstacle in snapshot.obstacles:
            self._draw_obstacle(obstacle)

        self._draw_body(snapshot.body.rect)

        draw_text(self.buffer, f"SCORE: {snapshot.score}", 10, 10, self.palette.text, scale=3)
        high = f"HIGH SCORE: {snapshot.high_score}"
        high_w, _ = measure_text(high, 3)
        draw_text(self.buffer, high, self.width - 10 - high_w, 10, self.palette.text, scale=3)

    def _render_game_over(self, snapshot: FrameSnapshot) -> None:
        h = self.height
        text = self.palette.text
        draw_centered_text(self.buffer, "GAME OVER", h // 3, text, scale=8)
        draw_centered_text(self.buffer, f"SCORE: {snapshot.score}", h // 2 - 20, text, scale=4)
        draw_centered_text(self.buffer, f"HIGH SCORE: {snapshot.high_score}", h // 2 + 20, text, scale=4)
        draw_centered_text(self.buffer, "PRESS ENTER OR TAP TO RESTART", h // 2 + 70, text, scale=2)

    def _draw_obstacle(self, obstacle: ObstacleSnapshot) -> None:
        for part in (obstacle.top, obstacle.bottom):
            draw_rect(self.buffer, *_px(part), self.palette.obstacle)

        # Each rim ends at its gap edge
        rim_w = int(obstacle.width) + 2 * self.RIM_OVERHANG
        rim_x = int(obstacle.x) - self.RIM_OVERHANG
        draw_rect(self.buffer, rim_x, int(obstacle.gap_top) - self.RIM_HEIGHT, rim_w,
                  self.RIM_HEIGHT, self.palette.obstacle_rim)
        draw_rect(self.buffer, rim_x, int(obstacle.bottom.y) - self.RIM_HEIGHT, rim_w,
                  self.RIM_HEIGHT, self.palette.obstacle_rim)

    def _draw_body(self, rect: Rect) -> None:
        x, y, w, h = _px(rect)
        draw_rect(self.buffer, x, y, w, h, self.palette.body)
        draw_rect(self.buffer, x, y, w, h, self.palette.body_outline, filled=False, thickness=2)


def _px(rect: Rect) -> tuple[int, int, int, int]:
    return int(rect.x), int(rect.y), int(rect.width), int(rect.height)
