"""Scrolling gap obstacle."""

import random
from typing import Optional

from flapcube.settings import GameSettings
from flapcube.game.snapshot import ObstacleSnapshot, Rect


class Obstacle:
    """A column with one open gap band, moving right to left.

    The gap band is chosen once at creation. The solid top and bottom
    parts are derived from it on demand and never stored.
    """

    def __init__(
        self,
        x: float,
        gap_top: float,
        gap_height: float,
        width: float,
        speed: float,
        field_height: float,
    ):
        self.x = x
        self._gap_top = gap_top
        self._gap_height = gap_height
        self.width = width
        self.speed = speed
        self.field_height = field_height
        self.passed = False

    @classmethod
    def create(
        cls,
        settings: GameSettings,
        rng: Optional[random.Random] = None,
    ) -> "Obstacle":
        """Build an obstacle at the right playfield edge with a random gap.

        gap_height is uniform in [min_gap, max_gap]; gap_top leaves at least
        gap_margin of solid column above and below the band.
        """
        rng = rng or random.Random()
        gap_height = rng.uniform(settings.min_gap, settings.max_gap)
        gap_top = rng.uniform(
            settings.gap_margin,
            settings.height - settings.gap_margin - gap_height,
        )
        return cls(
            x=float(settings.width),
            gap_top=gap_top,
            gap_height=gap_height,
            width=settings.obstacle_width,
            speed=settings.obstacle_speed,
            field_height=settings.height,
        )

    @property
    def gap_top(self) -> float:
        return self._gap_top

    @property
    def gap_height(self) -> float:
        return self._gap_height

    @property
    def gap_bottom(self) -> float:
        return self._gap_top + self._gap_height

    @property
    def right(self) -> float:
        """Trailing edge."""
        return self.x + self.width

    @property
    def top_rect(self) -> Rect:
        return Rect(self.x, 0.0, self.width, self._gap_top)

    @property
    def bottom_rect(self) -> Rect:
        return Rect(self.x, self.gap_bottom, self.width, self.field_height - self.gap_bottom)

    def update(self) -> None:
        self.x -= self.speed

    def is_offscreen(self) -> bool:
        """True once the trailing edge is past the left boundary."""
        return self.right < 0

    def overlaps(self, body: Rect) -> bool:
        """True when body is inside the column but not fully inside the gap.

        Comparisons are strict: a body exactly touching a column side or a
        gap edge does not collide.
        """
        if not (body.x < self.right and body.right > self.x):
            return False
        return body.y < self._gap_top or body.bottom > self.gap_bottom

    def has_cleared(self, body: Rect) -> bool:
        """True once the trailing edge has moved left of the body."""
        return self.right < body.x

    def snapshot(self) -> ObstacleSnapshot:
        return ObstacleSnapshot(
            x=self.x,
            width=self.width,
            gap_top=self._gap_top,
            gap_height=self._gap_height,
            top=self.top_rect,
            bottom=self.bottom_rect,
            passed=self.passed,
        )

    def __repr__(self) -> str:
        return (
            f"Obstacle(x={self.x:.1f}, gap_top={self._gap_top:.1f}, "
            f"gap_height={self._gap_height:.1f}, passed={self.passed})"
        )
