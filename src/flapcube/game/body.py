"""The player-controlled falling cube."""

import logging

from flapcube.settings import GameSettings
from flapcube.game.snapshot import BodySnapshot, Rect

logger = logging.getLogger(__name__)


class FallingBody:
    """Vertical-only physics body.

    Invariants held after every update():
        velocity <= max_fall_speed
        y >= 0 (hitting the top stops upward motion)
    """

    def __init__(self, settings: GameSettings):
        self._settings = settings
        self.x = settings.body_x
        self.width = settings.body_width
        self.height = settings.body_height
        self.y = 0.0
        self.velocity = 0.0
        self.reset()

    def reset(self) -> None:
        """Return to the start position at rest."""
        self.y = self._settings.height / 2
        self.velocity = 0.0

    def update(self) -> None:
        """Integrate one frame of gravity."""
        self.velocity += self._settings.gravity
        if self.velocity > self._settings.max_fall_speed:
            self.velocity = self._settings.max_fall_speed
        self.y += self.velocity
        if self.y < 0:
            self.y = 0.0
            self.velocity = 0.0

    def jump(self) -> None:
        """Replace current velocity with the upward impulse."""
        self.velocity = -self._settings.jump_impulse

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def snapshot(self) -> BodySnapshot:
        return BodySnapshot(rect=self.rect, velocity=self.velocity)
