import random

import pytest

from flapcube.settings import GameSettings
from flapcube.game.obstacle import Obstacle


@pytest.fixture
def settings() -> GameSettings:
    return GameSettings(seed=1234)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def make_obstacle(settings):
    """Build an obstacle with an explicit gap band."""

    def factory(x: float, gap_top: float = 200.0, gap_height: float = 250.0) -> Obstacle:
        return Obstacle(
            x=x,
            gap_top=gap_top,
            gap_height=gap_height,
            width=settings.obstacle_width,
            speed=settings.obstacle_speed,
            field_height=settings.height,
        )

    return factory
