"""Immutable per-frame views of game entities, handed to the render hook."""

from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Tuple

from flapcube.core.state import GameState


class Rect(NamedTuple):
    """Axis-aligned box, y grows downward."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class BodySnapshot:
    rect: Rect
    velocity: float


@dataclass(frozen=True)
class ObstacleSnapshot:
    x: float
    width: float
    gap_top: float
    gap_height: float
    top: Rect
    bottom: Rect
    passed: bool


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything a renderer needs to draw one frame."""

    state: GameState
    body: BodySnapshot
    obstacles: Tuple[ObstacleSnapshot, ...]
    score: int
    high_score: int
    frame: int
    countdown: Optional[int] = None


RenderHook = Callable[[FrameSnapshot], None]
