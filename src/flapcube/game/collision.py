"""Collision detection and scoring."""

from dataclasses import dataclass
from typing import Iterable
import logging

from flapcube.settings import GameSettings
from flapcube.game.body import FallingBody
from flapcube.game.obstacle import Obstacle

logger = logging.getLogger(__name__)


@dataclass
class RunState:
    """Score and frame bookkeeping for the session.

    high_score survives new_run(); everything else does not.
    """

    score: int = 0
    high_score: int = 0
    frame: int = 0

    def award_point(self) -> bool:
        """Add one point. Returns True if this set a new high score."""
        self.score += 1
        if self.score > self.high_score:
            self.high_score = self.score
            return True
        return False

    def new_run(self) -> None:
        self.score = 0
        self.frame = 0


@dataclass(frozen=True)
class Evaluation:
    """Outcome of one frame's collision and scoring check."""

    collided: bool = False
    cleared: int = 0
    new_high_score: bool = False


class CollisionEvaluator:
    """Checks the body against obstacles and playfield bounds each frame.

    Collision and scoring are independent: both run every call, and an
    obstacle is scored at most once thanks to its passed flag.
    """

    def __init__(self, settings: GameSettings):
        self._settings = settings

    def out_of_bounds(self, body: FallingBody) -> bool:
        return body.y > self._settings.height or body.y < 0

    def evaluate(
        self,
        body: FallingBody,
        obstacles: Iterable[Obstacle],
        run: RunState,
    ) -> Evaluation:
        rect = body.rect
        collided = self.out_of_bounds(body)
        cleared = 0
        new_high = False

        for obstacle in obstacles:
            if obstacle.overlaps(rect):
                collided = True

            if not obstacle.passed and obstacle.has_cleared(rect):
                obstacle.passed = True
                cleared += 1
                if run.award_point():
                    new_high = True
                logger.debug(f"Cleared {obstacle}, score={run.score}")

        return Evaluation(collided=collided, cleared=cleared, new_high_score=new_high)
