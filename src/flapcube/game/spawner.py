"""Obstacle spawning and lifecycle.

Two cadences are supported; the spawner commits to one for its lifetime:

    interval: a new obstacle every ``spawn_interval`` frames
    distance: a new obstacle once the newest one has scrolled a random
              distance (drawn per spawn) away from the right edge
"""

import logging
import random
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from flapcube.settings import GameSettings
from flapcube.game.obstacle import Obstacle

logger = logging.getLogger(__name__)


class SpawnPolicy(ABC):
    """Decides when the next obstacle appears."""

    @abstractmethod
    def should_spawn(self, frame: int, obstacles: Sequence[Obstacle]) -> bool:
        ...

    @abstractmethod
    def on_spawned(self, frame: int, obstacle: Obstacle) -> None:
        ...

    def reset(self) -> None:
        pass


class IntervalSpawnPolicy(SpawnPolicy):
    """Fixed frame cadence. The first call after a reset always spawns."""

    def __init__(self, interval: int):
        self.interval = interval
        self._last_spawn_frame: Optional[int] = None

    def should_spawn(self, frame: int, obstacles: Sequence[Obstacle]) -> bool:
        if self._last_spawn_frame is None:
            return True
        return frame - self._last_spawn_frame >= self.interval

    def on_spawned(self, frame: int, obstacle: Obstacle) -> None:
        self._last_spawn_frame = frame

    def reset(self) -> None:
        self._last_spawn_frame = None


class DistanceSpawnPolicy(SpawnPolicy):
    """Spawn once the newest obstacle has travelled a randomized distance."""

    def __init__(
        self,
        field_width: float,
        min_distance: float,
        max_distance: float,
        rng: random.Random,
    ):
        self.field_width = field_width
        self.min_distance = min_distance
        self.max_distance = max_distance
        self._rng = rng
        self._threshold = 0.0

    def should_spawn(self, frame: int, obstacles: Sequence[Obstacle]) -> bool:
        if not obstacles:
            return True
        travelled = self.field_width - obstacles[-1].x
        return travelled >= self._threshold

    def on_spawned(self, frame: int, obstacle: Obstacle) -> None:
        self._threshold = self._rng.uniform(self.min_distance, self.max_distance)


def make_spawn_policy(settings: GameSettings, rng: random.Random) -> SpawnPolicy:
    """Build the policy named by ``settings.spawn_policy``."""
    if settings.spawn_policy == "distance":
        return DistanceSpawnPolicy(
            settings.width,
            settings.spawn_distance_min,
            settings.spawn_distance_max,
            rng,
        )
    return IntervalSpawnPolicy(settings.spawn_interval)


class ObstacleSpawner:
    """Owns the ordered collection of live obstacles."""

    def __init__(
        self,
        settings: GameSettings,
        rng: Optional[random.Random] = None,
        policy: Optional[SpawnPolicy] = None,
    ):
        self._settings = settings
        self._rng = rng or random.Random(settings.seed)
        self.policy = policy or make_spawn_policy(settings, self._rng)
        self._obstacles: List[Obstacle] = []
        self.spawned_total = 0

    @property
    def obstacles(self) -> Sequence[Obstacle]:
        """Live obstacles in spawn order."""
        return tuple(self._obstacles)

    def __len__(self) -> int:
        return len(self._obstacles)

    def maybe_spawn(self, frame: int) -> Optional[Obstacle]:
        """Append a new obstacle if the cadence says so."""
        if not self.policy.should_spawn(frame, self._obstacles):
            return None

        obstacle = Obstacle.create(self._settings, self._rng)
        self._obstacles.append(obstacle)
        self.policy.on_spawned(frame, obstacle)
        self.spawned_total += 1
        logger.debug(f"Spawned {obstacle} at frame {frame}")
        return obstacle

    def advance_and_prune(self) -> int:
        """Move every obstacle, then drop the ones that left the playfield.

        Returns:
            Number of obstacles removed
        """
        for obstacle in self._obstacles:
            obstacle.update()

        retained = [o for o in self._obstacles if not o.is_offscreen()]
        removed = len(self._obstacles) - len(retained)
        self._obstacles = retained

        if removed:
            logger.debug(f"Pruned {removed} offscreen obstacle(s)")
        return removed

    def clear(self) -> None:
        """Remove all obstacles and restart the cadence."""
        self._obstacles = []
        self.spawned_total = 0
        self.policy.reset()
