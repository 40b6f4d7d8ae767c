"""Simulation core: entities, spawning, collision and the session loop."""

from flapcube.game.body import FallingBody
from flapcube.game.obstacle import Obstacle
from flapcube.game.spawner import (
    ObstacleSpawner,
    SpawnPolicy,
    IntervalSpawnPolicy,
    DistanceSpawnPolicy,
)
from flapcube.game.collision import CollisionEvaluator, Evaluation, RunState
from flapcube.game.snapshot import FrameSnapshot, RenderHook, Rect
from flapcube.game.session import GameSession

__all__ = [
    "FallingBody",
    "Obstacle",
    "ObstacleSpawner",
    "SpawnPolicy",
    "IntervalSpawnPolicy",
    "DistanceSpawnPolicy",
    "CollisionEvaluator",
    "Evaluation",
    "RunState",
    "FrameSnapshot",
    "RenderHook",
    "Rect",
    "GameSession",
]
