"""Game session: the per-tick orchestrator.

One GameSession owns everything a run needs (state machine, body,
obstacles, score) so nothing lives in module globals. The host calls
tick() once per display refresh and forwards input as commands.
"""

import logging
import random
from typing import Callable, Dict, List, Optional

from flapcube.settings import GameSettings
from flapcube.core.events import Event, EventBus, EventType
from flapcube.core.state import GameState, StateMachine
from flapcube.game.body import FallingBody
from flapcube.game.collision import CollisionEvaluator, Evaluation, RunState
from flapcube.game.snapshot import FrameSnapshot, RenderHook
from flapcube.game.spawner import ObstacleSpawner

logger = logging.getLogger(__name__)


class GameSession:
    """Runs START -> COUNTDOWN -> PLAYING -> GAME_OVER -> START.

    Commands (start, jump, restart, tap) are accepted only in the state
    that understands them and are otherwise ignored.
    """

    def __init__(
        self,
        settings: GameSettings,
        rng: Optional[random.Random] = None,
        render_hook: Optional[RenderHook] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.settings = settings
        self._rng = rng or random.Random(settings.seed)

        self.state_machine = StateMachine(GameState.START)
        self.run = RunState()
        self.body = FallingBody(settings)
        self.spawner = ObstacleSpawner(settings, self._rng)
        self.evaluator = CollisionEvaluator(settings)

        self._render_hook = render_hook
        self._event_bus: Optional[EventBus] = None
        self._unsubscribers: List[Callable[[], None]] = []
        self._ticking = False

        self.state_machine.add_listener(self._on_state_changed)
        if event_bus is not None:
            self.bind(event_bus)

        logger.info(
            f"GameSession created: {settings.width}x{settings.height} "
            f"@ {settings.fps}fps, spawn={settings.spawn_policy}"
        )

    @property
    def state(self) -> GameState:
        return self.state_machine.state

    @property
    def obstacles(self):
        return self.spawner.obstacles

    def set_render_hook(self, hook: Optional[RenderHook]) -> None:
        self._render_hook = hook

    # Event bus wiring
    def bind(self, event_bus: EventBus) -> None:
        """Subscribe to command and tick events, and publish notifications."""
        self.unbind()
        self._event_bus = event_bus

        routes: Dict[EventType, Callable[[], object]] = {
            EventType.START: self.start,
            EventType.JUMP: self.jump,
            EventType.RESTART: self.restart,
            EventType.TAP: self.tap,
            EventType.TICK: self.tick,
        }
        for event_type, command in routes.items():
            self._unsubscribers.append(
                event_bus.subscribe(event_type, lambda event, cmd=command: cmd())
            )

    def unbind(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._event_bus = None

    # Commands
    def start(self) -> bool:
        """Leave the title screen and begin the countdown."""
        if self.state != GameState.START:
            logger.debug(f"start ignored in {self.state.name}")
            return False
        self.run.frame = 0
        return self.state_machine.transition(GameState.COUNTDOWN)

    def jump(self) -> bool:
        if self.state != GameState.PLAYING:
            logger.debug(f"jump ignored in {self.state.name}")
            return False
        self.body.jump()
        return True

    def restart(self) -> bool:
        """Reset the run after a game over. High score is kept."""
        if self.state != GameState.GAME_OVER:
            logger.debug(f"restart ignored in {self.state.name}")
            return False
        self.body.reset()
        self.spawner.clear()
        self.run.new_run()
        return self.state_machine.transition(GameState.START)

    def tap(self) -> bool:
        """Pointer press: start, jump or restart depending on state."""
        state = self.state
        if state == GameState.START:
            return self.start()
        if state == GameState.PLAYING:
            return self.jump()
        if state == GameState.GAME_OVER:
            return self.restart()
        return False

    # Frame loop
    def tick(self) -> None:
        """Advance one frame: state update, render, frame counter."""
        if self._ticking:
            raise RuntimeError("tick() re-entered while a tick is running")

        self._ticking = True
        try:
            state = self.state
            if state == GameState.COUNTDOWN:
                self._update_countdown()
            elif state == GameState.PLAYING:
                self._update_playing()

            if self._render_hook is not None:
                self._render_hook(self.snapshot())

            self.run.frame += 1
        finally:
            self._ticking = False

    def countdown_remaining(self) -> int:
        """Whole seconds left in the countdown, derived from the frame counter."""
        return self.settings.countdown_seconds - self.run.frame // self.settings.fps

    def _update_countdown(self) -> None:
        if self.countdown_remaining() <= 0:
            # The transition tick is play frame 0
            self.run.frame = 0
            self.state_machine.transition(GameState.PLAYING)

    def _update_playing(self) -> Evaluation:
        self.body.update()
        self.spawner.maybe_spawn(self.run.frame)
        self.spawner.advance_and_prune()

        result = self.evaluator.evaluate(self.body, self.spawner.obstacles, self.run)

        for _ in range(result.cleared):
            self._emit(EventType.OBSTACLE_CLEARED, score=self.run.score)
        if result.new_high_score:
            self._emit(EventType.HIGH_SCORE, high_score=self.run.high_score)

        if result.collided:
            logger.info(
                f"Game over: score {self.run.score} (high {self.run.high_score}), "
                f"{self.spawner.spawned_total} obstacles spawned"
            )
            self.state_machine.transition(GameState.GAME_OVER)
            self._emit(
                EventType.COLLISION,
                score=self.run.score,
                high_score=self.run.high_score,
            )
        return result

    def snapshot(self) -> FrameSnapshot:
        return FrameSnapshot(
            state=self.state,
            body=self.body.snapshot(),
            obstacles=tuple(o.snapshot() for o in self.spawner.obstacles),
            score=self.run.score,
            high_score=self.run.high_score,
            frame=self.run.frame,
            countdown=(
                self.countdown_remaining() if self.state == GameState.COUNTDOWN else None
            ),
        )

    # Notifications
    def _on_state_changed(self, old_state: GameState, new_state: GameState) -> None:
        self._emit(EventType.STATE_CHANGED, old=old_state.name, new=new_state.name)

    def _emit(self, event_type: EventType, **data) -> None:
        if self._event_bus is not None:
            self._event_bus.emit(Event(event_type, data=data, source="session"))
