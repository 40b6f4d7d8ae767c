"""
Main entry point for FlapCube.

Loads settings, wires the game session to the renderer and event bus,
and runs the pygame simulator window.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from flapcube.settings import Settings, get_settings
from flapcube.core.events import EventBus, EventType, Event
from flapcube.game.session import GameSession
from flapcube.graphics.renderer import FrameRenderer

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure logging to console and, optionally, a fresh log file."""
    level = logging.DEBUG if debug else logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        # Truncate on each run for fresh logs
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logging.info(f"Logging to file: {log_file}")

    # Per-obstacle debug lines are noisy
    if not debug:
        logging.getLogger("flapcube.game.spawner").setLevel(logging.INFO)


def build_session(settings: Settings, event_bus: EventBus) -> tuple[GameSession, FrameRenderer]:
    """Create the session and its renderer, both bound to the bus."""
    game = settings.game
    renderer = FrameRenderer(game.width, game.height)
    session = GameSession(game, render_hook=renderer, event_bus=event_bus)

    def log_score(event: Event) -> None:
        logger.info(f"Run ended: {event.data}")

    event_bus.subscribe(EventType.COLLISION, log_score)
    return session, renderer


async def run_simulator(settings: Settings) -> None:
    """Run the game in a desktop pygame window."""
    from flapcube.simulator.window import SimulatorWindow

    event_bus = EventBus()
    session, renderer = build_session(settings, event_bus)

    window = SimulatorWindow(
        renderer=renderer,
        state_machine=session.state_machine,
        event_bus=event_bus,
        config=settings.window,
        fps=settings.game.fps,
    )
    await window.run()


def main() -> None:
    """Main entry point."""
    load_dotenv()
    settings = get_settings()
    setup_logging(settings.debug, settings.log_file)

    logger.info("FlapCube starting")
    try:
        asyncio.run(run_simulator(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")

    logger.info("FlapCube shutdown complete")


if __name__ == "__main__":
    main()
