import random

import pytest

from flapcube.core.events import EventBus, Event, EventType
from flapcube.core.state import GameState
from flapcube.game.session import GameSession


@pytest.fixture
def session(settings, rng) -> GameSession:
    return GameSession(settings, rng)


def play(session: GameSession) -> None:
    """Drive a fresh session through the countdown into PLAYING."""
    session.start()
    while session.state == GameState.COUNTDOWN:
        session.tick()


def crash(session: GameSession) -> None:
    """Let the body fall off the bottom of the playfield."""
    while session.state == GameState.PLAYING:
        session.tick()


def test_session_starts_on_title_screen(session) -> None:
    assert session.state == GameState.START
    assert session.run.score == 0
    assert session.run.high_score == 0
    assert session.obstacles == ()


def test_start_enters_countdown_and_resets_frame(session) -> None:
    session.tick()
    session.tick()

    assert session.start() is True

    assert session.state == GameState.COUNTDOWN
    assert session.run.frame == 0


def test_countdown_lasts_configured_seconds(session, settings) -> None:
    session.start()

    for _ in range(settings.countdown_seconds * settings.fps):
        session.tick()
        assert session.state == GameState.COUNTDOWN

    session.tick()
    assert session.state == GameState.PLAYING


def test_frame_counter_restarts_when_play_begins(session) -> None:
    frames_seen = []
    session.set_render_hook(lambda snap: frames_seen.append((snap.state, snap.frame)))
    session.start()
    while session.state == GameState.COUNTDOWN:
        session.tick()

    # The transition tick renders as play frame 0
    assert frames_seen[-1] == (GameState.PLAYING, 0)
    assert session.run.frame == 1

    session.tick()
    assert frames_seen[-1] == (GameState.PLAYING, 1)
    assert session.run.frame == 2


def test_countdown_shows_three_two_one(settings, rng) -> None:
    shown = []
    session = GameSession(settings, rng, render_hook=lambda snap: shown.append(snap.countdown))

    play(session)

    assert [n for n in dict.fromkeys(shown) if n is not None] == [3, 2, 1]


def test_zero_second_countdown_plays_on_first_tick(settings, rng) -> None:
    session = GameSession(settings.model_copy(update={"countdown_seconds": 0}), rng)
    session.start()

    session.tick()

    assert session.state == GameState.PLAYING


def test_playing_tick_updates_body_and_spawns(session, settings) -> None:
    play(session)
    y0 = session.body.y

    session.tick()

    assert session.body.y == pytest.approx(y0 + settings.gravity)
    assert len(session.obstacles) == 1
    assert session.obstacles[0].x == settings.width - settings.obstacle_speed


def test_jump_only_works_while_playing(session, settings) -> None:
    assert session.jump() is False
    assert session.body.velocity == 0.0

    play(session)
    assert session.jump() is True
    assert session.body.velocity == -settings.jump_impulse


def test_falling_out_of_the_playfield_ends_the_run(session) -> None:
    play(session)

    crash(session)

    assert session.state == GameState.GAME_OVER


def test_collision_with_obstacle_ends_the_run(session, make_obstacle) -> None:
    play(session)
    session.body.y = 10.0
    session.spawner._obstacles = [make_obstacle(x=session.body.x - 5, gap_top=200.0)]
    session.spawner.policy.on_spawned(session.run.frame, session.spawner._obstacles[0])

    session.tick()

    assert session.state == GameState.GAME_OVER


def test_stale_jump_in_game_over_is_ignored(session) -> None:
    play(session)
    crash(session)
    velocity = session.body.velocity

    assert session.jump() is False
    assert session.body.velocity == velocity
    assert session.state == GameState.GAME_OVER


def test_game_over_freezes_simulation(session) -> None:
    play(session)
    crash(session)
    y = session.body.y
    positions = [o.x for o in session.obstacles]

    for _ in range(10):
        session.tick()

    assert session.body.y == y
    assert [o.x for o in session.obstacles] == positions


def test_restart_resets_run_but_keeps_high_score(session) -> None:
    play(session)
    crash(session)
    session.run.score = 7
    session.run.high_score = 7

    assert session.restart() is True

    assert session.state == GameState.START
    assert session.run.score == 0
    assert session.run.high_score == 7
    assert session.run.frame == 0
    assert session.obstacles == ()
    assert session.body.y == session.settings.height / 2
    assert session.body.velocity == 0.0


def test_commands_outside_their_state_are_ignored(session) -> None:
    assert session.restart() is False
    assert session.state == GameState.START

    session.start()
    assert session.start() is False
    assert session.restart() is False
    assert session.jump() is False
    assert session.state == GameState.COUNTDOWN


def test_tap_maps_to_the_command_for_each_state(session, settings) -> None:
    assert session.tap() is True
    assert session.state == GameState.COUNTDOWN

    assert session.tap() is False
    assert session.state == GameState.COUNTDOWN

    while session.state == GameState.COUNTDOWN:
        session.tick()
    assert session.tap() is True
    assert session.body.velocity == -settings.jump_impulse

    crash(session)
    assert session.tap() is True
    assert session.state == GameState.START


def test_high_score_never_decreases_across_runs(settings) -> None:
    session = GameSession(settings, random.Random(5))
    highs = []

    for run in range(4):
        play(session)
        # Alternate between jumping through a few obstacles and dropping straight down
        frames = 0
        while session.state == GameState.PLAYING:
            if run % 2 == 0 and frames < 3000 and frames % 18 == 0 and session.body.y > 250:
                session.jump()
            session.tick()
            frames += 1
        highs.append(session.run.high_score)
        assert session.run.high_score >= session.run.score
        session.restart()

    assert highs == sorted(highs)


def test_render_hook_receives_one_snapshot_per_tick(settings, rng) -> None:
    snapshots = []
    session = GameSession(settings, rng, render_hook=snapshots.append)

    session.tick()
    session.start()
    ticks = 1
    while session.state == GameState.COUNTDOWN:
        session.tick()
        ticks += 1
    session.tick()
    ticks += 1

    assert len(snapshots) == ticks
    assert snapshots[0].state == GameState.START
    assert snapshots[-1].state == GameState.PLAYING
    assert len(snapshots[-1].obstacles) == 1


def test_frame_counter_increments_after_every_tick(session) -> None:
    for expected in range(1, 6):
        session.tick()
        assert session.run.frame == expected


def test_tick_cannot_reenter(settings, rng) -> None:
    errors = []

    def reentrant_hook(snapshot) -> None:
        try:
            session.tick()
        except RuntimeError as e:
            errors.append(e)

    session = GameSession(settings, rng, render_hook=reentrant_hook)
    session.tick()

    assert len(errors) == 1
    assert session.run.frame == 1


def test_bound_session_follows_bus_commands_and_reports(settings, rng) -> None:
    bus = EventBus()
    session = GameSession(settings, rng, event_bus=bus)
    changes = []
    bus.subscribe(EventType.STATE_CHANGED, lambda e: changes.append((e.data["old"], e.data["new"])))

    bus.emit(Event(EventType.START))
    assert session.state == GameState.COUNTDOWN

    while session.state != GameState.GAME_OVER:
        bus.emit(Event(EventType.TICK))

    assert changes == [
        ("START", "COUNTDOWN"),
        ("COUNTDOWN", "PLAYING"),
        ("PLAYING", "GAME_OVER"),
    ]
    collision = bus.get_history(EventType.COLLISION)[-1]
    assert collision.data == {"score": 0, "high_score": 0}

    bus.emit(Event(EventType.RESTART))
    assert session.state == GameState.START


def test_cleared_obstacles_are_announced(settings, rng, make_obstacle) -> None:
    bus = EventBus()
    session = GameSession(settings, rng, event_bus=bus)
    play(session)
    behind = make_obstacle(x=session.body.x - settings.obstacle_width - 20)
    session.spawner._obstacles = [behind]
    session.spawner.policy.on_spawned(session.run.frame, behind)

    session.tick()

    cleared = bus.get_history(EventType.OBSTACLE_CLEARED)
    assert [e.data["score"] for e in cleared] == [1]
    assert bus.get_history(EventType.HIGH_SCORE)[-1].data == {"high_score": 1}


def test_unbind_stops_routing(settings, rng) -> None:
    bus = EventBus()
    session = GameSession(settings, rng, event_bus=bus)

    session.unbind()
    bus.emit(Event(EventType.START))

    assert session.state == GameState.START
