import random

import pytest

from flapcube.settings import GameSettings
from flapcube.game.obstacle import Obstacle
from flapcube.game.snapshot import Rect


def test_created_gap_stays_in_configured_bounds(settings) -> None:
    rng = random.Random(7)

    for _ in range(500):
        obstacle = Obstacle.create(settings, rng)

        assert settings.min_gap <= obstacle.gap_height <= settings.max_gap
        assert obstacle.gap_top >= settings.gap_margin
        assert obstacle.gap_bottom <= settings.height - settings.gap_margin


def test_created_at_right_edge_and_not_passed(settings, rng) -> None:
    obstacle = Obstacle.create(settings, rng)

    assert obstacle.x == settings.width
    assert obstacle.passed is False
    assert obstacle.width == settings.obstacle_width


def test_gap_band_is_read_only(settings, rng) -> None:
    obstacle = Obstacle.create(settings, rng)

    with pytest.raises(AttributeError):
        obstacle.gap_height = 1.0
    with pytest.raises(AttributeError):
        obstacle.gap_top = 1.0


def test_gap_height_unchanged_by_updates(settings, rng) -> None:
    obstacle = Obstacle.create(settings, rng)
    gap = (obstacle.gap_top, obstacle.gap_height)

    for _ in range(50):
        obstacle.update()

    assert (obstacle.gap_top, obstacle.gap_height) == gap


def test_update_moves_left_by_speed(make_obstacle, settings) -> None:
    obstacle = make_obstacle(x=300.0)

    obstacle.update()

    assert obstacle.x == pytest.approx(300.0 - settings.obstacle_speed)


def test_becomes_offscreen_only_after_trailing_edge_leaves(settings, rng) -> None:
    obstacle = Obstacle.create(settings, rng)
    assert not obstacle.is_offscreen()

    while obstacle.x + obstacle.width >= 0:
        assert not obstacle.is_offscreen()
        obstacle.update()

    assert obstacle.is_offscreen()


def test_overlaps_when_body_above_gap(make_obstacle) -> None:
    obstacle = make_obstacle(x=60.0, gap_top=200.0, gap_height=250.0)
    body = Rect(75.0, 150.0, 30, 30)

    assert obstacle.overlaps(body)


def test_overlaps_when_body_below_gap(make_obstacle) -> None:
    obstacle = make_obstacle(x=60.0, gap_top=200.0, gap_height=250.0)
    body = Rect(75.0, 440.0, 30, 30)

    assert obstacle.overlaps(body)


def test_no_overlap_inside_gap(make_obstacle) -> None:
    obstacle = make_obstacle(x=60.0, gap_top=200.0, gap_height=250.0)
    body = Rect(75.0, 300.0, 30, 30)

    assert not obstacle.overlaps(body)


def test_touching_gap_edges_is_not_a_collision(make_obstacle) -> None:
    obstacle = make_obstacle(x=60.0, gap_top=200.0, gap_height=250.0)

    assert not obstacle.overlaps(Rect(75.0, 200.0, 30, 30))
    assert not obstacle.overlaps(Rect(75.0, 420.0, 30, 30))


def test_no_overlap_outside_column(make_obstacle, settings) -> None:
    obstacle = make_obstacle(x=200.0, gap_top=200.0, gap_height=250.0)

    # Body touches the column's left side exactly
    assert not obstacle.overlaps(Rect(170.0, 0.0, 30, 30))
    # Body starts exactly at the trailing edge
    assert not obstacle.overlaps(Rect(200.0 + settings.obstacle_width, 0.0, 30, 30))


def test_has_cleared_once_trailing_edge_is_left_of_body(make_obstacle, settings) -> None:
    body = Rect(75.0, 300.0, 30, 30)

    assert not make_obstacle(x=75.0 - settings.obstacle_width).has_cleared(body)
    assert make_obstacle(x=74.0 - settings.obstacle_width).has_cleared(body)


def test_top_and_bottom_rects_project_the_gap(make_obstacle, settings) -> None:
    obstacle = make_obstacle(x=120.0, gap_top=180.0, gap_height=240.0)

    assert obstacle.top_rect == Rect(120.0, 0.0, settings.obstacle_width, 180.0)
    assert obstacle.bottom_rect == Rect(120.0, 420.0, settings.obstacle_width, settings.height - 420.0)

    obstacle.update()
    assert obstacle.top_rect.x == obstacle.x
    assert obstacle.bottom_rect.x == obstacle.x


def test_snapshot_is_a_copy(make_obstacle) -> None:
    obstacle = make_obstacle(x=100.0)
    snap = obstacle.snapshot()

    obstacle.update()
    obstacle.passed = True

    assert snap.x == 100.0
    assert snap.passed is False


def test_create_without_rng_uses_fresh_randomness() -> None:
    settings = GameSettings()
    obstacle = Obstacle.create(settings)

    assert settings.min_gap <= obstacle.gap_height <= settings.max_gap
