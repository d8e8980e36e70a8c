import numpy as np
import pytest

import config
from shape_engine import (
    ProximityTracker,
    fill_gaps,
    generate_path,
    max_spacing,
    shape_for_index,
    tolerance_radius,
)

VIEWPORTS = [(800, 600), (375, 667), (1280, 720), (1920, 1080), (2560, 1440)]


@pytest.mark.parametrize("width,height", VIEWPORTS)
@pytest.mark.parametrize("shape", config.SHAPES)
def test_every_shape_is_traceable_without_gaps(shape: str, width: int, height: int) -> None:
    path = generate_path(shape, width, height)
    assert len(path) > 0
    assert path.shape[1] == 2
    assert max_spacing(path) < tolerance_radius(width)


@pytest.mark.parametrize("shape", config.SHAPES)
def test_shapes_stay_inside_viewport(shape: str) -> None:
    path = generate_path(shape, 800, 600)
    assert path[:, 0].min() >= 0 and path[:, 0].max() <= 800
    assert path[:, 1].min() >= 0 and path[:, 1].max() <= 600


def test_circle_scenario_800x600() -> None:
    path = generate_path("Circle", 800, 600)
    assert len(path) == 361

    radius = 600 * 0.85 / 2
    dists = np.hypot(path[:, 0] - 400, path[:, 1] - 300)
    assert np.allclose(dists, radius)
    # Closed loop
    assert np.allclose(path[0], path[-1])


@pytest.mark.parametrize("shape", ["Circle", "Oval", "Square", "Rectangle", "Diamond", "Horizontal Line"])
def test_symmetric_shapes_are_centered(shape: str) -> None:
    path = generate_path(shape, 1000, 700)
    cx = (path[:, 0].min() + path[:, 0].max()) / 2
    cy = (path[:, 1].min() + path[:, 1].max()) / 2
    assert cx == pytest.approx(500)
    assert cy == pytest.approx(350)


def test_unknown_shape_falls_back_to_circle() -> None:
    assert np.array_equal(generate_path("Blob", 800, 600), generate_path("Circle", 800, 600))


def test_generation_is_deterministic() -> None:
    for shape in config.SHAPES:
        assert np.array_equal(generate_path(shape, 640, 480), generate_path(shape, 640, 480))


def test_non_positive_viewport_rejected() -> None:
    with pytest.raises(ValueError):
        generate_path("Circle", 0, 600)


def test_star_alternates_outer_and_inner_radius() -> None:
    path = generate_path("Star", 800, 600)
    r = 600 * 0.85 / 2
    dists = np.hypot(path[:, 0] - 400, path[:, 1] - 300)
    assert dists.max() == pytest.approx(r)
    assert dists.min() == pytest.approx(r / 2.5)


def test_crescent_is_a_closed_loop_of_two_arcs() -> None:
    path = generate_path("Crescent", 800, 600)
    assert np.allclose(path[0], path[-1])
    r = 600 * 0.85 / 2
    assert path[:, 0].min() == pytest.approx(400)
    assert path[:, 0].max() == pytest.approx(400 + r)

    # The outer and the shifted inner arc both cross the horizontal axis at the right edge
    on_axis = np.isclose(path[:, 1], 300)
    assert on_axis.sum() == 2
    assert np.allclose(path[on_axis, 0], 400 + r)


def test_open_shapes_run_left_to_right() -> None:
    for shape in ("Horizontal Line", "Zig-Zag", "Wave"):
        xs = generate_path(shape, 800, 600)[:, 0]
        assert np.all(np.diff(xs) >= 0)


def test_fill_gaps_only_touches_sparse_segments() -> None:
    pts = np.array([[0.0, 0.0], [5.0, 0.0], [50.0, 0.0]])
    filled = fill_gaps(pts, 10.0)
    assert max_spacing(filled) <= 10.0
    assert np.allclose(filled[:2], pts[:2])
    assert np.allclose(filled[-1], pts[-1])


def test_tolerance_radius_by_device_category() -> None:
    assert tolerance_radius(1280) == config.SAFE_ZONE_RADIUS
    assert tolerance_radius(375) == config.SAFE_ZONE_RADIUS_NARROW


def test_shape_rotation_wraps() -> None:
    assert shape_for_index(0) == "Horizontal Line"
    assert shape_for_index(4) == "Circle"
    assert shape_for_index(len(config.SHAPES)) == "Horizontal Line"


# ===============================
# Proximity Tracking
# ===============================

def test_marking_is_idempotent() -> None:
    tracker = ProximityTracker(generate_path("Circle", 800, 600), 40)
    first = tracker.mark(655, 300)
    assert first > 0
    count = tracker.traced_count

    assert tracker.mark(655, 300) == 0
    assert tracker.traced_count == count


def test_radius_is_inclusive() -> None:
    tracker = ProximityTracker([[0.0, 0.0], [40.0, 0.0], [41.0, 0.0]], 40)
    assert tracker.mark(0, 0) == 2
    assert tracker.traced_indices == frozenset({0, 1})


def test_far_pointer_marks_nothing() -> None:
    tracker = ProximityTracker(generate_path("Circle", 800, 600), 40)
    assert tracker.mark(400, 300) == 0
    assert tracker.progress == 0.0


def test_progress_is_monotonic_for_any_pointer_stream() -> None:
    path = generate_path("Heart", 800, 600)
    tracker = ProximityTracker(path, 40)
    rng = np.random.default_rng(7)

    previous = 0
    for x, y in rng.uniform([0, 0], [800, 600], size=(300, 2)):
        tracker.mark(x, y)
        assert tracker.traced_count >= previous
        previous = tracker.traced_count


def test_any_order_is_credited() -> None:
    path = generate_path("Square", 800, 600)
    tracker = ProximityTracker(path, 40)
    for x, y in path[::-1]:
        tracker.mark(x, y)
    assert tracker.progress == 1.0


def test_tracing_all_circle_points_gives_full_progress() -> None:
    path = generate_path("Circle", 800, 600)
    tracker = ProximityTracker(path, tolerance_radius(800))
    for x, y in path:
        tracker.mark(x, y)
    assert tracker.traced_count == 361
    assert tracker.progress == 1.0


def test_last_traced_index() -> None:
    path = generate_path("Horizontal Line", 800, 600)
    tracker = ProximityTracker(path, 40)
    assert tracker.last_traced_index() is None

    # Samples are 5.1px apart starting at x=145
    tracker.mark(145, 300)
    assert tracker.traced_count == 8
    assert tracker.last_traced_index() == 7
    assert tracker.is_traced(0)
    assert not tracker.is_traced(8)


def test_closing_point_is_not_the_last_traced_index() -> None:
    path = generate_path("Circle", 800, 600)
    tracker = ProximityTracker(path, 40)
    tracker.mark(*path[0])
    # Both ends of the loop sit under the pointer
    assert tracker.is_traced(360)
    assert tracker.last_traced_index() < 20

    tracker.mark(*path[90])
    assert 90 < tracker.last_traced_index() < 110


def test_closing_tail_is_skipped_when_tracing_backwards() -> None:
    path = generate_path("Circle", 800, 600)
    tracker = ProximityTracker(path, 40)
    tracker.mark(*path[355])
    assert tracker.is_traced(360)
    assert 340 < tracker.last_traced_index() < 355


def test_open_path_has_no_closing_tail() -> None:
    path = generate_path("Horizontal Line", 800, 600)
    tracker = ProximityTracker(path, 40)
    tracker.mark(*path[-1])
    assert tracker.last_traced_index() == len(path) - 1


def test_reset_clears_progress() -> None:
    tracker = ProximityTracker(generate_path("Circle", 800, 600), 40)
    tracker.mark(655, 300)
    tracker.reset()
    assert tracker.traced_count == 0
    assert tracker.last_traced_index() is None


def test_empty_path_has_zero_progress() -> None:
    tracker = ProximityTracker(np.empty((0, 2)), 40)
    assert tracker.mark(0, 0) == 0
    assert tracker.progress == 0.0
