import numpy as np

import config
from lesson import LessonState, TracingLesson
from tests.conftest import FakeClock
from ui_renderer import ConfettiBurst, UIRenderer


def _active_lesson(clock: FakeClock, shape: str = "Circle") -> TracingLesson:
    lesson = TracingLesson(shape, 800, 600, clock=clock)
    while lesson.state is LessonState.INTRO:
        lesson.tick()
    return lesson


def test_missing_canvas_skips_frame(clock) -> None:
    renderer = UIRenderer(800, 600)
    lesson = TracingLesson("Circle", 800, 600, clock=clock)
    assert renderer.render_frame(None, lesson.frame_state()) is None


def test_new_canvas_uses_background(clock) -> None:
    canvas = UIRenderer(320, 240).new_canvas()
    assert canvas.shape == (240, 320, 3)
    assert tuple(canvas[0, 0]) == config.UI_COLORS["background"]


def test_base_path_is_drawn(clock) -> None:
    renderer = UIRenderer(800, 600)
    lesson = _active_lesson(clock)
    frame = renderer.render_frame(renderer.new_canvas(), lesson.frame_state())
    assert frame.shape == (600, 800, 3)
    # Left edge of the circle lies on the path stroke, centre stays background
    assert tuple(frame[300, 400]) == config.UI_COLORS["background"]
    assert (frame == config.UI_COLORS["path"]).all(axis=2).any()


def test_traced_points_are_filled(clock) -> None:
    renderer = UIRenderer(800, 600)
    lesson = _active_lesson(clock)
    x, y = lesson.path[0]
    lesson.pointer_down(x, y)
    lesson.pointer_up()

    frame = renderer.render_frame(renderer.new_canvas(), lesson.frame_state())
    assert tuple(frame[int(round(y)), int(round(x))]) == config.UI_COLORS["traced"]


def test_pointer_drawn_only_while_tracing(clock) -> None:
    renderer = UIRenderer(800, 600)
    lesson = _active_lesson(clock)
    lesson.pointer_down(100, 100)

    frame = renderer.render_frame(renderer.new_canvas(), lesson.frame_state())
    assert tuple(frame[100, 100]) == config.UI_COLORS["pointer"]

    lesson.pointer_up()
    frame = renderer.render_frame(renderer.new_canvas(), lesson.frame_state())
    assert tuple(frame[100, 100]) == config.UI_COLORS["background"]


def test_ghost_frame_differs_from_idle_frame(clock) -> None:
    renderer = UIRenderer(800, 600)
    lesson = _active_lesson(clock)
    idle = renderer.render_frame(renderer.new_canvas(), lesson.frame_state())

    clock.advance(config.IDLE_TIMEOUT)
    for _ in range(40):
        lesson.tick()
    state = lesson.frame_state()
    assert state.state is LessonState.GHOSTING
    ghost = renderer.render_frame(renderer.new_canvas(), state)
    assert not np.array_equal(idle, ghost)


def test_confetti_burst_moves_and_expires() -> None:
    clock = FakeClock()
    confetti = ConfettiBurst(rng=np.random.default_rng(1), clock=clock)
    assert not confetti.active

    confetti.burst(800, 600, count=20)
    assert confetti.active
    start = confetti.pos.copy()
    confetti.update()
    assert not np.array_equal(start, confetti.pos)
    # Fired upwards
    assert (confetti.pos[:, 1] < start[:, 1]).all()

    clock.advance(config.CONFETTI_LIFETIME)
    confetti.update()
    assert not confetti.active
    assert len(confetti.pos) == 0


def test_confetti_drawn_when_active(clock) -> None:
    renderer = UIRenderer(800, 600)
    renderer.confetti = ConfettiBurst(rng=np.random.default_rng(3), clock=clock)
    lesson = _active_lesson(clock)

    plain = renderer.render_frame(renderer.new_canvas(), lesson.frame_state())
    renderer.confetti.burst(800, 600)
    for _ in range(5):
        renderer.confetti.update()
    party = renderer.render_frame(renderer.new_canvas(), lesson.frame_state())
    assert not np.array_equal(plain, party)
