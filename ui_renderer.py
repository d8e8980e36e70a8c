"""
UI and Rendering Layer
- Composites one lesson frame: dashed path, traced markers, intro/ghost
  highlight, pointer, HUD badges
- Confetti celebration on completion
"""

import time
from typing import Optional, Tuple

import cv2
import numpy as np

import config
from lesson import FrameState, LessonState
from shape_engine import cumulative_length

FONT = cv2.FONT_HERSHEY_SIMPLEX


def _px(pt) -> Tuple[int, int]:
    return int(round(pt[0])), int(round(pt[1]))


class ConfettiBurst:
    """Particle burst fired from the lower middle of the screen."""

    GRAVITY = 0.45
    DRAG = 0.985

    def __init__(self, rng: Optional[np.random.Generator] = None, clock=time.monotonic):
        self._rng = rng or np.random.default_rng()
        self._clock = clock
        self.pos = np.empty((0, 2))
        self.vel = np.empty((0, 2))
        self.colors = []
        self.started = None

    def burst(self, width: int, height: int, count: int = config.CONFETTI_PARTICLES):
        palette = [config.UI_COLORS["traced"], config.UI_COLORS["pointer"]]
        spread = config.CONFETTI_SPREAD

        # Upward cone around -90 degrees
        angles = np.radians(-90 + self._rng.uniform(-spread / 2, spread / 2, count))
        speed = self._rng.uniform(8.0, 22.0, count)
        self.vel = np.column_stack([np.cos(angles) * speed, np.sin(angles) * speed])
        self.pos = np.tile([width / 2, height * config.CONFETTI_ORIGIN_Y], (count, 1)).astype(np.float64)
        self.colors = [palette[i] for i in self._rng.integers(0, len(palette), count)]
        self.started = self._clock()

    @property
    def active(self) -> bool:
        if self.started is None or len(self.pos) == 0:
            return False
        return self._clock() - self.started < config.CONFETTI_LIFETIME

    def update(self):
        """Advance one frame."""
        if not self.active:
            self.clear()
            return
        self.vel[:, 1] += self.GRAVITY
        self.vel *= self.DRAG
        self.pos += self.vel

    def clear(self):
        self.pos = np.empty((0, 2))
        self.vel = np.empty((0, 2))
        self.colors = []
        self.started = None

    def draw(self, canvas: np.ndarray) -> np.ndarray:
        for pt, color in zip(self.pos, self.colors):
            cv2.circle(canvas, _px(pt), 5, color, -1, cv2.LINE_AA)
        return canvas


class UIRenderer:
    """Main UI rendering class."""

    def __init__(self, width: int = config.WINDOW_WIDTH, height: int = config.WINDOW_HEIGHT):
        self.width = width
        self.height = height
        self.confetti = ConfettiBurst()

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height

    def new_canvas(self) -> np.ndarray:
        canvas = np.empty((self.height, self.width, 3), dtype=np.uint8)
        canvas[:] = config.UI_COLORS["background"]
        return canvas

    def render_frame(self, canvas: Optional[np.ndarray], state: FrameState) -> Optional[np.ndarray]:
        """Draw one frame. Without a canvas the frame is skipped."""
        if canvas is None:
            return None

        line_width = config.PATH_LINE_WIDTH_NARROW if state.narrow else config.PATH_LINE_WIDTH
        marker = config.TRACED_MARKER_RADIUS_NARROW if state.narrow else config.TRACED_MARKER_RADIUS

        # 1. Base path
        self.draw_dashed_path(canvas, state.path, config.UI_COLORS["path"], line_width)

        # 2. Traced points
        self.draw_traced_points(canvas, state.path, state.traced, marker)

        # 3. Intro / ghost light
        if state.highlight is not None:
            self.draw_highlight(canvas, state.highlight, state.ghost_anchor,
                                ghost=state.state is LessonState.GHOSTING)

        # 4. Pointer
        if state.tracing and state.pointer is not None:
            cv2.circle(canvas, _px(state.pointer), config.POINTER_RADIUS,
                       config.UI_COLORS["pointer"], -1, cv2.LINE_AA)

        # 5. HUD and banners
        self.draw_hud(canvas, state)
        self.draw_banner(canvas, state.state)

        # 6. Celebration
        if self.confetti.active:
            self.confetti.draw(canvas)

        return canvas

    def draw_dashed_path(
        self,
        canvas: np.ndarray,
        path: np.ndarray,
        color: Tuple[int, int, int],
        thickness: int,
        dash: Tuple[int, int] = config.PATH_DASH,
    ) -> np.ndarray:
        """Draw the path as dashes measured along its arc length."""
        if len(path) < 2:
            return canvas

        on, off = dash
        cum = cumulative_length(path)
        total = cum[-1]

        start = 0.0
        while start < total:
            end = min(start + on, total)
            inner = cum[(cum > start) & (cum < end)]
            s = np.concatenate([[start], inner, [end]])
            xs = np.interp(s, cum, path[:, 0])
            ys = np.interp(s, cum, path[:, 1])
            pts = np.column_stack([xs, ys]).round().astype(np.int32)
            cv2.polylines(canvas, [pts], False, color, thickness, cv2.LINE_AA)
            start += on + off

        return canvas

    def draw_traced_points(self, canvas, path, traced, radius: int) -> np.ndarray:
        color = config.UI_COLORS["traced"]
        for idx in traced:
            cv2.circle(canvas, _px(path[idx]), radius, color, -1, cv2.LINE_AA)
        return canvas

    def draw_highlight(self, canvas, point, anchor=None, ghost: bool = False) -> np.ndarray:
        """Translucent guide light; while ghosting, a line trails back to the anchor."""
        color = config.UI_COLORS["ghost" if ghost else "intro"]
        alpha = config.GHOST_ALPHA if ghost else config.INTRO_ALPHA

        overlay = canvas.copy()
        cv2.circle(overlay, _px(point), config.HIGHLIGHT_RADIUS, color, -1, cv2.LINE_AA)
        if ghost and anchor is not None:
            cv2.line(overlay, _px(anchor), _px(point), color, config.GHOST_LINE_WIDTH, cv2.LINE_AA)

        cv2.addWeighted(overlay, alpha, canvas, 1 - alpha, 0, canvas)
        return canvas

    def _badge(self, canvas, text: str, right: int, top: int, color, scale: float = 0.8) -> int:
        """Right-aligned rounded-ish label. Returns its left edge."""
        (tw, th), base = cv2.getTextSize(text, FONT, scale, 2)
        pad = 10
        x0 = right - tw - 2 * pad
        y1 = top + th + base + 2 * pad
        cv2.rectangle(canvas, (x0, top), (right, y1), config.UI_COLORS["badge_bg"], -1)
        cv2.rectangle(canvas, (x0, top), (right, y1), (220, 220, 220), 1)
        cv2.putText(canvas, text, (x0 + pad, top + pad + th), FONT, scale, color, 2, cv2.LINE_AA)
        return x0

    def draw_hud(self, canvas: np.ndarray, state: FrameState) -> np.ndarray:
        """Shape name, progress and assistance count in the top right corner."""
        h, w = canvas.shape[:2]
        right = w - 24

        self._badge(canvas, state.shape, right, 24, config.UI_COLORS["text_dark"], scale=1.0)

        left = self._badge(canvas, f"{int(round(state.progress * 100))}%", right, 80,
                           config.UI_COLORS["traced"])
        if state.assistance_count > 0:
            self._badge(canvas, f"Help x{state.assistance_count}", left - 8, 80,
                        config.UI_COLORS["ghost"])
        return canvas

    def draw_banner(self, canvas: np.ndarray, lesson_state: LessonState) -> np.ndarray:
        """Status pill: centered during intro, bottom while ghosting."""
        h, w = canvas.shape[:2]
        if lesson_state is LessonState.INTRO:
            text, bg, fg, cy = (config.BANNERS["intro"], config.UI_COLORS["intro_banner"],
                                config.UI_COLORS["intro_text"], h // 2)
        elif lesson_state is LessonState.GHOSTING:
            text, bg, fg, cy = (config.BANNERS["ghost"], config.UI_COLORS["ghost_banner"],
                                config.UI_COLORS["ghost_text"], h - 60)
        elif lesson_state is LessonState.COMPLETE:
            text, bg, fg, cy = (config.BANNERS["complete"], config.UI_COLORS["intro_banner"],
                                config.UI_COLORS["intro_text"], h // 2)
        else:
            return canvas

        (tw, th), base = cv2.getTextSize(text, FONT, 0.9, 2)
        x0 = (w - tw) // 2 - 24
        y0 = cy - th // 2 - 16
        cv2.rectangle(canvas, (x0, y0), (x0 + tw + 48, y0 + th + base + 32), bg, -1)
        cv2.putText(canvas, text, (x0 + 24, y0 + 16 + th), FONT, 0.9, fg, 2, cv2.LINE_AA)
        return canvas

    def draw_fps(self, canvas: np.ndarray, fps: float) -> np.ndarray:
        cv2.putText(canvas, f"{fps:.0f} fps", (20, 30), FONT, 0.6,
                    config.UI_COLORS["text_gray"], 1, cv2.LINE_AA)
        return canvas


if __name__ == "__main__":
    # Test rendering
    from lesson import TracingLesson

    renderer = UIRenderer(1280, 720)
    lesson = TracingLesson("Star", 1280, 720)
    for _ in range(30):
        lesson.tick()

    canvas = renderer.render_frame(renderer.new_canvas(), lesson.frame_state())

    cv2.imshow("Test", canvas)
    cv2.waitKey(0)
    cv2.destroyAllWindows()
