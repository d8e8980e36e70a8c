"""
Shape Trace Tutor - Main Application

Trace the dashed shape with the mouse (or a pinch gesture with --hand).
Idle for a few seconds and a ghost light demonstrates the way; finish a
shape and the next one in the rotation starts after a short celebration.

Keys: R restart  V voice  N next shape  Q quit
"""

import argparse
import logging
import sys
import time
from typing import Callable, Optional

import cv2
import numpy as np

import config
from attempt_client import AttemptClient
from lesson import TracingLesson
from narration import Narrator
from shape_engine import shape_for_index
from ui_renderer import UIRenderer

logger = logging.getLogger(__name__)


# ===============================
# Application
# ===============================

class TraceApp:
    def __init__(
        self,
        width: int = config.WINDOW_WIDTH,
        height: int = config.WINDOW_HEIGHT,
        narrator: Optional[Narrator] = None,
        client: Optional[AttemptClient] = None,
        hand=None,
        voice_enabled: bool = config.VOICE_ENABLED,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.width = width
        self.height = height
        self.narrator = narrator
        self.client = client
        self.hand = hand
        self.voice_enabled = voice_enabled
        self._clock = clock

        self.renderer = UIRenderer(width, height)
        self.shape_index = 0
        self.lessons_completed = 0
        self._hand_down = False

        self._fps = 0.0
        self._last_frame = None

        self.lesson = self._new_lesson()

    # ----------------------------
    # Lesson Management
    # ----------------------------

    def _new_lesson(self) -> TracingLesson:
        return TracingLesson(
            shape_for_index(self.shape_index),
            self.width,
            self.height,
            speak=self.narrator.speak if self.narrator is not None else None,
            submit=self.client.submit if self.client is not None else None,
            on_complete=self._on_lesson_complete,
            celebrate=self._celebrate,
            clock=self._clock,
            voice_enabled=self.voice_enabled,
        )

    def _celebrate(self):
        self.renderer.confetti.burst(self.width, self.height)

    def _on_lesson_complete(self):
        self.lessons_completed += 1
        self.next_shape()

    def next_shape(self):
        """Skip to the next shape in the rotation."""
        self.shape_index += 1
        self._hand_down = False
        self.lesson = self._new_lesson()

    def restart(self):
        self._hand_down = False
        self.renderer.confetti.clear()
        self.lesson.restart()

    def toggle_voice(self):
        self.voice_enabled = not self.voice_enabled
        self.lesson.set_voice_enabled(self.voice_enabled)

    def resize(self, width: int, height: int):
        """Viewport changed: the current lesson restarts at the new size."""
        if width <= 0 or height <= 0 or (width, height) == (self.width, self.height):
            return
        logger.info("Viewport resized to %dx%d", width, height)
        self.width = width
        self.height = height
        self.renderer.resize(width, height)
        self._hand_down = False
        self.lesson.resize(width, height)

    # ----------------------------
    # Input Handling
    # ----------------------------

    def handle_mouse(self, event, x, y, flags, param=None):
        """OpenCV mouse callback: the left button is the tracing pointer."""
        if event == cv2.EVENT_LBUTTONDOWN:
            self.lesson.pointer_down(x, y)
        elif event == cv2.EVENT_MOUSEMOVE and flags & cv2.EVENT_FLAG_LBUTTON:
            self.lesson.pointer_move(x, y)
        elif event == cv2.EVENT_LBUTTONUP:
            self.lesson.pointer_up()

    def _poll_hand(self):
        reading = self.hand.read(self.width, self.height)
        pinching = reading is not None and reading[1]

        if pinching:
            x, y = reading[0]
            if not self._hand_down:
                self._hand_down = True
                self.lesson.pointer_down(x, y)
            else:
                self.lesson.pointer_move(x, y)
        elif self._hand_down:
            self._hand_down = False
            self.lesson.pointer_up()

    def handle_key(self, key: int) -> bool:
        """Handle keyboard input. Returns False to quit."""
        keys = config.KEYBOARD_LAYOUT
        if key in (ord(keys["quit"]), 27):
            return False
        if key == ord(keys["restart"]):
            self.restart()
        elif key == ord(keys["voice"]):
            self.toggle_voice()
        elif key == ord(keys["next"]):
            self.next_shape()
        return True

    # ----------------------------
    # Frame Loop
    # ----------------------------

    def step(self) -> Optional[np.ndarray]:
        """One frame: input polling, state machine tick, render."""
        if self.hand is not None:
            self._poll_hand()

        self.lesson.tick()
        self.renderer.confetti.update()

        display = self.renderer.render_frame(self.renderer.new_canvas(), self.lesson.frame_state())

        now = self._clock()
        if self._last_frame is not None and now > self._last_frame:
            self._fps = 0.9 * self._fps + 0.1 / (now - self._last_frame)
        self._last_frame = now
        if config.SHOW_FPS and display is not None:
            self.renderer.draw_fps(display, self._fps)

        return display

    def _sync_window_size(self):
        _, _, w, h = cv2.getWindowImageRect(config.WINDOW_TITLE)
        self.resize(w, h)

    def run(self):
        """Main application loop."""
        cv2.namedWindow(config.WINDOW_TITLE, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(config.WINDOW_TITLE, self.width, self.height)
        cv2.setMouseCallback(config.WINDOW_TITLE, self.handle_mouse)

        delay = max(1, int(1000 / config.TARGET_FPS))
        running = True
        try:
            while running:
                self._sync_window_size()

                display = self.step()
                if display is not None:
                    cv2.imshow(config.WINDOW_TITLE, display)

                key = cv2.waitKey(delay) & 0xFF
                if key != 255:
                    running = self.handle_key(key)

                if cv2.getWindowProperty(config.WINDOW_TITLE, cv2.WND_PROP_VISIBLE) < 1:
                    break
        finally:
            if self.hand is not None:
                self.hand.close()
            if self.narrator is not None:
                self.narrator.stop()
            cv2.destroyAllWindows()

        logger.info("Session ended after %d completed shapes", self.lessons_completed)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=config.APP_NAME)
    parser.add_argument("--width", type=int, default=config.WINDOW_WIDTH)
    parser.add_argument("--height", type=int, default=config.WINDOW_HEIGHT)
    parser.add_argument("--offline", action="store_true", help="don't submit attempts")
    parser.add_argument("--mute", action="store_true", help="start with narration off")
    parser.add_argument("--hand", action="store_true", help="trace with a pinch gesture (webcam)")
    parser.add_argument("--camera", type=int, default=0)
    parser.add_argument("--api-url", default=config.API_BASE_URL)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    hand = None
    if args.hand:
        from hand_input import HandPointer
        try:
            hand = HandPointer(args.camera)
        except RuntimeError as e:
            logger.error("%s", e)
            sys.exit(1)

    client = None if args.offline else AttemptClient(args.api_url)
    app = TraceApp(
        args.width,
        args.height,
        narrator=Narrator(),
        client=client,
        hand=hand,
        voice_enabled=not args.mute,
    )
    try:
        app.run()
    finally:
        if client is not None:
            client.close()


if __name__ == "__main__":
    main()
