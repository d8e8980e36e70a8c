"""
Tracing Lesson State Machine
- One lesson = one attempt at tracing one shape
- Intro sweep -> active tracing <-> ghost demonstration -> complete
- Pointer events and the per-frame tick are the only mutators; the
  renderer reads an immutable FrameState snapshot
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np

import config
from attempt_client import AttemptRecord
from shape_engine import ProximityTracker, generate_path, is_narrow, tolerance_radius

logger = logging.getLogger(__name__)


class LessonState(str, Enum):
    INTRO = "intro"
    ACTIVE = "active"
    GHOSTING = "ghosting"
    COMPLETE = "complete"


@dataclass(frozen=True)
class FrameState:
    """Everything the renderer needs for one frame."""

    shape: str
    path: np.ndarray
    traced: frozenset
    state: LessonState
    highlight: Optional[Tuple[float, float]]
    ghost_anchor: Optional[Tuple[float, float]]
    pointer: Optional[Tuple[float, float]]
    tracing: bool
    progress: float
    assistance_count: int
    narrow: bool


def _silent(text: str, enabled: bool) -> None:
    pass


class TracingLesson:
    """
    Lesson session for a single shape.

    Capabilities are injected so the lesson runs without a display or
    speakers:
      speak(text, enabled)  narration
      submit(record)        fire-and-forget attempt submission
      on_complete()         called once, after the completion display delay
      celebrate()           completion side effect (confetti)
      clock()               monotonic seconds
    """

    def __init__(
        self,
        shape: str,
        width: int,
        height: int,
        *,
        speak: Optional[Callable[[str, bool], None]] = None,
        submit: Optional[Callable[[AttemptRecord], object]] = None,
        on_complete: Optional[Callable[[], None]] = None,
        celebrate: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        voice_enabled: bool = config.VOICE_ENABLED,
    ):
        self.shape = shape
        self.voice_enabled = voice_enabled
        self._speak = speak or _silent
        self._submit = submit
        self._on_complete = on_complete
        self._celebrate = celebrate
        self._clock = clock

        self._build_path(width, height)
        self.restart()

    # ----------------------------
    # Session Management
    # ----------------------------

    def _build_path(self, width: int, height: int):
        self.width = width
        self.height = height
        self.path = generate_path(self.shape, width, height)
        self.tracker = ProximityTracker(self.path, tolerance_radius(width))

    def restart(self):
        """Throw away all progress and replay the intro."""
        now = self._clock()
        self.tracker.reset()
        self.state = LessonState.INTRO
        self.assistance_count = 0
        self.intro_progress = 0.0
        self.ghost_progress = 0.0
        self.ghost_anchor = 0
        self.tracing = False
        self.last_pointer = None
        self.last_interaction = now
        self.start_time = now
        self.completed_at = None
        self.submission = None
        self._completion_notified = False

        logger.info("Lesson started: %s (%d points)", self.shape, len(self.path))
        self._say("intro", shape=self.shape)

    def resize(self, width: int, height: int):
        """Viewport changed: regenerate the path and start over."""
        self._build_path(width, height)
        self.restart()

    def set_voice_enabled(self, enabled: bool):
        self.voice_enabled = enabled
        # The toggle itself is always announced
        self._speak(config.NARRATION["voice_on" if enabled else "voice_off"], True)

    def _say(self, key: str, **kwargs):
        self._speak(config.NARRATION[key].format(**kwargs), self.voice_enabled)

    @property
    def progress(self) -> float:
        return self.tracker.progress

    @property
    def is_complete(self) -> bool:
        return self.state is LessonState.COMPLETE

    # ----------------------------
    # Frame Tick
    # ----------------------------

    def tick(self):
        """Advance animations and idle detection. Call once per frame."""
        now = self._clock()

        if self.state is LessonState.INTRO:
            self.intro_progress += config.INTRO_STEP
            if self.intro_progress >= 1.0:
                self.state = LessonState.ACTIVE
                logger.debug("Intro finished for %s", self.shape)

        elif self.state is LessonState.COMPLETE:
            if (not self._completion_notified
                    and now - self.completed_at >= config.COMPLETE_DISPLAY_DELAY):
                self._completion_notified = True
                if self._on_complete is not None:
                    self._on_complete()

        elif not self.tracing and now - self.last_interaction >= config.IDLE_TIMEOUT:
            if self.state is not LessonState.GHOSTING:
                self._start_ghosting()
            self.ghost_progress += config.GHOST_STEP
            if self.ghost_progress >= 1.0:
                self.ghost_progress = 0.0

        elif self.state is LessonState.GHOSTING:
            self._stop_ghosting()

    def _start_ghosting(self):
        self.state = LessonState.GHOSTING
        self.assistance_count += 1

        # Demonstrate from where the learner stopped
        last = self.tracker.last_traced_index()
        self.ghost_anchor = last if last is not None and last < len(self.path) - 1 else 0
        self.ghost_progress = 0.0

        logger.info("Ghosting %s from index %d (assist #%d)",
                    self.shape, self.ghost_anchor, self.assistance_count)
        self._say("ghost")

    def _stop_ghosting(self):
        self.state = LessonState.ACTIVE
        logger.debug("Ghosting stopped for %s", self.shape)

    def ghost_index(self) -> int:
        """Path index of the ghost highlight."""
        span = len(self.path) - 1 - self.ghost_anchor
        return self.ghost_anchor + int(self.ghost_progress * span)

    # ----------------------------
    # Pointer Input
    # ----------------------------

    def pointer_down(self, x: float, y: float):
        if self.state in (LessonState.INTRO, LessonState.COMPLETE):
            return
        self.tracing = True
        self.last_interaction = self._clock()
        if self.state is LessonState.GHOSTING:
            self._stop_ghosting()
        self.pointer_move(x, y)

    def pointer_move(self, x: float, y: float):
        if not self.tracing or self.state is not LessonState.ACTIVE:
            return
        self.last_interaction = self._clock()
        self.last_pointer = (float(x), float(y))
        self.tracker.mark(x, y)
        self._check_completion()

    def pointer_up(self):
        self.tracing = False
        self.last_interaction = self._clock()

    pointer_cancel = pointer_up

    # ----------------------------
    # Completion & Submission
    # ----------------------------

    def _check_completion(self):
        if self.state is LessonState.COMPLETE:
            return
        if self.tracker.traced_count < self.tracker.total * config.COMPLETION_THRESHOLD:
            return

        now = self._clock()
        self.state = LessonState.COMPLETE
        self.tracing = False
        self.completed_at = now

        duration_ms = int(round((now - self.start_time) * 1000))
        logger.info("Lesson complete: %s in %dms with %d assists",
                    self.shape, duration_ms, self.assistance_count)

        self._say("success")
        if self._celebrate is not None:
            self._celebrate()

        record = AttemptRecord(
            shape=self.shape,
            attention_score=config.ATTENTION_SCORE,
            precision_score=config.PRECISION_SCORE,
            assistance_count=self.assistance_count,
            duration_ms=duration_ms,
        )
        self._submit_record(record)

    def _submit_record(self, record: AttemptRecord):
        if self._submit is None:
            return
        # The lesson is already complete locally; a failed submission only gets logged
        try:
            self.submission = self._submit(record)
        except Exception:
            logger.exception("Could not submit attempt for %s", record.shape)

    # ----------------------------
    # Render Snapshot
    # ----------------------------

    def _point(self, idx: int) -> Tuple[float, float]:
        x, y = self.path[idx]
        return float(x), float(y)

    def frame_state(self) -> FrameState:
        highlight = None
        anchor = None
        if len(self.path) > 0:
            if self.state is LessonState.INTRO:
                idx = int(min(self.intro_progress, 1.0) * (len(self.path) - 1))
                highlight = self._point(idx)
            elif self.state is LessonState.GHOSTING:
                highlight = self._point(self.ghost_index())
                anchor = self._point(self.ghost_anchor)

        return FrameState(
            shape=self.shape,
            path=self.path,
            traced=self.tracker.traced_indices,
            state=self.state,
            highlight=highlight,
            ghost_anchor=anchor,
            pointer=self.last_pointer,
            tracing=self.tracing,
            progress=self.progress,
            assistance_count=self.assistance_count,
            narrow=is_narrow(self.width),
        )
