"""
Pinch-to-Trace Hand Input
- Tracks the index fingertip with MediaPipe's hand landmarker
- Thumb + index pinch acts as "pointer down"; releasing the pinch lifts it
"""

import logging
import os
import urllib.request
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)

INDEX_FINGER_TIP = 8
THUMB_TIP = 4
PINCH_THRESHOLD_NORM = 0.06

# Minimum pixel movement to register a new pointer sample
MOVE_THRESHOLD = 5

MODELS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "models")
MODEL_PATH = os.path.join(MODELS_DIR, "hand_landmarker.task")
MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)

Reading = Tuple[Tuple[int, int], bool]


def ensure_model(path: str = MODEL_PATH) -> str:
    """Download the hand landmarker model on first use."""
    if not os.path.exists(path):
        os.makedirs(os.path.dirname(path), exist_ok=True)
        logger.info("Downloading hand_landmarker model...")
        urllib.request.urlretrieve(MODEL_URL, path)
    return path


def landmarks_to_reading(
    landmarks: Sequence,
    width: int,
    height: int,
    prev_point: Optional[Tuple[int, int]] = None,
) -> Reading:
    """
    Map normalised hand landmarks to ((x, y) in viewport pixels, pinching).
    Fingertip moves of MOVE_THRESHOLD px or less hold prev_point.
    """
    tip = landmarks[INDEX_FINGER_TIP]
    thumb = landmarks[THUMB_TIP]
    point = (int(tip.x * width), int(tip.y * height))
    pinching = float(np.hypot(tip.x - thumb.x, tip.y - thumb.y)) < PINCH_THRESHOLD_NORM

    if prev_point is not None:
        if np.hypot(point[0] - prev_point[0], point[1] - prev_point[1]) <= MOVE_THRESHOLD:
            point = prev_point
    return point, pinching


class HandPointer:
    """Webcam finger tracking mapped onto the lesson viewport."""

    def __init__(self, camera_index: int = 0):
        # mediapipe ships in the optional "hand" extra
        import mediapipe as mp
        from mediapipe.tasks import python
        from mediapipe.tasks.python import vision

        self._mp = mp
        options = vision.HandLandmarkerOptions(
            base_options=python.BaseOptions(model_asset_path=ensure_model()),
            num_hands=1,
            min_hand_detection_confidence=0.7,
            min_hand_presence_confidence=0.7,
            running_mode=vision.RunningMode.VIDEO,
        )
        self._landmarker = vision.HandLandmarker.create_from_options(options)
        self._cap = cv2.VideoCapture(camera_index)
        if not self._cap.isOpened():
            raise RuntimeError("Camera failed to initialize. Check camera permissions.")
        self._frame_count = 0
        self._prev_point = None

    def read(self, width: int, height: int) -> Optional[Reading]:
        """
        Grab one camera frame.
        Returns ((x, y) in viewport pixels, pinching) or None when no hand is seen.
        """
        ret, frame = self._cap.read()
        if not ret:
            logger.warning("Failed to read camera frame")
            return None

        frame = cv2.flip(frame, 1)
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=rgb)

        self._frame_count += 1
        result = self._landmarker.detect_for_video(mp_image, self._frame_count * 33)
        if not result.hand_landmarks:
            self._prev_point = None
            return None

        point, pinching = landmarks_to_reading(result.hand_landmarks[0], width, height, self._prev_point)
        self._prev_point = point
        return point, pinching

    def close(self):
        self._cap.release()
        self._landmarker.close()
