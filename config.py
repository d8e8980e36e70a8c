"""
Configuration file for Shape Trace Tutor
Easily customize tracing tolerance, assistance timing, and appearance
"""

import os

# ===============================
# WINDOW & DISPLAY
# ===============================

# Initial window dimensions (the lesson follows the window when resized)
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
WINDOW_TITLE = "Shape Trace Tutor"

# Frame rate for the render loop (intro sweep and ghost playback advance per frame)
TARGET_FPS = 60

# Viewports narrower than this use the small-screen sizes below
NARROW_VIEWPORT_WIDTH = 600

# Shape occupies this fraction of the smaller viewport dimension
SHAPE_SCALE = 0.85

# UI Color scheme (B, G, R in OpenCV)
UI_COLORS = {
    "background": (250, 248, 245),
    "path": (74, 74, 74),
    "traced": (113, 204, 46),
    "pointer": (11, 158, 245),
    "ghost": (246, 130, 59),
    "intro": (113, 204, 46),
    "text_dark": (40, 40, 40),
    "text_gray": (120, 120, 120),
    "badge_bg": (255, 255, 255),
    "intro_banner": (220, 252, 231),
    "intro_text": (61, 128, 21),
    "ghost_banner": (254, 234, 219),
    "ghost_text": (175, 78, 29),
}

# Highlight transparency
GHOST_ALPHA = 0.5
INTRO_ALPHA = 0.4

# ===============================
# SHAPES
# ===============================

# Rotation order; the lesson index wraps around this list
SHAPES = [
    "Horizontal Line", "Vertical Line", "Zig-Zag", "Wave",
    "Circle", "Square", "Triangle", "Rectangle",
    "Star", "Diamond", "Pentagon", "Hexagon",
    "Heart", "Crescent", "Oval",
]

# ===============================
# TRACING
# ===============================

# Pointer-to-path distance counted as touching a point (pixels)
SAFE_ZONE_RADIUS = 40
SAFE_ZONE_RADIUS_NARROW = 25

# Dashed base path
PATH_LINE_WIDTH = 50
PATH_LINE_WIDTH_NARROW = 30
PATH_DASH = (15, 25)  # on, off (pixels)

# Traced marker radius (slightly larger than half the line so markers overlap)
TRACED_MARKER_RADIUS = 27
TRACED_MARKER_RADIUS_NARROW = 17

HIGHLIGHT_RADIUS = 35
POINTER_RADIUS = 20
GHOST_LINE_WIDTH = 12

# ===============================
# ASSISTANCE
# ===============================

# Seconds without pointer activity before the ghost demonstration starts
IDLE_TIMEOUT = 5.0

# Per-frame progress increments (0..1 along the path)
INTRO_STEP = 0.015
GHOST_STEP = 0.008

# ===============================
# COMPLETION
# ===============================

# Fraction of path points that must be traced
COMPLETION_THRESHOLD = 0.98

# Seconds the finished shape stays on screen before the next one
COMPLETE_DISPLAY_DELAY = 2.0

# Placeholder scores reported with every attempt
ATTENTION_SCORE = 100
PRECISION_SCORE = 100

# Confetti burst
CONFETTI_PARTICLES = 150
CONFETTI_SPREAD = 90  # degrees
CONFETTI_ORIGIN_Y = 0.6  # fraction of viewport height
CONFETTI_LIFETIME = 2.0  # seconds

# ===============================
# NARRATION
# ===============================

VOICE_ENABLED = True

NARRATION = {
    "intro": "Let's trace a {shape}",
    "ghost": "Watch me, then you try!",
    "success": "Great job!",
    "voice_on": "Voice on",
    "voice_off": "Voice off",
}

BANNERS = {
    "intro": "Look at the shape...",
    "ghost": "Watch closely... then you try!",
    "complete": "Great job!",
}

# Speech rate for offline text-to-speech backends (words per minute)
SPEECH_RATE = 176

# ===============================
# ATTEMPT SUBMISSION
# ===============================

API_BASE_URL = os.environ.get("TRACE_API_URL", "http://localhost:8000")

# Seconds before a submission request is abandoned
SUBMIT_TIMEOUT = 5.0

# ===============================
# KEYBOARD LAYOUT
# ===============================

KEYBOARD_LAYOUT = {
    "restart": "r",
    "voice": "v",
    "next": "n",
    "quit": "q",
}

# ===============================
# DEBUG & DEVELOPMENT
# ===============================

LOG_LEVEL = os.environ.get("TRACE_LOG_LEVEL", "INFO")

# Show FPS counter
SHOW_FPS = False

APP_NAME = "Shape Trace Tutor"
APP_VERSION = "1.0.0"


if __name__ == "__main__":
    # Print all configuration
    print("Shape Trace Tutor Configuration")
    print("=" * 50)
    print(f"Window: {WINDOW_WIDTH}x{WINDOW_HEIGHT} @ {TARGET_FPS} FPS")
    print(f"Shapes: {len(SHAPES)}")
    print(f"Safe zone: {SAFE_ZONE_RADIUS}px ({SAFE_ZONE_RADIUS_NARROW}px narrow)")
    print(f"Idle timeout: {IDLE_TIMEOUT}s")
    print(f"Completion threshold: {COMPLETION_THRESHOLD:.0%}")
    print(f"API: {API_BASE_URL}")
