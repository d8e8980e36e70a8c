"""
Shape Path Generation & Proximity Tracking
- Builds the dashed outline the learner traces, in viewport pixels
- Credits path points touched by the pointer within the safe zone
- Reports coverage for completion checks
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

import config

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

# ===============================
# Geometry Utils
# ===============================

def cumulative_length(pts) -> np.ndarray:
    """Arc length from the first point to every point of a polyline."""
    pts = np.asarray(pts, dtype=np.float64)
    if len(pts) < 2:
        return np.zeros(len(pts))
    seg_lens = np.hypot(*np.diff(pts, axis=0).T)
    return np.concatenate([[0.0], np.cumsum(seg_lens)])


def max_spacing(pts) -> float:
    """Largest distance between consecutive points."""
    pts = np.asarray(pts, dtype=np.float64)
    if len(pts) < 2:
        return 0.0
    return float(np.max(np.hypot(*np.diff(pts, axis=0).T)))


def fill_gaps(pts, max_gap: float) -> np.ndarray:
    """Insert evenly spaced points wherever consecutive points are further apart than max_gap."""
    pts = np.asarray(pts, dtype=np.float64)
    if len(pts) < 2:
        return pts

    out = [pts[:1]]
    for a, b in zip(pts[:-1], pts[1:]):
        d = float(np.hypot(*(b - a)))
        steps = int(np.ceil(d / max_gap)) if d > max_gap else 1
        t = np.arange(1, steps + 1)[:, None] / steps
        out.append(a + t * (b - a))
    return np.vstack(out)


def _polyline(vertices: Sequence[Point], steps: int) -> np.ndarray:
    """Linear interpolation through successive vertices, `steps` samples per edge."""
    verts = np.asarray(vertices, dtype=np.float64)
    t = (np.arange(1, steps + 1) / steps)[:, None]
    out = [verts[:1]]
    for a, b in zip(verts[:-1], verts[1:]):
        out.append(a + t * (b - a))
    return np.vstack(out)


def _closed(vertices: Sequence[Point]) -> list:
    return list(vertices) + [vertices[0]]


def _arc(cx, cy, rx, ry, start_deg, end_deg, x_offset=0.0) -> np.ndarray:
    """Sample an elliptical arc at 1-degree steps, in either direction."""
    step = 1 if end_deg >= start_deg else -1
    rad = np.radians(np.arange(start_deg, end_deg + step, step))
    return np.column_stack([cx + x_offset + rx * np.cos(rad), cy + ry * np.sin(rad)])


def _regular_polygon(cx, cy, r, sides, start_angle) -> list:
    angles = start_angle + np.arange(sides) * 2 * np.pi / sides
    return [(cx + r * np.cos(a), cy + r * np.sin(a)) for a in angles]


# ===============================
# Device Category
# ===============================

def is_narrow(width: float) -> bool:
    """Small screens get a tighter safe zone and thinner lines."""
    return width < config.NARROW_VIEWPORT_WIDTH


def tolerance_radius(width: float) -> float:
    """Safe-zone radius for a viewport of the given width."""
    return float(config.SAFE_ZONE_RADIUS_NARROW if is_narrow(width) else config.SAFE_ZONE_RADIUS)


def shape_for_index(idx: int) -> str:
    """Shape at a position in the rotation (wraps around)."""
    return config.SHAPES[idx % len(config.SHAPES)]


# ===============================
# Path Generation
# ===============================

def generate_path(shape: str, width: float, height: float) -> np.ndarray:
    """
    Generate the ordered outline of a shape, centered in the viewport.

    The shape spans SHAPE_SCALE of the smaller viewport dimension. Point
    order is the canonical traversal direction (used by ghost playback).
    Unknown shape names fall back to a circle.

    Returns an (N, 2) float array of pixel coordinates.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Viewport must be positive, got {width}x{height}")

    cx = width / 2
    cy = height / 2
    size = min(width, height) * config.SHAPE_SCALE
    r = size / 2

    if shape == "Horizontal Line":
        xs = (width - size) / 2 + size * np.arange(101) / 100
        pts = np.column_stack([xs, np.full(101, cy)])

    elif shape == "Vertical Line":
        ys = (height - size) / 2 + size * np.arange(101) / 100
        pts = np.column_stack([np.full(101, cx), ys])

    elif shape == "Zig-Zag":
        zig_steps = 4
        zig_h = size / 3
        start_x = cx - size / 2
        vertices = [
            (start_x + i * size / zig_steps, cy + (-zig_h / 2 if i % 2 == 0 else zig_h / 2))
            for i in range(zig_steps + 1)
        ]
        pts = _polyline(vertices, 25)

    elif shape == "Wave":
        t = np.arange(201) / 200
        xs = (width - size) / 2 + size * t
        ys = cy + np.sin(t * np.pi * 4) * (size / 6)
        pts = np.column_stack([xs, ys])

    elif shape == "Square":
        pts = _polyline(_closed([(cx - r, cy - r), (cx + r, cy - r),
                                 (cx + r, cy + r), (cx - r, cy + r)]), 50)

    elif shape == "Rectangle":
        rw, rh = r, r / 1.5
        pts = _polyline(_closed([(cx - rw, cy - rh), (cx + rw, cy - rh),
                                 (cx + rw, cy + rh), (cx - rw, cy + rh)]), 50)

    elif shape == "Triangle":
        pts = _polyline(_closed([(cx, cy - r), (cx + r, cy + r * 0.7),
                                 (cx - r, cy + r * 0.7)]), 60)

    elif shape == "Diamond":
        pts = _polyline(_closed([(cx, cy - r), (cx + r / 1.5, cy),
                                 (cx, cy + r), (cx - r / 1.5, cy)]), 50)

    elif shape == "Pentagon":
        pts = _polyline(_closed(_regular_polygon(cx, cy, r, 5, -np.pi / 2)), 40)

    elif shape == "Hexagon":
        pts = _polyline(_closed(_regular_polygon(cx, cy, r, 6, 0.0)), 30)

    elif shape == "Star":
        # Outer and inner (40%) vertices alternate
        vertices = []
        for i in range(10):
            vr = r if i % 2 == 0 else r / 2.5
            angle = i * np.pi * 2 / 10 - np.pi / 2
            vertices.append((cx + vr * np.cos(angle), cy + vr * np.sin(angle)))
        pts = _polyline(_closed(vertices), 20)

    elif shape == "Heart":
        t = np.arange(101) / 100 * np.pi * 2
        scale = r / 18
        xs = cx + 16 * np.sin(t) ** 3 * scale
        ys = cy - (13 * np.cos(t) - 5 * np.cos(2 * t) - 2 * np.cos(3 * t) - np.cos(4 * t)) * scale
        pts = np.column_stack([xs, ys])

    elif shape == "Crescent":
        # Outer arc down the right side, inner arc back up, closed at the top tip
        outer = _arc(cx, cy, r, r, -90, 90)
        inner = _arc(cx, cy, r * 0.6, r, 90, -90, x_offset=r * 0.4)
        pts = np.vstack([outer, inner, outer[:1]])

    elif shape == "Oval":
        pts = _arc(cx, cy, r, r * 0.6, 0, 360)

    else:
        if shape != "Circle":
            logger.debug("Unknown shape %r, using circle", shape)
        pts = _arc(cx, cy, r, r, 0, 360)

    return fill_gaps(pts, tolerance_radius(width) / 2)


# ===============================
# Proximity Tracking
# ===============================

class ProximityTracker:
    """Track which path points the pointer has passed within the safe zone."""

    def __init__(self, path, radius: float):
        self.path = np.asarray(path, dtype=np.float64)
        self.radius = float(radius)
        self._traced = np.zeros(len(self.path), dtype=bool)
        self._closing_tail = self._find_closing_tail()

    def _find_closing_tail(self) -> np.ndarray:
        """
        On a closed path the last points circle back into the safe zone of
        path[0], so starting a stroke at the start marks them too.
        """
        tail = np.zeros(len(self.path), dtype=bool)
        if len(self.path) < 2 or not np.allclose(self.path[0], self.path[-1]):
            return tail
        d = np.hypot(self.path[:, 0] - self.path[0, 0], self.path[:, 1] - self.path[0, 1])
        i = len(self.path) - 1
        while i > 0 and d[i] <= self.radius:
            tail[i] = True
            i -= 1
        return tail

    def mark(self, x: float, y: float) -> int:
        """
        Credit every path point within the safe zone of (x, y).
        Any direction, any order. Returns how many points were newly traced.
        """
        if len(self.path) == 0:
            return 0
        d = np.hypot(self.path[:, 0] - x, self.path[:, 1] - y)
        hits = (d <= self.radius) & ~self._traced
        self._traced |= hits
        return int(np.count_nonzero(hits))

    def reset(self):
        self._traced[:] = False

    @property
    def total(self) -> int:
        return len(self.path)

    @property
    def traced_count(self) -> int:
        return int(np.count_nonzero(self._traced))

    @property
    def progress(self) -> float:
        """Traced fraction of the path (0 to 1)."""
        if self.total == 0:
            return 0.0
        return self.traced_count / self.total

    @property
    def traced_indices(self) -> frozenset:
        return frozenset(int(i) for i in np.flatnonzero(self._traced))

    def is_traced(self, idx: int) -> bool:
        return bool(self._traced[idx])

    def last_traced_index(self) -> Optional[int]:
        """
        Highest traced index along the path, or None before any tracing.
        The closing tail of a closed path only counts once nothing else is traced.
        """
        idx = np.flatnonzero(self._traced & ~self._closing_tail)
        if len(idx) == 0:
            idx = np.flatnonzero(self._traced)
        if len(idx) == 0:
            return None
        return int(idx[-1])


if __name__ == "__main__":
    # Test
    for name in config.SHAPES:
        path = generate_path(name, 800, 600)
        print(f"{name:16s} points={len(path):4d} max_gap={max_spacing(path):5.1f}px")
