"""
Geometry and signal helpers shared by the behavioral analyzers.

Points are any objects exposing ``x``, ``y`` and (for speed) ``timestamp``
attributes, or mappings with those keys.
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence

import numpy as np


# Smallest time delta (ms) used as a divisor
EPSILON = 1e-6


def _coord(point: Any, name: str) -> float:
    if isinstance(point, dict):
        return float(point[name])
    return float(getattr(point, name))


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box of a point set."""
    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height


def distance(p1: Any, p2: Any) -> float:
    """Euclidean distance between two points."""
    dx = _coord(p2, "x") - _coord(p1, "x")
    dy = _coord(p2, "y") - _coord(p1, "y")
    return float(np.hypot(dx, dy))


def speed(p1: Any, p2: Any) -> float:
    """
    Pointer speed between two timestamped points in px/ms.

    Returns 0 when the time delta is zero or negative.
    """
    dt = _coord(p2, "timestamp") - _coord(p1, "timestamp")
    if dt <= 0:
        return 0.0
    return distance(p1, p2) / max(dt, EPSILON)


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def variance(values: Sequence[float]) -> float:
    """Population variance; 0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return float(np.var(np.asarray(values, dtype=np.float64)))


def stddev(values: Sequence[float]) -> float:
    """Population standard deviation; 0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=np.float64)))


def intervals(values: Sequence[float]) -> List[float]:
    """Differences between consecutive values."""
    if len(values) < 2:
        return []
    return np.diff(np.asarray(values, dtype=np.float64)).tolist()


def all_within(values: Sequence[float], center: float, tolerance: float) -> bool:
    """True when every value lies strictly within ``tolerance`` of ``center``."""
    arr = np.asarray(values, dtype=np.float64)
    return bool(np.all(np.abs(arr - center) < tolerance))


def bounding_box(points: Iterable[Any]) -> BoundingBox:
    """
    Compute the bounding box of a point set.

    Returns a degenerate zero-sized box for an empty set.
    """
    coords = np.array([(_coord(p, "x"), _coord(p, "y")) for p in points], dtype=np.float64)
    if coords.size == 0:
        return BoundingBox()

    min_x, min_y = coords.min(axis=0)
    max_x, max_y = coords.max(axis=0)
    return BoundingBox(float(min_x), float(max_x), float(min_y), float(max_y))


def clamp_score(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp a score to [low, high]."""
    return float(np.clip(value, low, high))
