"""Tolerance-based comparisons and distance primitives.

Accumulated distances drift by a few ULPs after a long run of additions
and subtractions, so every ordering decision in the wiper (pruning,
clipping, retraction bookkeeping) goes through these helpers instead of
the bare operators.
"""

from __future__ import annotations

import math

TOLERANCE = 1e-9
"""Absolute tolerance for float comparisons (mm)."""


def is_equal(a: float, b: float, tolerance: float = TOLERANCE) -> bool:
    return abs(a - b) < tolerance


def is_zero(value: float, tolerance: float = TOLERANCE) -> bool:
    return abs(value) < tolerance


def greater_than(a: float, b: float, tolerance: float = TOLERANCE) -> bool:
    return a > b and not is_equal(a, b, tolerance)


def greater_than_or_equal(a: float, b: float, tolerance: float = TOLERANCE) -> bool:
    return a > b or is_equal(a, b, tolerance)


def less_than(a: float, b: float, tolerance: float = TOLERANCE) -> bool:
    return a < b and not is_equal(a, b, tolerance)


def less_than_or_equal(a: float, b: float, tolerance: float = TOLERANCE) -> bool:
    return a < b or is_equal(a, b, tolerance)


def get_cartesian_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean XY distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def wipe_distance_to_retraction(distance: float, distance_to_retraction_ratio: float) -> float:
    """Filament length retracted while wiping over ``distance`` mm."""
    return distance * distance_to_retraction_ratio
