from __future__ import annotations

import math

from .phase_core import Point2D

# Cumulative letter grade. Upper bounds are inclusive, checked in order.
GRADE_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (0.0, "A+"),
    (15.0, "A"),
    (30.0, "B"),
    (45.0, "C"),
    (60.0, "D"),
)
FAILING_GRADE = "F"

# Per-question feedback. Deliberately a separate scale from GRADE_THRESHOLDS.
FEEDBACK_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (0.0, "Perfect! That is exactly the right position."),
    (15.0, "Very close! Only a few degrees off."),
    (30.0, "Close, but the phase would look a little different."),
    (45.0, "Not quite. Think about where the Sun is lighting the Moon."),
)
FEEDBACK_FALLBACK = "Way off. Review where each phase sits on the orbit."


def normalize_deg(angle_deg: float) -> float:
    """Wrap an angle into [0, 360)."""

    a = float(angle_deg) % 360.0
    # Tiny negative inputs can round up to exactly 360.0.
    return 0.0 if a >= 360.0 else a


def position_to_angle(origin: Point2D, point: Point2D) -> float:
    """Angle of ``point - origin`` in degrees, in [0, 360).

    0 degrees is the positive X axis; angles increase counter-clockwise.
    """

    d = point - origin
    return normalize_deg(math.degrees(math.atan2(d.y, d.x)))


def place_at_angle(origin: Point2D, angle_deg: float, radius: float) -> Point2D:
    """Inverse of position_to_angle: the point at ``angle_deg`` and ``radius`` from origin."""

    rad = math.radians(float(angle_deg))
    return Point2D(origin.x + math.cos(rad) * radius, origin.y + math.sin(rad) * radius)


def circular_displacement(a: float, b: float) -> float:
    """Shortest distance between two angles on the circle, in [0, 180]."""

    diff = abs(normalize_deg(a) - normalize_deg(b))
    return min(diff, 360.0 - diff)


def grade(total_displacement: float) -> str:
    total = float(total_displacement)
    for upper, label in GRADE_THRESHOLDS:
        if total <= upper:
            return label
    return FAILING_GRADE


def feedback_message(displacement_deg: float) -> str:
    d = float(displacement_deg)
    for upper, message in FEEDBACK_THRESHOLDS:
        if d <= upper:
            return message
    return FEEDBACK_FALLBACK
