"""Easing curves for keyframe interpolation.

Bodymovin keyframes describe their easing as a cubic Bezier through (0, 0),
two control points and (1, 1). All easing functions take a normalized time
t (0.0 to 1.0) and return a normalized progress value.
"""

from enum import Enum, auto
from functools import lru_cache
from typing import Callable, Sequence, Tuple

# Control point y values outside this range are clamped
MAX_CONTROL_POINT_VALUE = 100.0

# Newton-Raphson / bisection tolerances for solving x(t) = x
_NEWTON_ITERATIONS = 8
_SOLVE_EPSILON = 1e-7


class Easing(Enum):
    """Interpolation modes a keyframe can use towards the next keyframe."""

    LINEAR = auto()
    BEZIER = auto()
    HOLD = auto()


# Type alias for easing functions
EasingFunc = Callable[[float], float]


def linear(t: float) -> float:
    """Linear interpolation (no easing)."""
    return t


def hold(t: float) -> float:
    """Hold interpolation: progress never leaves the start value."""
    return 0.0


class CubicBezierEasing:
    """Cubic Bezier timing curve with fixed endpoints (0, 0) and (1, 1).

    Solves x(s) = t for the curve parameter s, then returns y(s).
    """

    __slots__ = ("x1", "y1", "x2", "y2", "_cx", "_bx", "_ax", "_cy", "_by", "_ay")

    def __init__(self, x1: float, y1: float, x2: float, y2: float):
        self.x1 = x1
        self.y1 = y1
        self.x2 = x2
        self.y2 = y2

        # Polynomial coefficients
        self._cx = 3.0 * x1
        self._bx = 3.0 * (x2 - x1) - self._cx
        self._ax = 1.0 - self._cx - self._bx
        self._cy = 3.0 * y1
        self._by = 3.0 * (y2 - y1) - self._cy
        self._ay = 1.0 - self._cy - self._by

    def _sample_x(self, s: float) -> float:
        return ((self._ax * s + self._bx) * s + self._cx) * s

    def _sample_y(self, s: float) -> float:
        return ((self._ay * s + self._by) * s + self._cy) * s

    def _sample_dx(self, s: float) -> float:
        return (3.0 * self._ax * s + 2.0 * self._bx) * s + self._cx

    def _solve_x(self, x: float) -> float:
        # Newton-Raphson first, it converges in a few steps for sane curves
        s = x
        for _ in range(_NEWTON_ITERATIONS):
            error = self._sample_x(s) - x
            if abs(error) < _SOLVE_EPSILON:
                return s
            slope = self._sample_dx(s)
            if abs(slope) < 1e-6:
                break
            s -= error / slope

        # Bisection fallback
        low, high = 0.0, 1.0
        s = x
        while low < high:
            value = self._sample_x(s)
            if abs(value - x) < _SOLVE_EPSILON:
                return s
            if x > value:
                low = s
            else:
                high = s
            s = (high - low) / 2.0 + low
            if high - low < _SOLVE_EPSILON:
                break
        return s

    def __call__(self, t: float) -> float:
        if t <= 0.0:
            return 0.0
        if t >= 1.0:
            return 1.0
        return self._sample_y(self._solve_x(t))

    def __repr__(self) -> str:
        return f"CubicBezierEasing({self.x1}, {self.y1}, {self.x2}, {self.y2})"


@lru_cache(maxsize=512)
def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> CubicBezierEasing:
    """Get a (cached) cubic Bezier easing for the given control points.

    x values are clamped to [0, 1] so the curve stays a function of time,
    y values to +/- MAX_CONTROL_POINT_VALUE.
    """
    x1 = max(0.0, min(1.0, x1))
    x2 = max(0.0, min(1.0, x2))
    y1 = max(-MAX_CONTROL_POINT_VALUE, min(MAX_CONTROL_POINT_VALUE, y1))
    y2 = max(-MAX_CONTROL_POINT_VALUE, min(MAX_CONTROL_POINT_VALUE, y2))
    return CubicBezierEasing(x1, y1, x2, y2)


def get_easing(
    easing: Easing,
    out_tangent: Tuple[float, float] | None = None,
    in_tangent: Tuple[float, float] | None = None,
) -> EasingFunc:
    """Get the easing function for a keyframe.

    Args:
        easing: Interpolation mode
        out_tangent: First control point (the keyframe's "o" handle)
        in_tangent: Second control point (the keyframe's "i" handle)

    Returns:
        The easing function
    """
    if easing is Easing.HOLD:
        return hold
    if easing is Easing.LINEAR or out_tangent is None or in_tangent is None:
        return linear
    return cubic_bezier(out_tangent[0], out_tangent[1], in_tangent[0], in_tangent[1])


def interpolate(start: float, end: float, t: float) -> float:
    """Linearly interpolate between two numbers."""
    return start + (end - start) * t


def interpolate_tuple(start: Sequence[float], end: Sequence[float], t: float) -> Tuple[float, ...]:
    """Componentwise interpolation for points, scales and colors."""
    return tuple(s + (e - s) * t for s, e in zip(start, end))
