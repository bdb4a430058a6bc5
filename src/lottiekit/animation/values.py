"""Animatable values: a property's full keyframe sequence, evaluable at any frame."""

from bisect import bisect_right
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

from lottiekit.animation.easing import interpolate, interpolate_tuple
from lottiekit.animation.keyframe import Keyframe
from lottiekit.animation.shape_data import GradientColor, ShapeData

V = TypeVar("V")

Point = Tuple[float, float]
Color = Tuple[float, float, float, float]

# Samples used to approximate the arc length of a spatial Bezier
_SPATIAL_SAMPLES = 64


class AnimatableValue(Generic[V]):
    """The keyframes of one property of one layer or shape.

    Evaluation never mutates the instance, so one value can be sampled from
    any number of threads at once.
    """

    def __init__(self, keyframes: Sequence[Keyframe[V]]):
        if not keyframes:
            raise ValueError("There are no keyframes")
        self._keyframes: Tuple[Keyframe[V], ...] = tuple(keyframes)
        self._start_frames: List[float] = [kf.start_frame for kf in self._keyframes]

    @classmethod
    def static(cls, value: V) -> "AnimatableValue[V]":
        """Create a value that is constant for all time."""
        return cls([Keyframe.static_value(value)])

    @property
    def keyframes(self) -> Tuple[Keyframe[V], ...]:
        return self._keyframes

    @property
    def is_static(self) -> bool:
        return len(self._keyframes) == 1

    @property
    def start_frame(self) -> float:
        return self._keyframes[0].start_frame

    @property
    def end_frame(self) -> float:
        last = self._keyframes[-1]
        return last.end_frame if last.end_frame is not None else last.start_frame

    def keyframe_at(self, frame: float) -> Keyframe[V]:
        """Find the keyframe whose span contains frame (clamped to the ends)."""
        index = bisect_right(self._start_frames, frame) - 1
        return self._keyframes[max(0, index)]

    def value_at(self, frame: float) -> V:
        """Evaluate this property at a (possibly fractional) frame."""
        keyframes = self._keyframes
        first = keyframes[0]
        if len(keyframes) == 1 and (first.static or first.is_final):
            return first.start_value

        if frame <= first.start_frame:
            return first.start_value

        keyframe = self.keyframe_at(frame)
        if keyframe.is_final or keyframe.hold:
            return keyframe.start_value
        if frame >= keyframe.end_frame:
            return keyframe.end_value

        return self._interpolate(keyframe, keyframe.progress(frame))

    def _interpolate(self, keyframe: Keyframe[V], progress: float) -> V:
        return self.lerp(keyframe.start_value, keyframe.end_value, progress)

    def lerp(self, start: V, end: V, t: float) -> V:
        """Type-specific interpolation; the default is a step function."""
        return start

    def __repr__(self) -> str:
        if self.is_static:
            return f"{type(self).__name__}({self._keyframes[0].start_value!r})"
        return f"{type(self).__name__}(keyframes={len(self._keyframes)})"


class AnimatableFloatValue(AnimatableValue[float]):
    """Scalars: rotation, stroke width, trim offsets, ..."""

    def lerp(self, start: float, end: float, t: float) -> float:
        return interpolate(start, end, t)


class AnimatableIntegerValue(AnimatableValue[int]):
    """Integers such as 0-100 opacity, rounded after interpolation."""

    def lerp(self, start: int, end: int, t: float) -> int:
        return int(round(interpolate(start, end, t)))


class AnimatablePointValue(AnimatableValue[Point]):
    """2D points: anchor, scale, size."""

    def lerp(self, start: Point, end: Point, t: float) -> Point:
        return interpolate_tuple(start, end, t)


class AnimatablePositionValue(AnimatablePointValue):
    """Positions, which may move along a spatial Bezier instead of a line."""

    def _interpolate(self, keyframe: Keyframe[Point], progress: float) -> Point:
        if _has_spatial_curve(keyframe):
            return _point_on_spatial_curve(keyframe, progress)
        return self.lerp(keyframe.start_value, keyframe.end_value, progress)


class AnimatableColorValue(AnimatableValue[Color]):
    """RGBA colors with components in 0..1."""

    def lerp(self, start: Color, end: Color, t: float) -> Color:
        return interpolate_tuple(start, end, t)


class AnimatableGradientColorValue(AnimatableValue[GradientColor]):

    def lerp(self, start: GradientColor, end: GradientColor, t: float) -> GradientColor:
        return start.interpolate(end, t)


class AnimatableShapeValue(AnimatableValue[ShapeData]):
    """Bezier paths; adjacent keyframes must share a vertex count."""

    def lerp(self, start: ShapeData, end: ShapeData, t: float) -> ShapeData:
        return start.interpolate(end, t)


class AnimatableStepValue(AnimatableValue[V]):
    """Discrete values (text documents, flags) that never blend."""
    pass


class AnimatableSplitDimensionValue:
    """A position animated as two independent x and y properties."""

    def __init__(self, x: AnimatableFloatValue, y: AnimatableFloatValue):
        self.x = x
        self.y = y

    @property
    def is_static(self) -> bool:
        return self.x.is_static and self.y.is_static

    def value_at(self, frame: float) -> Point:
        return (self.x.value_at(frame), self.y.value_at(frame))

    def __repr__(self) -> str:
        return f"AnimatableSplitDimensionValue(x={self.x!r}, y={self.y!r})"


def _has_spatial_curve(keyframe: Keyframe[Point]) -> bool:
    if keyframe.spatial_out is None or keyframe.spatial_in is None:
        return False
    if keyframe.start_value == keyframe.end_value:
        return False
    return any(keyframe.spatial_out) or any(keyframe.spatial_in)


def _point_on_spatial_curve(keyframe: Keyframe[Point], progress: float) -> Point:
    """Walk progress * arc length along the keyframe's spatial Bezier."""
    p0 = np.asarray(keyframe.start_value[:2], dtype=np.float64)
    p3 = np.asarray(keyframe.end_value[:2], dtype=np.float64)
    p1 = p0 + np.asarray(keyframe.spatial_out[:2], dtype=np.float64)
    p2 = p3 + np.asarray(keyframe.spatial_in[:2], dtype=np.float64)

    s = np.linspace(0.0, 1.0, _SPATIAL_SAMPLES + 1)[:, None]
    points = (
        (1 - s) ** 3 * p0
        + 3 * (1 - s) ** 2 * s * p1
        + 3 * (1 - s) * s ** 2 * p2
        + s ** 3 * p3
    )
    lengths = np.concatenate([[0.0], np.cumsum(np.linalg.norm(np.diff(points, axis=0), axis=1))])
    total = lengths[-1]
    if total <= 0.0:
        return (float(p0[0]), float(p0[1]))

    target = max(0.0, min(1.0, progress)) * total
    x = np.interp(target, lengths, points[:, 0])
    y = np.interp(target, lengths, points[:, 1])
    return (float(x), float(y))


def static_or_none(value: Optional[AnimatableValue[V]], frame: float, default: V) -> V:
    """Evaluate an optional property, falling back to a default."""
    if value is None:
        return default
    return value.value_at(frame)
