"""Keyframes: timed property samples plus interpolation to the next sample."""

from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

from lottiekit.animation.easing import Easing, EasingFunc, get_easing

V = TypeVar("V")

Point = Tuple[float, float]


@dataclass(frozen=True)
class Keyframe(Generic[V]):
    """A single keyframe of an animatable property.

    Attributes:
        start_value: Value at start_frame
        end_value: Value reached at end_frame (None for the final keyframe)
        start_frame: Frame this keyframe starts at
        end_frame: Frame the next keyframe starts at (None for the final keyframe)
        out_tangent: First easing control point ("o" in the source)
        in_tangent: Second easing control point ("i" in the source)
        hold: Freeze start_value for the whole span
        static: The property has exactly this one constant keyframe
        spatial_out: Spatial out tangent of a position keyframe ("to")
        spatial_in: Spatial in tangent of a position keyframe ("ti")
    """

    start_value: V
    end_value: Optional[V] = None
    start_frame: float = 0.0
    end_frame: Optional[float] = None
    out_tangent: Optional[Point] = None
    in_tangent: Optional[Point] = None
    hold: bool = False
    static: bool = False
    spatial_out: Optional[Point] = None
    spatial_in: Optional[Point] = None

    @classmethod
    def static_value(cls, value: V) -> "Keyframe[V]":
        """Create the keyframe of a non-animated property."""
        return cls(start_value=value, static=True)

    @property
    def easing_mode(self) -> Easing:
        if self.hold:
            return Easing.HOLD
        if self.out_tangent is not None and self.in_tangent is not None:
            return Easing.BEZIER
        return Easing.LINEAR

    @property
    def easing(self) -> EasingFunc:
        """Easing function towards the next keyframe."""
        return get_easing(self.easing_mode, self.out_tangent, self.in_tangent)

    @property
    def is_final(self) -> bool:
        """True if there is nothing to interpolate towards."""
        return self.end_value is None or self.end_frame is None

    def contains(self, frame: float) -> bool:
        """Check if frame falls within [start_frame, end_frame)."""
        if self.static:
            return True
        if self.end_frame is None:
            return frame >= self.start_frame
        return self.start_frame <= frame < self.end_frame

    def linear_progress(self, frame: float) -> float:
        """Normalized, un-eased progress through this keyframe's span."""
        if self.end_frame is None or self.end_frame <= self.start_frame:
            return 0.0
        t = (frame - self.start_frame) / (self.end_frame - self.start_frame)
        return max(0.0, min(1.0, t))

    def progress(self, frame: float) -> float:
        """Eased progress at frame; always 0 for hold keyframes."""
        if self.hold:
            return 0.0
        return self.easing(self.linear_progress(frame))
