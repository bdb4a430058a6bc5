"""Keyframes and animatable values."""

from lottiekit.animation.easing import (
    CubicBezierEasing,
    Easing,
    cubic_bezier,
    get_easing,
    interpolate,
    interpolate_tuple,
)
from lottiekit.animation.keyframe import Keyframe
from lottiekit.animation.shape_data import CubicCurve, GradientColor, ShapeData
from lottiekit.animation.values import (
    AnimatableColorValue,
    AnimatableFloatValue,
    AnimatableGradientColorValue,
    AnimatableIntegerValue,
    AnimatablePointValue,
    AnimatablePositionValue,
    AnimatableShapeValue,
    AnimatableSplitDimensionValue,
    AnimatableStepValue,
    AnimatableValue,
)

__all__ = [
    # Easing
    "Easing",
    "CubicBezierEasing",
    "cubic_bezier",
    "get_easing",
    "interpolate",
    "interpolate_tuple",
    # Keyframes
    "Keyframe",
    # Value types
    "CubicCurve",
    "GradientColor",
    "ShapeData",
    # Animatable values
    "AnimatableValue",
    "AnimatableFloatValue",
    "AnimatableIntegerValue",
    "AnimatablePointValue",
    "AnimatablePositionValue",
    "AnimatableSplitDimensionValue",
    "AnimatableColorValue",
    "AnimatableGradientColorValue",
    "AnimatableShapeValue",
    "AnimatableStepValue",
]
