"""Shape layer contents.

Shape layers hold a tree of content items: groups containing paths,
primitives, paint (fills/strokes/gradients) and modifiers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from lottiekit.animation.values import (
    AnimatableColorValue,
    AnimatableFloatValue,
    AnimatableGradientColorValue,
    AnimatableIntegerValue,
    AnimatablePointValue,
    AnimatablePositionValue,
    AnimatableShapeValue,
    AnimatableSplitDimensionValue,
)


class FillRule(Enum):
    NON_ZERO = 1
    EVEN_ODD = 2


class LineCap(Enum):
    BUTT = 1
    ROUND = 2
    SQUARE = 3


class LineJoin(Enum):
    MITER = 1
    ROUND = 2
    BEVEL = 3


class GradientType(Enum):
    LINEAR = 1
    RADIAL = 2


class PolystarType(Enum):
    STAR = 1
    POLYGON = 2


class TrimPathType(Enum):
    SIMULTANEOUSLY = 1
    INDIVIDUALLY = 2


class MergePathsMode(Enum):
    MERGE = 1
    ADD = 2
    SUBTRACT = 3
    INTERSECT = 4
    EXCLUDE_INTERSECTIONS = 5


class DashType(Enum):
    DASH = "d"
    GAP = "g"
    OFFSET = "o"


@dataclass(frozen=True)
class StrokeDash:
    type: DashType
    value: AnimatableFloatValue


@dataclass(frozen=True)
class ShapeTransform:
    """Transform applied to the contents of a group ("tr")."""
    anchor: AnimatablePointValue
    position: Union[AnimatablePositionValue, AnimatableSplitDimensionValue]
    scale: AnimatablePointValue
    rotation: AnimatableFloatValue
    opacity: AnimatableIntegerValue
    skew: Optional[AnimatableFloatValue] = None
    skew_axis: Optional[AnimatableFloatValue] = None


@dataclass(frozen=True)
class ShapePath:
    name: str
    path: AnimatableShapeValue
    hidden: bool = False


@dataclass(frozen=True)
class RectangleShape:
    name: str
    position: AnimatablePositionValue
    size: AnimatablePointValue
    corner_radius: AnimatableFloatValue
    hidden: bool = False


@dataclass(frozen=True)
class EllipseShape:
    name: str
    position: AnimatablePositionValue
    size: AnimatablePointValue
    hidden: bool = False


@dataclass(frozen=True)
class PolystarShape:
    name: str
    type: PolystarType
    points: AnimatableFloatValue
    position: AnimatablePositionValue
    rotation: AnimatableFloatValue
    outer_radius: AnimatableFloatValue
    outer_roundness: AnimatableFloatValue
    inner_radius: Optional[AnimatableFloatValue] = None
    inner_roundness: Optional[AnimatableFloatValue] = None
    hidden: bool = False


@dataclass(frozen=True)
class ShapeFill:
    name: str
    color: AnimatableColorValue
    opacity: AnimatableIntegerValue
    fill_rule: FillRule = FillRule.NON_ZERO
    hidden: bool = False


@dataclass(frozen=True)
class ShapeStroke:
    name: str
    color: AnimatableColorValue
    opacity: AnimatableIntegerValue
    width: AnimatableFloatValue
    cap: LineCap = LineCap.BUTT
    join: LineJoin = LineJoin.MITER
    miter_limit: float = 4.0
    dashes: Tuple[StrokeDash, ...] = ()
    hidden: bool = False


@dataclass(frozen=True)
class GradientFill:
    name: str
    gradient_type: GradientType
    colors: AnimatableGradientColorValue
    opacity: AnimatableIntegerValue
    start_point: AnimatablePointValue
    end_point: AnimatablePointValue
    fill_rule: FillRule = FillRule.NON_ZERO
    hidden: bool = False


@dataclass(frozen=True)
class GradientStroke:
    name: str
    gradient_type: GradientType
    colors: AnimatableGradientColorValue
    opacity: AnimatableIntegerValue
    start_point: AnimatablePointValue
    end_point: AnimatablePointValue
    width: AnimatableFloatValue
    cap: LineCap = LineCap.BUTT
    join: LineJoin = LineJoin.MITER
    miter_limit: float = 4.0
    dashes: Tuple[StrokeDash, ...] = ()
    hidden: bool = False


@dataclass(frozen=True)
class ShapeTrimPath:
    name: str
    type: TrimPathType
    start: AnimatableFloatValue
    end: AnimatableFloatValue
    offset: AnimatableFloatValue
    hidden: bool = False


@dataclass(frozen=True)
class MergePaths:
    name: str
    mode: MergePathsMode
    hidden: bool = False


@dataclass(frozen=True)
class ShapeGroup:
    name: str
    items: Tuple["ContentModel", ...] = field(default_factory=tuple)
    hidden: bool = False


ContentModel = Union[
    ShapeGroup,
    ShapePath,
    RectangleShape,
    EllipseShape,
    PolystarShape,
    ShapeFill,
    ShapeStroke,
    GradientFill,
    GradientStroke,
    ShapeTrimPath,
    MergePaths,
    ShapeTransform,
]
