"""Transform parsing, shared by layers ("ks") and shape groups ("tr")."""

from typing import Type, TypeVar

from lottiekit.animation.values import (
    AnimatableFloatValue,
    AnimatableIntegerValue,
    AnimatablePointValue,
    AnimatablePositionValue,
)
from lottiekit.model.layer import Transform
from lottiekit.model.shape import ShapeTransform
from lottiekit.parser.reader import JsonReader
from lottiekit.parser.values import (
    ParseContext,
    parse_float_value,
    parse_integer_value,
    parse_point_value,
    parse_position_value,
    parse_scale_value,
)

T = TypeVar("T", Transform, ShapeTransform)


def parse_transform(
    reader: JsonReader,
    context: ParseContext,
    cls: Type[T] = Transform,
) -> T:
    """Parse a transform object; missing properties get identity values."""
    anchor = None
    position = None
    scale = None
    rotation = None
    opacity = None
    skew = None
    skew_axis = None

    reader.begin_object()
    while reader.has_next():
        name = reader.next_name()
        if name == "a":
            anchor = parse_point_value(reader, context)
        elif name == "p":
            position = parse_position_value(reader, context)
        elif name == "s":
            scale = parse_scale_value(reader, context)
        elif name in ("r", "rz"):
            rotation = parse_float_value(reader, context)
        elif name == "o":
            opacity = parse_integer_value(reader, context)
        elif name == "sk":
            skew = parse_float_value(reader, context)
        elif name == "sa":
            skew_axis = parse_float_value(reader, context)
        else:
            reader.skip_value()
    reader.end_object()

    return cls(
        anchor=anchor or AnimatablePointValue.static((0.0, 0.0)),
        position=position or AnimatablePositionValue.static((0.0, 0.0)),
        scale=scale or AnimatablePointValue.static((1.0, 1.0)),
        rotation=rotation or AnimatableFloatValue.static(0.0),
        opacity=opacity or AnimatableIntegerValue.static(100),
        skew=skew,
        skew_axis=skew_axis,
    )
