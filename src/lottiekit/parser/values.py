"""
Keyframe and animatable value parsing.

An animatable property is an object whose "k" field is either the static
value itself or an array of keyframe objects:

    {"a": 1, "k": [{"t": 0, "s": [0], "o": {...}, "i": {...}}, {"t": 30, "s": [100]}]}

Bodymovin >= 5.5 omits each keyframe's "e" end value; it is taken from the
next keyframe's start value instead.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple, TypeVar
import logging

from lottiekit.animation.keyframe import Keyframe
from lottiekit.animation.shape_data import GradientColor, ShapeData
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
)
from lottiekit.errors import InvalidFieldError
from lottiekit.model.composition import Version, WarningSet
from lottiekit.model.text import DocumentData, Justification
from lottiekit.parser.reader import JsonReader, JsonToken

logger = logging.getLogger(__name__)

V = TypeVar("V")

Point = Tuple[float, float]
Color = Tuple[float, float, float, float]
ValueReader = Callable[[JsonReader, float], V]

EXPRESSIONS_WARNING = "Lottie doesn't support expressions."


@dataclass
class ParseContext:
    """State shared by all parse states of one document.

    Attributes:
        scale: Density scale applied to spatial values
        warnings: Warning sink of the composition being built
        end_frame: Composition end frame, once the header has been read
        version: Exporter version, once the header has been read
    """
    scale: float = 1.0
    warnings: WarningSet = field(default_factory=WarningSet)
    end_frame: float = 0.0
    version: Optional[Version] = None

    def warn(self, warning: str) -> None:
        self.warnings.add(warning)

    def is_before_version(self, major: int, minor: int, patch: int) -> bool:
        return self.version is not None and self.version < (major, minor, patch)


# Value readers: each reads one value at the cursor

def read_numbers(reader: JsonReader) -> List[float]:
    """A number or a flat array of numbers."""
    if reader.peek() is not JsonToken.BEGIN_ARRAY:
        return [reader.next_double()]
    numbers = []
    reader.begin_array()
    while reader.has_next():
        numbers.append(reader.next_double())
    reader.end_array()
    return numbers


def read_float(reader: JsonReader, scale: float = 1.0) -> float:
    """A number, or the first element of an array of numbers."""
    path = reader.path
    numbers = read_numbers(reader)
    if not numbers:
        raise InvalidFieldError("Expected a number but the array was empty", path)
    return numbers[0] * scale


def read_int(reader: JsonReader, scale: float = 1.0) -> int:
    return int(round(read_float(reader, scale)))


def read_point(reader: JsonReader, scale: float = 1.0) -> Point:
    """[x, y] (any z is dropped) or {"x": .., "y": ..}."""
    if reader.peek() is JsonToken.BEGIN_OBJECT:
        return _read_point_object(reader, scale)
    path = reader.path
    numbers = read_numbers(reader)
    if len(numbers) < 2:
        raise InvalidFieldError(f"Expected a point but got {numbers}", path)
    return (numbers[0] * scale, numbers[1] * scale)


def _read_point_object(reader: JsonReader, scale: float) -> Point:
    x = y = 0.0
    reader.begin_object()
    while reader.has_next():
        name = reader.next_name()
        if name == "x":
            x = read_float(reader, scale)
        elif name == "y":
            y = read_float(reader, scale)
        else:
            reader.skip_value()
    reader.end_object()
    return (x, y)


def read_scale(reader: JsonReader, scale: float = 1.0) -> Point:
    """Scale percentages as factors; never density scaled."""
    x, y = read_point(reader)
    return (x / 100.0, y / 100.0)


def read_color(reader: JsonReader, scale: float = 1.0) -> Color:
    """[r, g, b] or [r, g, b, a], in 0..1 or 0..255."""
    path = reader.path
    numbers = read_numbers(reader)
    if len(numbers) < 3:
        raise InvalidFieldError(f"Expected a color but got {numbers}", path)
    components = numbers[:4]
    if max(components) > 1.0:
        components = [c / 255.0 for c in components]
    if len(components) == 3:
        components.append(1.0)
    r, g, b, a = components
    return (r, g, b, a)


def read_hex_color(reader: JsonReader) -> Color:
    """Solid layer color written as "#rrggbb"."""
    path = reader.path
    text = reader.next_string().lstrip("#")
    if len(text) != 6:
        raise InvalidFieldError(f"Invalid color {text!r}", path)
    try:
        r, g, b = (int(text[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
    except ValueError as e:
        raise InvalidFieldError(f"Invalid color {text!r}", path) from e
    return (r, g, b, 1.0)


def read_shape_data(reader: JsonReader, scale: float = 1.0) -> ShapeData:
    """{"c": closed, "v": vertices, "i": in tangents, "o": out tangents}.

    Older exports wrap the object in a one element array.
    """
    if reader.peek() is JsonToken.BEGIN_ARRAY:
        reader.begin_array()
        shape = read_shape_data(reader, scale)
        while reader.has_next():
            reader.skip_value()
        reader.end_array()
        return shape

    path = reader.path
    closed = False
    vertices: Optional[List[Point]] = None
    in_tangents: List[Point] = []
    out_tangents: List[Point] = []

    reader.begin_object()
    while reader.has_next():
        name = reader.next_name()
        if name == "c":
            closed = reader.next_flag()
        elif name == "v":
            vertices = _read_point_list(reader)
        elif name == "i":
            in_tangents = _read_point_list(reader)
        elif name == "o":
            out_tangents = _read_point_list(reader)
        else:
            reader.skip_value()
    reader.end_object()

    if vertices is None:
        raise InvalidFieldError("Shape has no vertices", path)
    if not in_tangents and not out_tangents:
        in_tangents = [(0.0, 0.0)] * len(vertices)
        out_tangents = [(0.0, 0.0)] * len(vertices)
    if not len(vertices) == len(in_tangents) == len(out_tangents):
        raise InvalidFieldError(
            f"Shape has {len(vertices)} vertices but {len(in_tangents)} in and "
            f"{len(out_tangents)} out tangents",
            path,
        )
    return ShapeData.from_lists(vertices, in_tangents, out_tangents, closed, scale)


def _read_point_list(reader: JsonReader) -> List[Point]:
    points = []
    reader.begin_array()
    while reader.has_next():
        points.append(read_point(reader))
    reader.end_array()
    return points


def read_document(reader: JsonReader, scale: float = 1.0) -> DocumentData:
    """Text document keyframe value."""
    text = ""
    font_name = ""
    size = 0.0
    justification = Justification.LEFT_ALIGN
    tracking = 0
    line_height = 0.0
    baseline_shift = 0.0
    fill_color: Optional[Color] = None
    stroke_color: Optional[Color] = None
    stroke_width = 0.0
    stroke_over_fill = True

    reader.begin_object()
    while reader.has_next():
        name = reader.next_name()
        if name == "t":
            text = reader.next_string()
        elif name == "f":
            font_name = reader.next_string()
        elif name == "s":
            size = reader.next_double()
        elif name == "j":
            code = reader.next_int()
            justification = Justification(code) if code in (0, 1, 2) else Justification.CENTER
        elif name == "tr":
            tracking = reader.next_int()
        elif name == "lh":
            line_height = reader.next_double()
        elif name == "ls":
            baseline_shift = reader.next_double()
        elif name == "fc":
            fill_color = read_color(reader)
        elif name == "sc":
            stroke_color = read_color(reader)
        elif name == "sw":
            stroke_width = reader.next_double()
        elif name == "of":
            stroke_over_fill = reader.next_flag()
        else:
            reader.skip_value()
    reader.end_object()

    return DocumentData(
        text=text,
        font_name=font_name,
        size=size,
        justification=justification,
        tracking=tracking,
        line_height=line_height,
        baseline_shift=baseline_shift,
        fill_color=fill_color,
        stroke_color=stroke_color,
        stroke_width=stroke_width,
        stroke_over_fill=stroke_over_fill,
    )


# Keyframes

def parse_keyframes(
    reader: JsonReader,
    read_value: ValueReader,
    scale: float = 1.0,
    spatial: bool = False,
) -> List[Keyframe]:
    """Parse a "k" field: a static value or an array of keyframe objects."""
    path = reader.path
    if (
        reader.peek() is JsonToken.BEGIN_ARRAY
        and reader.peek_first_element() is JsonToken.BEGIN_OBJECT
    ):
        keyframes = []
        reader.begin_array()
        while reader.has_next():
            keyframes.append(_parse_keyframe(reader, read_value, scale, spatial))
        reader.end_array()
        return _link_keyframes(keyframes, path)

    return [Keyframe.static_value(read_value(reader, scale))]


def _parse_keyframe(
    reader: JsonReader,
    read_value: ValueReader,
    scale: float,
    spatial: bool,
) -> Keyframe:
    path = reader.path
    start_frame: Optional[float] = None
    start_value = None
    end_value = None
    out_tangent: Optional[Point] = None
    in_tangent: Optional[Point] = None
    hold = False
    spatial_out: Optional[Point] = None
    spatial_in: Optional[Point] = None

    reader.begin_object()
    while reader.has_next():
        name = reader.next_name()
        if name == "t":
            start_frame = reader.next_double()
        elif name == "s":
            start_value = read_value(reader, scale)
        elif name == "e":
            end_value = read_value(reader, scale)
        elif name == "o":
            out_tangent = read_point(reader)
        elif name == "i":
            in_tangent = read_point(reader)
        elif name == "h":
            hold = reader.next_flag()
        elif name == "to" and spatial:
            spatial_out = read_point(reader, scale)
        elif name == "ti" and spatial:
            spatial_in = read_point(reader, scale)
        else:
            reader.skip_value()
    reader.end_object()

    if start_frame is None:
        raise InvalidFieldError("Keyframe has no time 't'", path)

    return Keyframe(
        start_value=start_value,
        end_value=end_value,
        start_frame=start_frame,
        out_tangent=out_tangent,
        in_tangent=in_tangent,
        hold=hold,
        spatial_out=spatial_out,
        spatial_in=spatial_in,
    )


def _link_keyframes(keyframes: List[Keyframe], path: str) -> List[Keyframe]:
    """Fill in end frames/values from the following keyframes and validate."""
    if not keyframes:
        raise InvalidFieldError("Animated property has no keyframes", path)

    for previous, current in zip(keyframes, keyframes[1:]):
        if current.start_frame < previous.start_frame:
            raise InvalidFieldError(
                f"Keyframe times must not decrease ({previous.start_frame} -> "
                f"{current.start_frame})",
                path,
            )

    # Trailing keyframes of older exports carry only a time
    starts = []
    for i, keyframe in enumerate(keyframes):
        start_value = keyframe.start_value
        if start_value is None:
            if i == 0 or keyframes[i - 1].end_value is None:
                raise InvalidFieldError(f"Keyframe {i} has no start value 's'", path)
            start_value = keyframes[i - 1].end_value
        starts.append(start_value)

    linked = []
    last = len(keyframes) - 1
    for i, keyframe in enumerate(keyframes):
        if i == last:
            linked.append(replace(
                keyframe,
                start_value=starts[i],
                end_value=None,
                end_frame=None,
                static=(last == 0),
            ))
            continue

        end_value = keyframe.end_value if keyframe.end_value is not None else starts[i + 1]
        if keyframe.hold:
            end_value = starts[i]
        _check_compatible(starts[i], end_value, path)
        linked.append(replace(
            keyframe,
            start_value=starts[i],
            end_value=end_value,
            end_frame=keyframes[i + 1].start_frame,
        ))
    return linked


def _check_compatible(start, end, path: str) -> None:
    if isinstance(start, (ShapeData, GradientColor)) and len(start) != len(end):
        raise InvalidFieldError(
            f"Adjacent keyframes have {len(start)} and {len(end)} points", path
        )


# Animatable properties

def parse_property(
    reader: JsonReader,
    context: ParseContext,
    read_value: ValueReader,
    scale: float = 1.0,
    spatial: bool = False,
) -> List[Keyframe]:
    """Parse an animatable property object and return its keyframes."""
    if reader.peek() is not JsonToken.BEGIN_OBJECT:
        return parse_keyframes(reader, read_value, scale, spatial)

    path = reader.path
    keyframes: Optional[List[Keyframe]] = None
    reader.begin_object()
    while reader.has_next():
        name = reader.next_name()
        if name == "k":
            keyframes = parse_keyframes(reader, read_value, scale, spatial)
        elif name == "x" and reader.peek() is JsonToken.STRING:
            context.warn(EXPRESSIONS_WARNING)
            reader.skip_value()
        else:
            reader.skip_value()
    reader.end_object()

    if keyframes is None:
        raise InvalidFieldError("Animatable property has no value 'k'", path)
    return keyframes


def parse_float_value(
    reader: JsonReader, context: ParseContext, scale_by_density: bool = False
) -> AnimatableFloatValue:
    scale = context.scale if scale_by_density else 1.0
    return AnimatableFloatValue(parse_property(reader, context, read_float, scale))


def parse_integer_value(reader: JsonReader, context: ParseContext) -> AnimatableIntegerValue:
    return AnimatableIntegerValue(parse_property(reader, context, read_int))


def parse_point_value(
    reader: JsonReader, context: ParseContext, scale_by_density: bool = True
) -> AnimatablePointValue:
    scale = context.scale if scale_by_density else 1.0
    return AnimatablePointValue(parse_property(reader, context, read_point, scale))


def parse_scale_value(reader: JsonReader, context: ParseContext) -> AnimatablePointValue:
    return AnimatablePointValue(parse_property(reader, context, read_scale))


def parse_color_value(reader: JsonReader, context: ParseContext) -> AnimatableColorValue:
    return AnimatableColorValue(parse_property(reader, context, read_color))


def parse_shape_value(reader: JsonReader, context: ParseContext) -> AnimatableShapeValue:
    return AnimatableShapeValue(
        parse_property(reader, context, read_shape_data, context.scale)
    )


def parse_document_value(
    reader: JsonReader, context: ParseContext
) -> AnimatableStepValue[DocumentData]:
    return AnimatableStepValue(parse_property(reader, context, read_document))


def parse_gradient_value(
    reader: JsonReader, context: ParseContext, color_points: int
) -> AnimatableGradientColorValue:
    def read_gradient(gradient_reader: JsonReader, scale: float) -> GradientColor:
        path = gradient_reader.path
        raw = read_numbers(gradient_reader)
        try:
            return GradientColor.from_raw(raw, color_points)
        except ValueError as e:
            raise InvalidFieldError(str(e), path) from e

    return AnimatableGradientColorValue(parse_property(reader, context, read_gradient))


def parse_position_value(
    reader: JsonReader, context: ParseContext
) -> AnimatablePositionValue | AnimatableSplitDimensionValue:
    """Position: a spatial point property, or split x/y float properties."""
    if reader.peek() is not JsonToken.BEGIN_OBJECT:
        return AnimatablePositionValue(
            parse_keyframes(reader, read_point, context.scale, spatial=True)
        )

    path = reader.path
    keyframes: Optional[List[Keyframe]] = None
    x: Optional[AnimatableFloatValue] = None
    y: Optional[AnimatableFloatValue] = None

    reader.begin_object()
    while reader.has_next():
        name = reader.next_name()
        if name == "k":
            keyframes = parse_keyframes(
                reader, read_point, context.scale, spatial=True
            )
        elif name == "x" and reader.peek() is JsonToken.BEGIN_OBJECT:
            x = parse_float_value(reader, context, scale_by_density=True)
        elif name == "y" and reader.peek() is JsonToken.BEGIN_OBJECT:
            y = parse_float_value(reader, context, scale_by_density=True)
        elif name == "x" and reader.peek() is JsonToken.STRING:
            context.warn(EXPRESSIONS_WARNING)
            reader.skip_value()
        else:
            reader.skip_value()
    reader.end_object()

    if keyframes is not None:
        return AnimatablePositionValue(keyframes)
    if x is not None and y is not None:
        return AnimatableSplitDimensionValue(x, y)
    raise InvalidFieldError("Position has neither 'k' nor split 'x'/'y' values", path)
