"""
Shape layer content parsing.

Each shape item is an object with a "ty" discriminator. The discriminator is
peeked before the object is entered so the matching item parser can read
the whole object in one pass, whatever the field order.
"""

from typing import Callable, Dict, List, Optional, Tuple, Type, TypeVar
from enum import Enum
import logging

from lottiekit.animation.values import AnimatableFloatValue, AnimatableIntegerValue
from lottiekit.model.shape import (
    ContentModel,
    DashType,
    EllipseShape,
    FillRule,
    GradientFill,
    GradientStroke,
    GradientType,
    LineCap,
    LineJoin,
    MergePaths,
    MergePathsMode,
    PolystarShape,
    PolystarType,
    RectangleShape,
    ShapeFill,
    ShapeGroup,
    ShapePath,
    ShapeStroke,
    ShapeTransform,
    ShapeTrimPath,
    StrokeDash,
    TrimPathType,
)
from lottiekit.errors import InvalidFieldError
from lottiekit.parser.reader import JsonReader, JsonToken
from lottiekit.parser.transform import parse_transform
from lottiekit.parser.values import (
    ParseContext,
    parse_color_value,
    parse_float_value,
    parse_gradient_value,
    parse_integer_value,
    parse_point_value,
    parse_position_value,
    parse_shape_value,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _enum(cls: Type[E], value, default: E) -> E:
    try:
        return cls(value)
    except ValueError:
        logger.debug(f"Unknown {cls.__name__} value {value!r}, using {default.name}")
        return default


def _require(value, field: str, item: str, path: str):
    if value is None:
        raise InvalidFieldError(f"{item} has no '{field}'", path)
    return value


def _full_opacity() -> AnimatableIntegerValue:
    return AnimatableIntegerValue.static(100)


# Item parsers: each reads one whole item object

def _parse_group(reader: JsonReader, context: ParseContext) -> ShapeGroup:
    name = ""
    hidden = False
    items: List[ContentModel] = []

    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "nm":
            name = reader.next_string()
        elif key == "hd":
            hidden = reader.next_flag()
        elif key == "it":
            items = parse_content_list(reader, context)
        else:
            reader.skip_value()
    reader.end_object()
    return ShapeGroup(name=name, items=tuple(items), hidden=hidden)


def _parse_path(reader: JsonReader, context: ParseContext) -> ShapePath:
    path = reader.path
    name = ""
    hidden = False
    shape = None

    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "nm":
            name = reader.next_string()
        elif key == "hd":
            hidden = reader.next_flag()
        elif key == "ks":
            shape = parse_shape_value(reader, context)
        else:
            reader.skip_value()
    reader.end_object()
    return ShapePath(name=name, path=_require(shape, "ks", "Path", path), hidden=hidden)


def _parse_rectangle(reader: JsonReader, context: ParseContext) -> RectangleShape:
    path = reader.path
    name = ""
    hidden = False
    position = size = roundness = None

    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "nm":
            name = reader.next_string()
        elif key == "hd":
            hidden = reader.next_flag()
        elif key == "p":
            position = parse_position_value(reader, context)
        elif key == "s":
            size = parse_point_value(reader, context)
        elif key == "r":
            roundness = parse_float_value(reader, context, scale_by_density=True)
        else:
            reader.skip_value()
    reader.end_object()
    return RectangleShape(
        name=name,
        position=_require(position, "p", "Rectangle", path),
        size=_require(size, "s", "Rectangle", path),
        corner_radius=roundness or AnimatableFloatValue.static(0.0),
        hidden=hidden,
    )


def _parse_ellipse(reader: JsonReader, context: ParseContext) -> EllipseShape:
    path = reader.path
    name = ""
    hidden = False
    position = size = None

    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "nm":
            name = reader.next_string()
        elif key == "hd":
            hidden = reader.next_flag()
        elif key == "p":
            position = parse_position_value(reader, context)
        elif key == "s":
            size = parse_point_value(reader, context)
        else:
            reader.skip_value()
    reader.end_object()
    return EllipseShape(
        name=name,
        position=_require(position, "p", "Ellipse", path),
        size=_require(size, "s", "Ellipse", path),
        hidden=hidden,
    )


def _parse_polystar(reader: JsonReader, context: ParseContext) -> PolystarShape:
    path = reader.path
    name = ""
    hidden = False
    star_type = PolystarType.STAR
    points = position = rotation = None
    outer_radius = outer_roundness = inner_radius = inner_roundness = None

    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "nm":
            name = reader.next_string()
        elif key == "hd":
            hidden = reader.next_flag()
        elif key == "sy":
            star_type = _enum(PolystarType, reader.next_int(), PolystarType.STAR)
        elif key == "pt":
            points = parse_float_value(reader, context)
        elif key == "p":
            position = parse_position_value(reader, context)
        elif key == "r":
            rotation = parse_float_value(reader, context)
        elif key == "or":
            outer_radius = parse_float_value(reader, context, scale_by_density=True)
        elif key == "os":
            outer_roundness = parse_float_value(reader, context)
        elif key == "ir":
            inner_radius = parse_float_value(reader, context, scale_by_density=True)
        elif key == "is":
            inner_roundness = parse_float_value(reader, context)
        else:
            reader.skip_value()
    reader.end_object()

    # Polygons have no inner vertices
    if star_type is PolystarType.POLYGON:
        inner_radius = inner_roundness = None

    return PolystarShape(
        name=name,
        type=star_type,
        points=_require(points, "pt", "Polystar", path),
        position=_require(position, "p", "Polystar", path),
        rotation=rotation or AnimatableFloatValue.static(0.0),
        outer_radius=_require(outer_radius, "or", "Polystar", path),
        outer_roundness=outer_roundness or AnimatableFloatValue.static(0.0),
        inner_radius=inner_radius,
        inner_roundness=inner_roundness,
        hidden=hidden,
    )


def _parse_fill(reader: JsonReader, context: ParseContext) -> ShapeFill:
    path = reader.path
    name = ""
    hidden = False
    color = opacity = None
    fill_rule = FillRule.NON_ZERO

    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "nm":
            name = reader.next_string()
        elif key == "hd":
            hidden = reader.next_flag()
        elif key == "c":
            color = parse_color_value(reader, context)
        elif key == "o":
            opacity = parse_integer_value(reader, context)
        elif key == "r":
            fill_rule = _enum(FillRule, reader.next_int(), FillRule.NON_ZERO)
        else:
            reader.skip_value()
    reader.end_object()
    return ShapeFill(
        name=name,
        color=_require(color, "c", "Fill", path),
        opacity=opacity or _full_opacity(),
        fill_rule=fill_rule,
        hidden=hidden,
    )


def _parse_dashes(reader: JsonReader, context: ParseContext) -> Tuple[StrokeDash, ...]:
    dashes = []
    reader.begin_array()
    while reader.has_next():
        dash_type = None
        value = None
        reader.begin_object()
        while reader.has_next():
            key = reader.next_name()
            if key == "n":
                dash_type = _enum(DashType, reader.next_string(), DashType.DASH)
            elif key == "v":
                value = parse_float_value(reader, context, scale_by_density=True)
            else:
                reader.skip_value()
        reader.end_object()
        if dash_type is not None and value is not None:
            dashes.append(StrokeDash(type=dash_type, value=value))
    reader.end_array()
    return tuple(dashes)


def _parse_stroke(reader: JsonReader, context: ParseContext) -> ShapeStroke:
    path = reader.path
    name = ""
    hidden = False
    color = opacity = width = None
    cap = LineCap.BUTT
    join = LineJoin.MITER
    miter_limit = 4.0
    dashes: Tuple[StrokeDash, ...] = ()

    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "nm":
            name = reader.next_string()
        elif key == "hd":
            hidden = reader.next_flag()
        elif key == "c":
            color = parse_color_value(reader, context)
        elif key == "o":
            opacity = parse_integer_value(reader, context)
        elif key == "w":
            width = parse_float_value(reader, context, scale_by_density=True)
        elif key == "lc":
            cap = _enum(LineCap, reader.next_int(), LineCap.BUTT)
        elif key == "lj":
            join = _enum(LineJoin, reader.next_int(), LineJoin.MITER)
        elif key == "ml":
            miter_limit = reader.next_double()
        elif key == "d":
            dashes = _parse_dashes(reader, context)
        else:
            reader.skip_value()
    reader.end_object()
    return ShapeStroke(
        name=name,
        color=_require(color, "c", "Stroke", path),
        opacity=opacity or _full_opacity(),
        width=_require(width, "w", "Stroke", path),
        cap=cap,
        join=join,
        miter_limit=miter_limit,
        dashes=dashes,
        hidden=hidden,
    )


def _parse_gradient_colors(reader: JsonReader, context: ParseContext):
    """{"p": color stop count, "k": animatable raw stop values}."""
    path = reader.path
    color_points = reader.peek_field("p")
    if not isinstance(color_points, (int, float)) or isinstance(color_points, bool):
        raise InvalidFieldError("Gradient has no color stop count 'p'", path)

    colors = None
    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "k":
            colors = parse_gradient_value(reader, context, int(color_points))
        else:
            reader.skip_value()
    reader.end_object()
    return _require(colors, "k", "Gradient", path)


def _parse_gradient(reader: JsonReader, context: ParseContext, stroke: bool):
    path = reader.path
    item = "Gradient stroke" if stroke else "Gradient fill"
    name = ""
    hidden = False
    colors = opacity = start_point = end_point = width = None
    gradient_type = GradientType.LINEAR
    fill_rule = FillRule.NON_ZERO
    cap = LineCap.BUTT
    join = LineJoin.MITER
    miter_limit = 4.0
    dashes: Tuple[StrokeDash, ...] = ()

    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "nm":
            name = reader.next_string()
        elif key == "hd":
            hidden = reader.next_flag()
        elif key == "g":
            colors = _parse_gradient_colors(reader, context)
        elif key == "o":
            opacity = parse_integer_value(reader, context)
        elif key == "t":
            gradient_type = _enum(GradientType, reader.next_int(), GradientType.LINEAR)
        elif key == "s":
            start_point = parse_point_value(reader, context)
        elif key == "e":
            end_point = parse_point_value(reader, context)
        elif key == "r":
            fill_rule = _enum(FillRule, reader.next_int(), FillRule.NON_ZERO)
        elif key == "w" and stroke:
            width = parse_float_value(reader, context, scale_by_density=True)
        elif key == "lc" and stroke:
            cap = _enum(LineCap, reader.next_int(), LineCap.BUTT)
        elif key == "lj" and stroke:
            join = _enum(LineJoin, reader.next_int(), LineJoin.MITER)
        elif key == "ml" and stroke:
            miter_limit = reader.next_double()
        elif key == "d" and stroke:
            dashes = _parse_dashes(reader, context)
        else:
            reader.skip_value()
    reader.end_object()

    colors = _require(colors, "g", item, path)
    opacity = opacity or _full_opacity()
    start_point = _require(start_point, "s", item, path)
    end_point = _require(end_point, "e", item, path)
    if stroke:
        return GradientStroke(
            name=name,
            gradient_type=gradient_type,
            colors=colors,
            opacity=opacity,
            start_point=start_point,
            end_point=end_point,
            width=_require(width, "w", item, path),
            cap=cap,
            join=join,
            miter_limit=miter_limit,
            dashes=dashes,
            hidden=hidden,
        )
    return GradientFill(
        name=name,
        gradient_type=gradient_type,
        colors=colors,
        opacity=opacity,
        start_point=start_point,
        end_point=end_point,
        fill_rule=fill_rule,
        hidden=hidden,
    )


def _parse_trim_path(reader: JsonReader, context: ParseContext) -> ShapeTrimPath:
    path = reader.path
    name = ""
    hidden = False
    trim_type = TrimPathType.SIMULTANEOUSLY
    start = end = offset = None

    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "nm":
            name = reader.next_string()
        elif key == "hd":
            hidden = reader.next_flag()
        elif key == "s":
            start = parse_float_value(reader, context)
        elif key == "e":
            end = parse_float_value(reader, context)
        elif key == "o":
            offset = parse_float_value(reader, context)
        elif key == "m":
            trim_type = _enum(TrimPathType, reader.next_int(), TrimPathType.SIMULTANEOUSLY)
        else:
            reader.skip_value()
    reader.end_object()
    return ShapeTrimPath(
        name=name,
        type=trim_type,
        start=_require(start, "s", "Trim path", path),
        end=_require(end, "e", "Trim path", path),
        offset=offset or AnimatableFloatValue.static(0.0),
        hidden=hidden,
    )


def _parse_merge_paths(reader: JsonReader, context: ParseContext) -> MergePaths:
    name = ""
    hidden = False
    mode = MergePathsMode.MERGE

    reader.begin_object()
    while reader.has_next():
        key = reader.next_name()
        if key == "nm":
            name = reader.next_string()
        elif key == "hd":
            hidden = reader.next_flag()
        elif key == "mm":
            mode = _enum(MergePathsMode, reader.next_int(), MergePathsMode.MERGE)
        else:
            reader.skip_value()
    reader.end_object()
    return MergePaths(name=name, mode=mode, hidden=hidden)


def _parse_shape_transform(reader: JsonReader, context: ParseContext) -> ShapeTransform:
    return parse_transform(reader, context, cls=ShapeTransform)


ItemParser = Callable[[JsonReader, ParseContext], ContentModel]

CONTENT_PARSERS: Dict[str, ItemParser] = {
    "gr": _parse_group,
    "sh": _parse_path,
    "rc": _parse_rectangle,
    "el": _parse_ellipse,
    "sr": _parse_polystar,
    "fl": _parse_fill,
    "st": _parse_stroke,
    "gf": lambda reader, context: _parse_gradient(reader, context, stroke=False),
    "gs": lambda reader, context: _parse_gradient(reader, context, stroke=True),
    "tr": _parse_shape_transform,
    "tm": _parse_trim_path,
    "mm": _parse_merge_paths,
}


def parse_content(reader: JsonReader, context: ParseContext) -> Optional[ContentModel]:
    """Parse one shape item; unknown or untyped items are skipped (None)."""
    if reader.peek() is not JsonToken.BEGIN_OBJECT:
        reader.skip_value()
        return None

    item_type = reader.peek_field("ty")
    parser = CONTENT_PARSERS.get(item_type) if isinstance(item_type, str) else None
    if parser is None:
        logger.debug(f"Skipping unknown shape type {item_type!r} at {reader.path}")
        reader.skip_value()
        return None
    return parser(reader, context)


def parse_content_list(reader: JsonReader, context: ParseContext) -> List[ContentModel]:
    """Parse an array of shape items, dropping the skipped ones."""
    items: List[ContentModel] = []
    reader.begin_array()
    while reader.has_next():
        item = parse_content(reader, context)
        if item is not None:
            items.append(item)
    reader.end_array()
    return items
