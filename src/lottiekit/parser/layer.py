"""
Layer parsing.

A layer object is read in one pass, collecting every known field, and the
payload variant is only chosen at the end from the "ty" discriminator, so
field order inside the object does not matter.
"""

from typing import List, Optional, Tuple
import logging

from lottiekit.animation.values import (
    AnimatableFloatValue,
    AnimatableIntegerValue,
    AnimatableStepValue,
)
from lottiekit.errors import InvalidFieldError
from lottiekit.model.layer import (
    BlendMode,
    ImagePayload,
    Layer,
    LayerPayload,
    LayerType,
    Mask,
    MaskMode,
    MatteType,
    NullPayload,
    PrecompPayload,
    ShapePayload,
    SolidPayload,
    TextPayload,
    Transform,
    UnknownPayload,
    visibility_keyframes,
)
from lottiekit.model.shape import ContentModel
from lottiekit.model.text import DocumentData
from lottiekit.parser.reader import JsonReader
from lottiekit.parser.shapes import parse_content_list
from lottiekit.parser.transform import parse_transform
from lottiekit.parser.values import (
    Color,
    ParseContext,
    parse_document_value,
    parse_float_value,
    parse_integer_value,
    parse_shape_value,
    read_hex_color,
)

logger = logging.getLogger(__name__)

LAYER_EFFECTS_WARNING = (
    "Lottie doesn't support layer effects. If you are using them for fills, strokes, "
    "trim paths etc. then try adding them directly as contents in your shape."
)
TEXT_VERSION_WARNING = "Text is only supported on bodymovin >= 4.8.0"


def _enum_or_default(cls, value, default):
    try:
        return cls(value)
    except ValueError:
        logger.debug(f"Unknown {cls.__name__} {value!r}, using {default.name}")
        return default


def _parse_masks(reader: JsonReader, context: ParseContext) -> Tuple[Mask, ...]:
    masks = []
    reader.begin_array()
    while reader.has_next():
        masks.append(_parse_mask(reader, context))
    reader.end_array()
    return tuple(masks)


def _parse_mask(reader: JsonReader, context: ParseContext) -> Mask:
    path = reader.path
    mode = MaskMode.ADD
    shape = None
    opacity = None
    inverted = False

    reader.begin_object()
    while reader.has_next():
        name = reader.next_name()
        if name == "mode":
            code = reader.next_string()
            try:
                mode = MaskMode(code)
            except ValueError:
                context.warn(f"Unknown mask mode {code}. Defaulting to Add.")
                mode = MaskMode.ADD
        elif name == "pt":
            shape = parse_shape_value(reader, context)
        elif name == "o":
            opacity = parse_integer_value(reader, context)
        elif name == "inv":
            inverted = reader.next_flag()
        else:
            reader.skip_value()
    reader.end_object()

    if shape is None:
        raise InvalidFieldError("Mask has no path 'pt'", path)
    return Mask(
        mode=mode,
        path=shape,
        opacity=opacity or AnimatableIntegerValue.static(100),
        inverted=inverted,
    )


def _parse_text_data(
    reader: JsonReader, context: ParseContext
) -> Optional[AnimatableStepValue[DocumentData]]:
    """The "t" object of a text layer; only the document ("d") is kept."""
    document = None
    reader.begin_object()
    while reader.has_next():
        if reader.next_name() == "d":
            document = parse_document_value(reader, context)
        else:
            reader.skip_value()
    reader.end_object()
    return document


def _has_entries(reader: JsonReader) -> bool:
    """Consume an array and report whether it had any element."""
    reader.begin_array()
    found = reader.has_next()
    while reader.has_next():
        reader.skip_value()
    reader.end_array()
    return found


def parse_layer(reader: JsonReader, context: ParseContext) -> Layer:
    """Parse one layer object."""
    path = reader.path
    type_code: Optional[int] = None
    layer_id: Optional[int] = None
    name = ""
    parent_id: Optional[int] = None
    ref_id: Optional[str] = None
    in_frame = 0.0
    out_frame = 0.0
    start_frame = 0.0
    time_stretch = 1.0
    blend_mode = BlendMode.NORMAL
    matte_type = MatteType.NONE
    is_matte = False
    hidden = False
    transform: Optional[Transform] = None
    shapes: List[ContentModel] = []
    masks: Tuple[Mask, ...] = ()
    solid_width = solid_height = 0
    solid_color: Color = (0.0, 0.0, 0.0, 1.0)
    width = height = 0
    time_remap: Optional[AnimatableFloatValue] = None
    document: Optional[AnimatableStepValue[DocumentData]] = None

    reader.begin_object()
    while reader.has_next():
        field = reader.next_name()
        if field == "ty":
            type_code = reader.next_int()
        elif field == "ind":
            layer_id = reader.next_int()
        elif field == "nm":
            name = reader.next_string()
        elif field == "parent":
            parent_id = reader.next_int()
        elif field == "refId":
            ref_id = reader.next_string()
        elif field == "ip":
            in_frame = reader.next_double()
        elif field == "op":
            out_frame = reader.next_double()
        elif field == "st":
            start_frame = reader.next_double()
        elif field == "sr":
            time_stretch = reader.next_double()
        elif field == "bm":
            blend_mode = _enum_or_default(BlendMode, reader.next_int(), BlendMode.NORMAL)
        elif field == "tt":
            matte_type = _enum_or_default(MatteType, reader.next_int(), MatteType.NONE)
        elif field == "td":
            is_matte = reader.next_flag()
        elif field == "hd":
            hidden = reader.next_flag()
        elif field == "ks":
            transform = parse_transform(reader, context)
        elif field == "shapes":
            shapes = parse_content_list(reader, context)
        elif field == "masksProperties":
            masks = _parse_masks(reader, context)
        elif field == "sw":
            solid_width = int(reader.next_double() * context.scale)
        elif field == "sh":
            solid_height = int(reader.next_double() * context.scale)
        elif field == "sc":
            solid_color = read_hex_color(reader)
        elif field == "w":
            width = int(reader.next_double() * context.scale)
        elif field == "h":
            height = int(reader.next_double() * context.scale)
        elif field == "tm":
            time_remap = parse_float_value(reader, context)
        elif field == "t":
            document = _parse_text_data(reader, context)
        elif field == "ef":
            if _has_entries(reader):
                context.warn(LAYER_EFFECTS_WARNING)
        else:
            reader.skip_value()
    reader.end_object()

    if type_code is None:
        raise InvalidFieldError(f"Layer {name!r} has no type 'ty'", path)
    if layer_id is None:
        raise InvalidFieldError(f"Layer {name!r} has no index 'ind'", path)

    layer_type = LayerType.from_code(type_code)
    if layer_type is LayerType.TEXT and context.is_before_version(4, 8, 0):
        context.warn(TEXT_VERSION_WARNING)
    if time_stretch == 0:
        time_stretch = 1.0
    if out_frame <= 0:
        out_frame = context.end_frame

    payload: LayerPayload
    if layer_type is LayerType.SHAPE:
        payload = ShapePayload(shapes=tuple(shapes))
    elif layer_type is LayerType.IMAGE:
        payload = ImagePayload(ref_id=ref_id)
    elif layer_type is LayerType.SOLID:
        payload = SolidPayload(width=solid_width, height=solid_height, color=solid_color)
    elif layer_type is LayerType.NULL:
        payload = NullPayload()
    elif layer_type is LayerType.TEXT:
        payload = TextPayload(document=document)
    elif layer_type is LayerType.PRECOMP:
        payload = PrecompPayload(ref_id=ref_id, width=width, height=height, time_remap=time_remap)
    else:
        logger.debug(f"Layer {name!r} has unknown type {type_code}")
        payload = UnknownPayload(code=type_code)

    return Layer(
        id=layer_id,
        name=name,
        type=layer_type,
        transform=transform or Transform.identity(),
        payload=payload,
        parent_id=parent_id,
        in_frame=in_frame,
        out_frame=out_frame,
        start_frame=start_frame,
        time_stretch=time_stretch,
        blend_mode=blend_mode,
        matte_type=matte_type,
        is_matte=is_matte,
        hidden=hidden,
        masks=masks,
        visibility=visibility_keyframes(in_frame, out_frame),
    )
