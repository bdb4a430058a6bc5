"""
Layer model.

A layer is one node of a composition: a shape, image, solid, null, text or
precomp-reference layer. Layers are owned by the LayerList they were parsed
into; parenting is a back-reference by id that is resolved through the
owning list on demand.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union
import logging

from lottiekit.animation.keyframe import Keyframe
from lottiekit.animation.values import (
    AnimatableFloatValue,
    AnimatableIntegerValue,
    AnimatablePointValue,
    AnimatablePositionValue,
    AnimatableShapeValue,
    AnimatableSplitDimensionValue,
    AnimatableStepValue,
)
from lottiekit.model.shape import ContentModel
from lottiekit.model.text import DocumentData

logger = logging.getLogger(__name__)

Color = Tuple[float, float, float, float]


class LayerType(Enum):
    """Layer kinds, keyed by the Bodymovin "ty" code."""
    PRECOMP = 0
    SOLID = 1
    IMAGE = 2
    NULL = 3
    SHAPE = 4
    TEXT = 5
    UNKNOWN = -1

    @classmethod
    def from_code(cls, code: int) -> "LayerType":
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN


class BlendMode(Enum):
    NORMAL = 0
    MULTIPLY = 1
    SCREEN = 2
    OVERLAY = 3
    DARKEN = 4
    LIGHTEN = 5
    COLOR_DODGE = 6
    COLOR_BURN = 7
    HARD_LIGHT = 8
    SOFT_LIGHT = 9
    DIFFERENCE = 10
    EXCLUSION = 11
    HUE = 12
    SATURATION = 13
    COLOR = 14
    LUMINOSITY = 15


class MatteType(Enum):
    NONE = 0
    ADD = 1
    INVERT = 2
    LUMA = 3
    LUMA_INVERTED = 4


class MaskMode(Enum):
    ADD = "a"
    SUBTRACT = "s"
    INTERSECT = "i"
    NONE = "n"


@dataclass(frozen=True)
class Mask:
    mode: MaskMode
    path: AnimatableShapeValue
    opacity: AnimatableIntegerValue
    inverted: bool = False


@dataclass(frozen=True)
class Transform:
    """Layer transform ("ks"). Rotation in degrees, opacity 0-100."""
    anchor: AnimatablePointValue
    position: Union[AnimatablePositionValue, AnimatableSplitDimensionValue]
    scale: AnimatablePointValue
    rotation: AnimatableFloatValue
    opacity: AnimatableIntegerValue
    skew: Optional[AnimatableFloatValue] = None
    skew_axis: Optional[AnimatableFloatValue] = None

    @classmethod
    def identity(cls) -> "Transform":
        return cls(
            anchor=AnimatablePointValue.static((0.0, 0.0)),
            position=AnimatablePositionValue.static((0.0, 0.0)),
            scale=AnimatablePointValue.static((1.0, 1.0)),
            rotation=AnimatableFloatValue.static(0.0),
            opacity=AnimatableIntegerValue.static(100),
        )


# Layer payloads: one variant per layer type

@dataclass(frozen=True)
class ShapePayload:
    shapes: Tuple[ContentModel, ...] = ()


@dataclass(frozen=True)
class ImagePayload:
    ref_id: Optional[str] = None


@dataclass(frozen=True)
class SolidPayload:
    width: int = 0
    height: int = 0
    color: Color = (0.0, 0.0, 0.0, 1.0)


@dataclass(frozen=True)
class NullPayload:
    pass


@dataclass(frozen=True)
class TextPayload:
    document: Optional[AnimatableStepValue[DocumentData]] = None

    @property
    def font_family(self) -> Optional[str]:
        """Font of the first text document, used to look up glyphs."""
        if self.document is None:
            return None
        return self.document.keyframes[0].start_value.font_name or None


@dataclass(frozen=True)
class PrecompPayload:
    ref_id: Optional[str] = None
    width: int = 0
    height: int = 0
    time_remap: Optional[AnimatableFloatValue] = None


@dataclass(frozen=True)
class UnknownPayload:
    code: int = -1


LayerPayload = Union[
    ShapePayload,
    ImagePayload,
    SolidPayload,
    NullPayload,
    TextPayload,
    PrecompPayload,
    UnknownPayload,
]


def visibility_keyframes(in_frame: float, out_frame: float) -> AnimatableStepValue[bool]:
    """Hidden before in_frame, visible until out_frame, hidden after."""
    return AnimatableStepValue([
        Keyframe(False, True, float("-inf"), in_frame, hold=True),
        Keyframe(True, False, in_frame, out_frame, hold=True),
        Keyframe(False, None, out_frame, None),
    ])


@dataclass(frozen=True)
class Layer:
    """A parsed layer.

    Attributes:
        id: Layer index ("ind"), unique within the owning LayerList
        name: Layer name
        type: Layer kind
        parent_id: Id of the transform parent in the same list, if any
        in_frame: First frame the layer is visible
        out_frame: Frame the layer stops being visible
        payload: Type-specific data
    """

    id: int
    name: str
    type: LayerType
    transform: Transform
    payload: LayerPayload
    parent_id: Optional[int] = None
    in_frame: float = 0.0
    out_frame: float = 0.0
    start_frame: float = 0.0
    time_stretch: float = 1.0
    blend_mode: BlendMode = BlendMode.NORMAL
    matte_type: MatteType = MatteType.NONE
    is_matte: bool = False
    hidden: bool = False
    masks: Tuple[Mask, ...] = ()
    visibility: Optional[AnimatableStepValue[bool]] = field(default=None, repr=False)

    @property
    def ref_id(self) -> Optional[str]:
        """Referenced precomp or image asset id."""
        if isinstance(self.payload, (PrecompPayload, ImagePayload)):
            return self.payload.ref_id
        return None

    def is_visible_at(self, frame: float) -> bool:
        if self.hidden:
            return False
        if self.visibility is None:
            return self.in_frame <= frame < self.out_frame
        return self.visibility.value_at(frame)

    def describe(self, scope: Optional["LayerList"] = None, prefix: str = "") -> str:
        """Human readable summary including the parent chain."""
        lines = [f"{prefix}{self.name}"]
        if scope is not None:
            parents = [parent.name for parent in scope.parent_chain(self)]
            if parents:
                lines.append(f"{prefix}\tParents: {'->'.join(parents)}")
        if self.masks:
            lines.append(f"{prefix}\tMasks: {len(self.masks)}")
        if isinstance(self.payload, SolidPayload):
            lines.append(
                f"{prefix}\tBackground: {self.payload.width}x{self.payload.height} "
                f"{self.payload.color}"
            )
        if isinstance(self.payload, ShapePayload) and self.payload.shapes:
            lines.append(f"{prefix}\tShapes:")
            for shape in self.payload.shapes:
                lines.append(f"{prefix}\t\t{type(shape).__name__}({getattr(shape, 'name', '')})")
        return "\n".join(lines) + "\n"


class LayerList(Sequence):
    """Ordered layers of one scope (the root composition or one precomp).

    Owns its layers and indexes them by id. Ids are scoped per list, so two
    precomps may reuse the same id without interfering.
    Consumers get a read-only sequence; layers are only added while parsing.
    """

    def __init__(self, layers: Optional[List[Layer]] = None):
        self._layers: List[Layer] = []
        self._index: dict[int, Layer] = {}
        for layer in layers or []:
            self._append(layer)

    def _append(self, layer: Layer) -> bool:
        """Add a layer and index it; only the parser builds lists.

        Returns:
            False if another layer of this list already owns the id; the
            first registration stays in the index.
        """
        self._layers.append(layer)
        if layer.id in self._index:
            logger.debug(f"Duplicate layer id {layer.id} ({layer.name})")
            return False
        self._index[layer.id] = layer
        return True

    def by_id(self, layer_id: int) -> Optional[Layer]:
        return self._index.get(layer_id)

    def parent_of(self, layer: Layer) -> Optional[Layer]:
        """Resolve the parent; dangling ids count as no parent."""
        if layer.parent_id is None:
            return None
        parent = self._index.get(layer.parent_id)
        if parent is layer:
            return None
        return parent

    def parent_chain(self, layer: Layer) -> List[Layer]:
        """Parents from nearest to root, stopping at dangling ids or cycles."""
        chain: List[Layer] = []
        seen = {id(layer)}
        parent = self.parent_of(layer)
        while parent is not None and id(parent) not in seen:
            chain.append(parent)
            seen.add(id(parent))
            parent = self.parent_of(parent)
        return chain

    def __getitem__(self, index):
        return self._layers[index]

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers)

    def __contains__(self, layer: object) -> bool:
        return any(layer is existing for existing in self._layers)

    def __repr__(self) -> str:
        return f"LayerList({[layer.name for layer in self._layers]!r})"
