"""Composition, layer and asset model."""

from lottiekit.model.assets import Font, FontCharacter, ImageAsset
from lottiekit.model.composition import Composition, Rect, Version, WarningSet
from lottiekit.model.layer import (
    BlendMode,
    ImagePayload,
    Layer,
    LayerList,
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
)
from lottiekit.model.text import DocumentData, Justification

__all__ = [
    # Composition
    "Composition",
    "Rect",
    "Version",
    "WarningSet",
    # Layers
    "Layer",
    "LayerList",
    "LayerType",
    "LayerPayload",
    "BlendMode",
    "MatteType",
    "Mask",
    "MaskMode",
    "Transform",
    "ShapePayload",
    "ImagePayload",
    "SolidPayload",
    "NullPayload",
    "TextPayload",
    "PrecompPayload",
    "UnknownPayload",
    # Assets
    "ImageAsset",
    "Font",
    "FontCharacter",
    # Text
    "DocumentData",
    "Justification",
]
