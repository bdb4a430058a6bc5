"""
lottiekit - Lottie / Bodymovin composition parser.

Parses After Effects exports into an immutable Composition model whose
animatable properties can be sampled at any frame.
"""

import logging

from lottiekit.errors import (
    InvalidFieldError,
    LottieError,
    MalformedSyntaxError,
    ParseError,
    SourceUnavailableError,
)
from lottiekit.loader import (
    ByteSource,
    BytesSource,
    FileSource,
    LoadResult,
    LoadTask,
    load,
    load_async,
    load_composition,
)
from lottiekit.model import Composition, Layer, LayerList, LayerType
from lottiekit.parser import parse, parse_string

__version__ = "0.1.0"


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


__all__ = [
    # Parsing
    "parse",
    "parse_string",
    # Loading
    "ByteSource",
    "BytesSource",
    "FileSource",
    "LoadResult",
    "LoadTask",
    "load",
    "load_async",
    "load_composition",
    # Model
    "Composition",
    "Layer",
    "LayerList",
    "LayerType",
    # Errors
    "LottieError",
    "ParseError",
    "SourceUnavailableError",
    "MalformedSyntaxError",
    "InvalidFieldError",
    # Logging
    "setup_logging",
]
