"""
Composition parser.

Entry points turn a JSON document (stream, text or already decoded data)
into a Composition, or raise a ParseError subclass. No partial composition
is ever returned.
"""

from typing import IO, Any, Optional, Union
import logging

from lottiekit.config.settings import Settings, get_settings
from lottiekit.model.composition import Composition
from lottiekit.parser.composition import CompositionParser, parse_version
from lottiekit.parser.reader import JsonReader, JsonToken, decode, read_stream

logger = logging.getLogger(__name__)


def _resolve_scale(scale: Optional[float], settings: Settings) -> float:
    return settings.parser.default_scale if scale is None else scale


def parse_document(
    document: Any,
    scale: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> Composition:
    """Parse an already decoded JSON document."""
    settings = settings or get_settings()
    parser = CompositionParser(_resolve_scale(scale, settings), settings)
    return parser.parse(JsonReader(document))


def parse_string(
    text: Union[str, bytes],
    scale: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> Composition:
    """Parse a JSON document held in memory."""
    return parse_document(decode(text), scale, settings)


def parse(
    stream: IO[Any],
    scale: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> Composition:
    """Parse a composition from a readable text or binary stream.

    Args:
        stream: Open file-like object; it is read to the end but not closed
        scale: Density scale for spatial values; None uses the configured default

    Raises:
        SourceUnavailableError: The stream could not be read or ended early
        MalformedSyntaxError: The data is not valid JSON
        InvalidFieldError: A required field is missing or has the wrong type
    """
    return parse_document(read_stream(stream), scale, settings)


__all__ = [
    "CompositionParser",
    "JsonReader",
    "JsonToken",
    "parse",
    "parse_document",
    "parse_string",
    "parse_version",
]
