"""
Pull-style JSON token reader.

The parser walks a document with the same begin/has_next/next_* protocol as
a streaming JSON reader, one container at a time, so every parse state only
consumes the tokens it understands and skips the rest. Type mismatches on
known fields raise InvalidFieldError with the JSON path of the offending
value.
"""

from enum import Enum, auto
from typing import Any, IO, List, Union
import json
import logging
import math
import re

from lottiekit.errors import InvalidFieldError, MalformedSyntaxError, SourceUnavailableError

logger = logging.getLogger(__name__)


class JsonToken(Enum):
    BEGIN_ARRAY = auto()
    END_ARRAY = auto()
    BEGIN_OBJECT = auto()
    END_OBJECT = auto()
    NAME = auto()
    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    NULL = auto()
    END_DOCUMENT = auto()


def _token_of(value: Any) -> JsonToken:
    if isinstance(value, dict):
        return JsonToken.BEGIN_OBJECT
    if isinstance(value, list):
        return JsonToken.BEGIN_ARRAY
    if isinstance(value, str):
        return JsonToken.STRING
    if isinstance(value, bool):
        return JsonToken.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonToken.NUMBER
    return JsonToken.NULL


class _Scope:
    """One open container (or the document itself)."""

    __slots__ = ("token", "items", "index", "name_read")

    def __init__(self, token: JsonToken, items: List[Any]):
        self.token = token
        self.items = items
        self.index = 0
        self.name_read = False

    @property
    def exhausted(self) -> bool:
        return self.index >= len(self.items)

    def current_value(self) -> Any:
        item = self.items[self.index]
        if self.token is JsonToken.BEGIN_OBJECT:
            return item[1]
        return item

    def advance(self) -> None:
        self.index += 1
        self.name_read = False


class JsonReader:
    """Reads a decoded JSON document token by token."""

    def __init__(self, document: Any):
        self._stack: List[_Scope] = [_Scope(JsonToken.END_DOCUMENT, [document])]

    # Navigation

    @property
    def path(self) -> str:
        """JSON path of the current position, e.g. "$.layers[0].ks"."""
        parts = ["$"]
        for scope in self._stack[1:]:
            if scope.token is JsonToken.BEGIN_OBJECT:
                if not scope.exhausted and scope.name_read:
                    parts.append(f".{scope.items[scope.index][0]}")
            elif not scope.exhausted:
                parts.append(f"[{scope.index}]")
        return "".join(parts)

    def peek(self) -> JsonToken:
        scope = self._stack[-1]
        if scope.exhausted:
            if scope.token is JsonToken.BEGIN_OBJECT:
                return JsonToken.END_OBJECT
            if scope.token is JsonToken.BEGIN_ARRAY:
                return JsonToken.END_ARRAY
            return JsonToken.END_DOCUMENT
        if scope.token is JsonToken.BEGIN_OBJECT and not scope.name_read:
            return JsonToken.NAME
        return _token_of(scope.current_value())

    def peek_first_element(self) -> JsonToken:
        """Token of the first element of the array at the cursor."""
        self._expect(JsonToken.BEGIN_ARRAY)
        value = self._stack[-1].current_value()
        if not value:
            return JsonToken.END_ARRAY
        return _token_of(value[0])

    def peek_field(self, name: str) -> Any:
        """Look ahead at a scalar field of the object at the cursor.

        Used for discriminator fields such as a shape's "ty", which decide
        how the rest of the object has to be read.
        """
        self._expect(JsonToken.BEGIN_OBJECT)
        value = self._stack[-1].current_value().get(name)
        if isinstance(value, (dict, list)):
            return None
        return value

    def has_next(self) -> bool:
        return self.peek() not in (JsonToken.END_ARRAY, JsonToken.END_OBJECT, JsonToken.END_DOCUMENT)

    # The enclosing scope advances past a container only when it is closed

    def begin_object(self) -> None:
        value = self._take(JsonToken.BEGIN_OBJECT, advance=False)
        self._stack.append(_Scope(JsonToken.BEGIN_OBJECT, list(value.items())))

    def end_object(self) -> None:
        self._expect(JsonToken.END_OBJECT)
        self._stack.pop()
        self._stack[-1].advance()

    def begin_array(self) -> None:
        value = self._take(JsonToken.BEGIN_ARRAY, advance=False)
        self._stack.append(_Scope(JsonToken.BEGIN_ARRAY, value))

    def end_array(self) -> None:
        self._expect(JsonToken.END_ARRAY)
        self._stack.pop()
        self._stack[-1].advance()

    # Values

    def next_name(self) -> str:
        self._expect(JsonToken.NAME)
        scope = self._stack[-1]
        scope.name_read = True
        return scope.items[scope.index][0]

    def next_double(self) -> float:
        value = float(self._take(JsonToken.NUMBER, advance=False))
        if not math.isfinite(value):
            raise InvalidFieldError(f"Expected a finite number but was {value}", self.path)
        self._stack[-1].advance()
        return value

    def next_int(self) -> int:
        value = self._take(JsonToken.NUMBER, advance=False)
        if isinstance(value, float) and not value.is_integer():
            raise InvalidFieldError(f"Expected an int but was {value}", self.path)
        self._stack[-1].advance()
        return int(value)

    def next_string(self) -> str:
        token = self.peek()
        if token is JsonToken.NUMBER:
            value = self._take(JsonToken.NUMBER)
            return str(int(value)) if isinstance(value, float) and value.is_integer() else str(value)
        return self._take(JsonToken.STRING)

    def next_boolean(self) -> bool:
        return self._take(JsonToken.BOOLEAN)

    def next_flag(self) -> bool:
        """Booleans that exporters also write as 0/1."""
        if self.peek() is JsonToken.NUMBER:
            return self._take(JsonToken.NUMBER) != 0
        return self._take(JsonToken.BOOLEAN)

    def skip_value(self) -> None:
        """Skip the next value, whatever its type."""
        token = self.peek()
        if token in (JsonToken.END_ARRAY, JsonToken.END_OBJECT, JsonToken.END_DOCUMENT):
            raise InvalidFieldError(f"Expected a value but was {token.name}", self.path)
        if token is JsonToken.NAME:
            self.next_name()
        self._stack[-1].advance()

    # Internals

    def _expect(self, expected: JsonToken) -> None:
        token = self.peek()
        if token is not expected:
            raise InvalidFieldError(f"Expected {expected.name} but was {token.name}", self.path)

    def _take(self, expected: JsonToken, advance: bool = True) -> Any:
        self._expect(expected)
        scope = self._stack[-1]
        value = scope.current_value()
        if advance:
            scope.advance()
        return value


# A number cut off by the end of the stream
_PARTIAL_NUMBER = re.compile(r"-?\d*(\.\d*)?([eE][+-]?\d*)?")


def _is_truncated(text: str, error: json.JSONDecodeError) -> bool:
    """Whether decoding failed only because the text stops early."""
    rest = text[error.pos:].strip()
    if error.msg == "Extra data":
        return False
    if not rest or error.msg.startswith("Unterminated string"):
        return True
    if any(keyword.startswith(rest) for keyword in ("true", "false", "null")):
        return True
    return _PARTIAL_NUMBER.fullmatch(rest) is not None


def _reject_constant(name: str) -> Any:
    raise MalformedSyntaxError(f"{name} is not a valid JSON number")


def decode(text: Union[str, bytes]) -> Any:
    """Decode a JSON document, mapping failures onto parse errors."""
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            if e.reason == "unexpected end of data":
                raise SourceUnavailableError(
                    "Stream ended in the middle of a character"
                ) from e
            raise MalformedSyntaxError(f"Composition is not valid UTF-8: {e}") from e
    else:
        text = text.lstrip("\ufeff")

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        if _is_truncated(text, e):
            raise SourceUnavailableError(
                f"Stream ended before the document was complete ({e.msg})"
            ) from e
        raise MalformedSyntaxError(
            f"Unable to parse JSON: {e.msg} (line {e.lineno}, column {e.colno})"
        ) from e


def read_stream(stream: IO[Any]) -> Any:
    """Read a whole stream and decode it."""
    try:
        raw = stream.read()
    except OSError as e:
        raise SourceUnavailableError(f"Unable to read composition stream: {e}") from e
    logger.debug(f"Read {len(raw)} bytes of composition data")
    return decode(raw)


def open_reader(stream: IO[Any]) -> JsonReader:
    return JsonReader(read_stream(stream))
