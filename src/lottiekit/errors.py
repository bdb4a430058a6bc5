"""
Exception hierarchy for lottiekit.

Fatal parse failures are raised as ParseError subclasses. Unsupported
versions and other advisory conditions are never raised; they are recorded
as composition warnings instead.
"""


class LottieError(Exception):
    """Base exception for all lottiekit errors."""
    pass


class ParseError(LottieError):
    """A composition could not be produced from the input."""
    pass


class SourceUnavailableError(ParseError):
    """The byte source could not be opened, read, or ended early."""
    pass


class MalformedSyntaxError(ParseError):
    """The input is not a structurally valid JSON document."""
    pass


class InvalidFieldError(ParseError):
    """A required field is missing or a known field has an invalid value.

    Attributes:
        path: JSON path of the offending field (e.g. "$.layers[2].ks.p")
    """

    def __init__(self, message: str, path: str = "$"):
        super().__init__(f"{message} (at {path})")
        self.path = path
