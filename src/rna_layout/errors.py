from __future__ import annotations
from typing import Optional


class RNALayoutError(ValueError):
    """
    Base class for every error raised by the layout package.

    Subclasses `ValueError` so callers that only guard against bad input
    values keep working without importing this module.
    """


class DotBracketParseError(RNALayoutError):
    """
    Raised when a dot-bracket string has an unbalanced bracket.

    Attributes
    ----------
    position : int
        0-based index of the offending character.
    char : str
        The bracket character that could not be matched.
    """
    def __init__(self, message: str, position: int, char: str):
        super().__init__(message)
        self.position = position
        self.char = char


class DelimiterCapacityError(RNALayoutError):
    """Raised when a structure needs more bracket classes than `()[]{}<>` provide."""


class LayoutStructureError(RNALayoutError):
    """
    Raised when a pairing array is internally inconsistent during tree construction.

    This signals a bug in the caller's pairing data (a span that runs backwards,
    or a partner that points outside its enclosing span), not a user input problem.
    """
    def __init__(self, message: str, start: Optional[int] = None, end: Optional[int] = None):
        super().__init__(message)
        self.start = start
        self.end = end


class InvalidBaseError(RNALayoutError):
    """Raised when a base character or code falls in a category the caller disallowed."""


class LayoutConfigError(RNALayoutError):
    """Raised for invalid layout configuration values or files."""
