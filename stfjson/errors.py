"""
Error types for stfjson.

Every fatal condition raised while converting an STF export derives from
STFError so callers can abort the whole conversion with one except clause.
An empty tag is not an error: the lexer logs a warning and carries on.
"""

from typing import Optional


class STFError(Exception):
    """Base class for all fatal conversion errors."""


class UnexpectedTagError(STFError):
    """A tag appeared that is not valid in the current builder state."""

    def __init__(self, state: str, tag: str, offset: Optional[int] = None):
        self.state = state
        self.tag = tag
        self.offset = offset
        location = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"[{state}] unexpected tag {{{tag}}} here{location}")


class InvalidLinkSyntaxError(STFError):
    """A category link is too short, unclassifiable or has no name."""


class DateParseError(STFError):
    """A header or category date could not be parsed with its format."""


class InvalidDateFormatError(STFError):
    """A date format selector outside the range 1-12 was requested."""


class LookaheadMismatchError(STFError):
    """An inline lookahead read did not find the tag it requires."""
