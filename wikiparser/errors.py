"""Exception hierarchy for wikiparser."""

from __future__ import annotations


class WikiParserError(Exception):
    """Base class for all wikiparser errors."""


class MalformedLineError(WikiParserError):
    """A line opened a markup construct it never closed.

    Carries the 1-based physical line number so callers can point at the
    offending line even though records themselves have no position.
    """

    def __init__(self, line: str, reason: str, line_no: int | None = None) -> None:
        self.line = line
        self.reason = reason
        self.line_no = line_no
        where = f"line {line_no}" if line_no is not None else "line"
        super().__init__(f"{where}: {reason}: {line!r}")

    def at(self, line_no: int) -> MalformedLineError:
        """Return a copy of this error bound to *line_no*."""
        return type(self)(self.line, self.reason, line_no)


class MalformedHeadingError(MalformedLineError):
    """Heading without a closing ``=`` run of the same length."""


class UnterminatedLinkError(MalformedLineError):
    """``[[`` or ``[`` line with no well-formed closing bracket."""


class RecordError(WikiParserError):
    """A serialized record could not be turned back into a ContentRecord."""


class SerializationError(WikiParserError):
    """Encoding or decoding the record list failed."""
