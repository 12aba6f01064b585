"""Wiki markup to JSON content records.

Main entry point: ``parse()`` turns a markup document into an ordered list of
records, one per non-blank line; ``to_json()`` encodes that list.
"""

from wikiparser.errors import (
    MalformedHeadingError,
    MalformedLineError,
    RecordError,
    SerializationError,
    UnterminatedLinkError,
    WikiParserError,
)
from wikiparser.parse import classify, parse, parse_line, split_lines
from wikiparser.records import (
    Bold,
    ContentRecord,
    ExternalLink,
    Heading,
    InternalLink,
    Italic,
    Paragraph,
    record_from_dict,
)
from wikiparser.serialize import from_json, to_json

__all__ = [
    "Bold",
    "ContentRecord",
    "ExternalLink",
    "Heading",
    "InternalLink",
    "Italic",
    "MalformedHeadingError",
    "MalformedLineError",
    "Paragraph",
    "RecordError",
    "SerializationError",
    "UnterminatedLinkError",
    "WikiParserError",
    "classify",
    "from_json",
    "parse",
    "parse_line",
    "record_from_dict",
    "split_lines",
    "to_json",
]
