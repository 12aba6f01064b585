"""Content records produced by the line parser.

One frozen dataclass per content kind, each carrying only the fields that
kind uses. ``to_dict()`` gives the serialized form: a ``type`` tag plus the
non-empty fields (empty strings are omitted, never emitted as null).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from wikiparser.errors import RecordError

DEFAULT_LINK_ROOT = "/page/"


def _omit_empty(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v != ""}


@dataclass(frozen=True)
class Heading:
    """``== Title ==`` line. ``level`` is the length of the ``=`` run."""

    kind: ClassVar[str] = "heading"

    level: int
    text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _omit_empty({"type": "heading", "level": self.level, "text": self.text})


@dataclass(frozen=True)
class Bold:
    kind: ClassVar[str] = "bold"

    text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _omit_empty({"type": "bold", "text": self.text})


@dataclass(frozen=True)
class Italic:
    kind: ClassVar[str] = "italic"

    text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _omit_empty({"type": "italic", "text": self.text})


@dataclass(frozen=True)
class InternalLink:
    """``[[Page]]`` reference to another page of the same wiki."""

    kind: ClassVar[str] = "internal_link"

    title: str
    url: str

    def to_dict(self) -> dict[str, Any]:
        return _omit_empty({"type": "link", "title": self.title, "url": self.url})


@dataclass(frozen=True)
class ExternalLink:
    """``[http://...]`` reference. There is no label syntax, so title == url."""

    kind: ClassVar[str] = "external_link"

    title: str
    url: str

    def to_dict(self) -> dict[str, Any]:
        return _omit_empty({"type": "link", "title": self.title, "url": self.url})


@dataclass(frozen=True)
class Paragraph:
    kind: ClassVar[str] = "paragraph"

    text: str

    def to_dict(self) -> dict[str, Any]:
        return _omit_empty({"type": "paragraph", "text": self.text})


ContentRecord = Union[Heading, Bold, Italic, InternalLink, ExternalLink, Paragraph]

KINDS: tuple[str, ...] = (
    Heading.kind,
    Bold.kind,
    Italic.kind,
    InternalLink.kind,
    ExternalLink.kind,
    Paragraph.kind,
)


def _str_field(data: dict[str, Any], key: str) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise RecordError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def record_from_dict(data: Any, link_root: str = DEFAULT_LINK_ROOT) -> ContentRecord:
    """Rebuild a record from its ``to_dict()`` form.

    Missing fields read as empty. Both link kinds serialize as ``type: link``;
    a link whose url is ``link_root + title`` is internal, anything else is
    external.
    """
    if not isinstance(data, dict):
        raise RecordError(f"Record must be a mapping, got {type(data).__name__}")

    rtype = data.get("type")
    if rtype == "heading":
        level = data.get("level")
        # bool is an int subclass
        if not isinstance(level, int) or isinstance(level, bool) or level < 1:
            raise RecordError(f"Heading 'level' must be a positive integer, got {level!r}")
        return Heading(level=level, text=_str_field(data, "text"))
    if rtype == "bold":
        return Bold(text=_str_field(data, "text"))
    if rtype == "italic":
        return Italic(text=_str_field(data, "text"))
    if rtype == "paragraph":
        return Paragraph(text=_str_field(data, "text"))
    if rtype == "link":
        title = _str_field(data, "title")
        url = _str_field(data, "url")
        if url == f"{link_root}{title}":
            return InternalLink(title=title, url=url)
        return ExternalLink(title=title, url=url)

    raise RecordError(f"Unknown record type: {rtype!r}")
