"""Line-oriented wiki markup parser.

Each non-blank line is classified by its leading characters into exactly one
content kind and handed to that kind's extractor. Inline markup in the middle
of a line is not resolved (the one exception being an ``[http...]`` span,
which makes the line an external link); the line is the unit of
classification.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor

from wikiparser.errors import MalformedHeadingError, MalformedLineError, UnterminatedLinkError
from wikiparser.records import (
    DEFAULT_LINK_ROOT,
    Bold,
    ContentRecord,
    ExternalLink,
    Heading,
    InternalLink,
    Italic,
    Paragraph,
)

log = logging.getLogger(__name__)

ON_MALFORMED_CHOICES = ("paragraph", "error")

# Ordered, first match wins. A prefix must come before any shorter prefix it
# extends: ''' before '' and [[ before [.
PREFIX_RULES: tuple[tuple[str, str], ...] = (
    ("=", Heading.kind),
    ("'''", Bold.kind),
    ("''", Italic.kind),
    ("[[", InternalLink.kind),
    ("[", ExternalLink.kind),
)

# Matches "== Title ==": the whole leading run of "=", then the same run
# closing the line. Lookarounds stop the run from splitting ("==x=" is not level 1).
HEADING_RE = re.compile(r"^(=+)(?!=)\s*(.*?)\s*(?<!=)\1$")

# Matches the first '''bold''' span
BOLD_RE = re.compile(r"'''(.*?)'''")

# Matches the first ''italic'' span
ITALIC_RE = re.compile(r"''(.*?)''")

# Matches [[Page Title]]; the title may not contain "]"
INTERNAL_LINK_RE = re.compile(r"\[\[([^\]]+)\]\]")

# Matches [http...] with no whitespace inside the brackets
EXTERNAL_LINK_RE = re.compile(r"\[(http[^\s\]]*)\]")

# Only these count as line breaks; str.splitlines() also breaks on \x0c, \u2028, etc.
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _physical_lines(text: str) -> list[str]:
    if not text:
        return []
    return LINE_BREAK_RE.split(text)


def iter_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_no, line)`` for every non-blank line of *text*.

    Lines are stripped; ``line_no`` is 1-based and counts blank lines too.
    """
    for i, raw in enumerate(_physical_lines(text), start=1):
        line = raw.strip()
        if line:
            yield i, line


def split_lines(text: str) -> list[str]:
    """Split *text* into stripped, non-blank lines in original order."""
    return [line for _, line in iter_lines(text)]


def classify(line: str) -> str:
    """Return the content kind of a stripped, non-blank line."""
    for prefix, kind in PREFIX_RULES:
        if line.startswith(prefix):
            return kind
    # External links are also picked up mid-line: "visit [https://golang.org]."
    if EXTERNAL_LINK_RE.search(line):
        return ExternalLink.kind
    return Paragraph.kind


def extract_heading(line: str) -> Heading:
    """Extract level and text from a ``= Title =`` line.

    Raises MalformedHeadingError when the closing run is missing or has a
    different length than the opening one.
    """
    m = HEADING_RE.match(line)
    if not m:
        raise MalformedHeadingError(line, "heading has no matching closing '=' run")
    return Heading(level=len(m.group(1)), text=m.group(2).strip())


def extract_bold(line: str) -> Bold:
    """Text of the first '''...''' span; empty when the span is never closed."""
    m = BOLD_RE.search(line)
    return Bold(text=m.group(1) if m else "")


def extract_italic(line: str) -> Italic:
    """Text of the first ''...'' span; empty when the span is never closed."""
    m = ITALIC_RE.search(line)
    return Italic(text=m.group(1) if m else "")


def extract_internal_link(line: str, link_root: str = DEFAULT_LINK_ROOT) -> InternalLink:
    m = INTERNAL_LINK_RE.search(line)
    if not m:
        raise UnterminatedLinkError(line, "internal link has no closing ']]'")
    title = m.group(1)
    return InternalLink(title=title, url=f"{link_root}{title}")


def extract_external_link(line: str) -> ExternalLink:
    m = EXTERNAL_LINK_RE.search(line)
    if not m:
        raise UnterminatedLinkError(line, "external link has no '[http...]' target")
    url = m.group(1)
    return ExternalLink(title=url, url=url)


def extract_paragraph(line: str) -> Paragraph:
    return Paragraph(text=line)


def _extractors(link_root: str) -> dict[str, Callable[[str], ContentRecord]]:
    return {
        Heading.kind: extract_heading,
        Bold.kind: extract_bold,
        Italic.kind: extract_italic,
        InternalLink.kind: lambda line: extract_internal_link(line, link_root),
        ExternalLink.kind: extract_external_link,
        Paragraph.kind: extract_paragraph,
    }


def _check_policy(on_malformed: str) -> None:
    if on_malformed not in ON_MALFORMED_CHOICES:
        raise ValueError(
            f"on_malformed must be one of {ON_MALFORMED_CHOICES}, got {on_malformed!r}"
        )


def _parse_with(
    line: str,
    extractors: dict[str, Callable[[str], ContentRecord]],
    on_malformed: str,
    line_no: int | None,
) -> ContentRecord:
    extract = extractors[classify(line)]
    try:
        return extract(line)
    except MalformedLineError as exc:
        if on_malformed == "error":
            if line_no is None:
                raise
            raise exc.at(line_no) from None
        log.warning(
            "Line %s: %s; keeping as paragraph",
            line_no if line_no is not None else "?",
            exc.reason,
        )
        return Paragraph(text=line)


def parse_line(
    line: str,
    *,
    link_root: str = DEFAULT_LINK_ROOT,
    on_malformed: str = "paragraph",
    line_no: int | None = None,
) -> ContentRecord:
    """Classify and extract a single stripped, non-blank line.

    With ``on_malformed="paragraph"`` a heading or link that cannot be
    extracted is kept as a Paragraph holding the whole line. With
    ``on_malformed="error"`` the MalformedLineError is raised, tagged with
    *line_no*.
    """
    _check_policy(on_malformed)
    return _parse_with(line, _extractors(link_root), on_malformed, line_no)


def parse(
    text: str,
    *,
    link_root: str = DEFAULT_LINK_ROOT,
    on_malformed: str = "paragraph",
    workers: int = 1,
) -> list[ContentRecord]:
    """Parse a wiki markup document into one record per non-blank line.

    Records come back in input order. Adjacent records of the same kind are
    never merged. ``workers > 1`` parses lines on a thread pool; the first
    malformed line in input order is the one raised under
    ``on_malformed="error"``.
    """
    _check_policy(on_malformed)
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    extractors = _extractors(link_root)
    numbered = list(iter_lines(text))

    def _one(item: tuple[int, str]) -> ContentRecord:
        line_no, line = item
        return _parse_with(line, extractors, on_malformed, line_no)

    if workers == 1 or len(numbered) < 2:
        records = [_one(item) for item in numbered]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            records = list(pool.map(_one, numbered))

    log.debug("Parsed %d records from %d lines", len(records), len(_physical_lines(text)))
    return records
