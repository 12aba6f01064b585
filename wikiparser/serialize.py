"""JSON encoding and decoding of record lists."""

from __future__ import annotations

import json
from collections.abc import Iterable

from wikiparser.errors import SerializationError
from wikiparser.records import DEFAULT_LINK_ROOT, ContentRecord, record_from_dict


def to_dicts(records: Iterable[ContentRecord]) -> list[dict]:
    return [r.to_dict() for r in records]


def to_json(
    records: Iterable[ContentRecord],
    *,
    indent: int | None = 2,
    ensure_ascii: bool = False,
) -> str:
    """Encode *records* as a JSON array.

    Any encoder failure is terminal for the whole document and surfaces as
    SerializationError.
    """
    try:
        return json.dumps(to_dicts(records), indent=indent, ensure_ascii=ensure_ascii)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Could not encode records as JSON: {exc}") from exc


def from_json(payload: str, *, link_root: str = DEFAULT_LINK_ROOT) -> list[ContentRecord]:
    """Decode a JSON array produced by :func:`to_json` back into records."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Invalid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise SerializationError(f"Expected a JSON array, got {type(data).__name__}")
    return [record_from_dict(item, link_root=link_root) for item in data]
