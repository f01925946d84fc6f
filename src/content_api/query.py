"""Query serializer for Strapi-style REST parameters.

Turns a nested parameter mapping into a bracket-encoded query string:

    {"filters": {"slug": {"$eq": "hello"}}}   -> filters[slug][$eq]=hello
    {"sort": ["publishedAt:desc"]}             -> sort[]=publishedAt:desc
    {"populate": {"seo": {"fields": ["a"]}}}   -> populate[seo][fields][]=a

Keys stay readable (brackets are not escaped); only values are
percent-encoded. Output is a pure function of the input.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Iterator
from urllib.parse import quote

from .exceptions import QuerySerializationError

ARRAY_FORMATS = ("brackets", "indices")

# Left unescaped in values so common parameters stay readable
VALUE_SAFE_CHARS = "*:,"


def serialize_query(config: Mapping[str, Any], *, array_format: str = "brackets") -> str:
    """Serialize a query configuration to a bracket-encoded string.

    Args:
        config: Nested mapping of scalars, sequences and sub-mappings.
            Option names are not validated.
        array_format: "brackets" (``a[]=x``) or "indices" (``a[0]=x``).

    Returns:
        Query string without a leading "?".

    Raises:
        QuerySerializationError: If the input contains a reference cycle
            or array_format is unknown.
    """
    if array_format not in ARRAY_FORMATS:
        raise QuerySerializationError(f"Unknown array format: {array_format!r}")

    pairs: list[str] = []
    for key, value in config.items():
        pairs.extend(_encode(str(key), value, array_format, frozenset()))
    return "&".join(pairs)


def _encode(prefix: str, value: Any, array_format: str, seen: frozenset[int]) -> Iterator[str]:
    if isinstance(value, Mapping):
        seen = _enter(value, prefix, seen)
        for key, child in value.items():
            yield from _encode(f"{prefix}[{key}]", child, array_format, seen)
        return

    if isinstance(value, (list, tuple, set, frozenset)):
        seen = _enter(value, prefix, seen)
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        for index, child in enumerate(items):
            suffix = "[]" if array_format == "brackets" else f"[{index}]"
            yield from _encode(f"{prefix}{suffix}", child, array_format, seen)
        return

    yield f"{prefix}={quote(_scalar(value), safe=VALUE_SAFE_CHARS)}"


def _enter(container: Any, prefix: str, seen: frozenset[int]) -> frozenset[int]:
    """Track containers on the current path; a repeat means a cycle."""
    marker = id(container)
    if marker in seen:
        raise QuerySerializationError(f"Cyclic structure in query parameters at {prefix!r}")
    return seen | {marker}


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)
