"""Composite key parsing and formatting.

The content service stores items under partition/sort keys that pack several
logical fields into one ``#``-delimited string, e.g. ``NEWS#2025-05-28#0001``
or ``ARTICLE#0001``.  All key handling goes through this module.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DELIMITER = "#"

NEWS_PREFIX = "NEWS"
ARTICLE_PREFIX = "ARTICLE"
PLAYLIST_PREFIX = "PLAYLIST"

_ARTICLE_ID_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})-([^-#]+)$")


@dataclass(frozen=True)
class CompositeKey:
    """A parsed composite key: a type prefix followed by one or more parts."""

    prefix: str
    parts: tuple[str, ...]

    def __str__(self) -> str:
        return format_composite_key(self.prefix, *self.parts)


def format_composite_key(prefix: str, *parts: str) -> str:
    """Join *prefix* and *parts* into a composite key string."""
    if not prefix or DELIMITER in prefix:
        raise ValueError(f"Invalid key prefix: {prefix!r}")
    if not parts:
        raise ValueError("A composite key needs at least one part")
    for part in parts:
        if not part or DELIMITER in part:
            raise ValueError(f"Invalid key part: {part!r}")
    return DELIMITER.join((prefix, *parts))


def parse_composite_key(value: str, expected_prefix: str | None = None) -> CompositeKey:
    """Split a composite key string.

    Raises ``ValueError`` when the value is empty, has no parts, contains an
    empty segment, or does not carry *expected_prefix*.
    """
    if not isinstance(value, str) or DELIMITER not in value:
        raise ValueError(f"Not a composite key: {value!r}")
    prefix, *parts = value.split(DELIMITER)
    if not prefix or not parts or any(not p for p in parts):
        raise ValueError(f"Malformed composite key: {value!r}")
    if expected_prefix is not None and prefix != expected_prefix:
        raise ValueError(f"Expected {expected_prefix} key, got {value!r}")
    return CompositeKey(prefix=prefix, parts=tuple(parts))


# ---------------------------------------------------------------------------
# Article keys
# ---------------------------------------------------------------------------


def article_keys(article_id: str) -> tuple[str, str]:
    """Return ``(PK, SK)`` for an article id of the form ``YYYY-MM-DD-NNNN``."""
    match = _ARTICLE_ID_RE.match(article_id or "")
    if not match:
        raise ValueError(f"Malformed article id: {article_id!r}")
    date_str, seq = match.groups()
    return (
        format_composite_key(NEWS_PREFIX, date_str, seq),
        format_composite_key(ARTICLE_PREFIX, seq),
    )


def article_id_from_pk(pk: str) -> str:
    """``NEWS#2025-05-28#0001`` -> ``2025-05-28-0001``."""
    key = parse_composite_key(pk, NEWS_PREFIX)
    if len(key.parts) != 2:
        raise ValueError(f"Malformed article key: {pk!r}")
    date_str, seq = key.parts
    return f"{date_str}-{seq}"


def playlist_id_from_pk(pk: str) -> str:
    """``PLAYLIST#PLxyz`` -> ``PLxyz``."""
    key = parse_composite_key(pk, PLAYLIST_PREFIX)
    return key.parts[0]
