"""HTTP value formatting and URL utilities."""

from __future__ import annotations

import datetime
import enum
from collections.abc import Iterable
from decimal import Decimal
from typing import Any
from urllib.parse import quote, urlencode


def format_value(value: Any) -> str:
    """Stringify a path/query/header value, independent of locale.

    Booleans become ``true``/``false``, enums their value, dates and times
    ISO 8601. Everything else goes through ``str``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return format_value(value.value)
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def is_sequence_value(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def quote_path_segment(value: Any) -> str:
    """Percent-encode a value for use inside a single path segment."""
    return quote(format_value(value), safe="")


def build_url(base_url: str, target: str, query: Iterable[tuple[str, str]] = ()) -> str:
    """Join a base URL, a request target and query pairs.

    The target may already carry a static query string, in which case the
    pairs are appended with ``&``.
    """
    url = base_url.rstrip("/")
    if target:
        url += target if target.startswith("/") else "/" + target
    pairs = list(query)
    if pairs:
        url += ("&" if "?" in target else "?") + urlencode(pairs)
    return url
