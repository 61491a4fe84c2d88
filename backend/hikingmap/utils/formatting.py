"""Helpers for turning GeoJSON property values into text.

The converters share two rules: the ``time`` property is parsed and
rendered as a calendar date, and every other value is rendered as plain
text the way a JavaScript front end would print it (``null`` as an empty
string, booleans in lower case, objects as compact JSON).
"""

from __future__ import annotations

import datetime
import json
import re
from typing import Any

_SLASH_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
)

_XML_NAME_INVALID = re.compile(r"[^\w.\-]")


def parse_time(value: Any) -> datetime.datetime | None:
    """Coerce a ``time`` property value into a datetime.

    Accepted inputs are datetimes, dates, ISO-8601 strings (a trailing
    ``Z`` included), ``YYYY/MM/DD`` strings with optional time of day, and
    numbers holding epoch milliseconds.

    Args:
        value: Raw property value.

    Returns:
        The parsed datetime, or None when the value cannot be interpreted.
    """
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            return datetime.datetime.fromtimestamp(value / 1000, tz=datetime.UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        return datetime.datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _SLASH_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def format_cjk_date(moment: datetime.datetime) -> str:
    """Render a date as ``{year}年{month}月{day}日`` without zero padding."""
    return f"{moment.year}年{moment.month}月{moment.day}日"


def format_slash_date(moment: datetime.datetime) -> str:
    """Render the UTC calendar date of a moment as ``YYYY/MM/DD``.

    Naive datetimes are taken to be UTC already.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(datetime.UTC)
    return moment.strftime("%Y/%m/%d")


def stringify(value: Any) -> str:
    """Render a property value as text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict | list):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def xml_element_name(key: str) -> str:
    """Make a property key usable as an XML element name.

    Characters outside letters, digits, ``_``, ``-`` and ``.`` become
    underscores; names that would start with a digit, ``-`` or ``.`` (or
    are empty) get a leading underscore.
    """
    name = _XML_NAME_INVALID.sub("_", key)
    if not name or not (name[0].isalpha() or name[0] == "_"):
        name = f"_{name}"
    return name
