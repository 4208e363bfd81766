"""Scalar coercion for spreadsheet cells.

Every reader here is total: it accepts whatever a cell holds (a string, an
empty string, ``None`` for a missing cell, or an already-typed value coming
from a JSON record) and returns a usable value. Malformed input falls back to
the default passed by the caller instead of raising.

Writers go the other way and always return a string, so an encoded row is a
plain list of strings.
"""

from __future__ import annotations

import json
import re
import uuid
from datetime import datetime, timezone
from typing import Any

LIST_DELIMITER = "; "

# Leading integer, like a spreadsheet's lenient number parsing ("12 pts" -> 12)
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def new_id() -> str:
    return str(uuid.uuid4())


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def current_year() -> int:
    return datetime.now().year


# --- readers ---------------------------------------------------------------


def as_text(value: Any, default: str = "") -> str:
    """Required text: the cell as-is, or ``default`` when empty or missing."""
    if value is None or value == "":
        return default
    return value if isinstance(value, str) else str(value)


def as_optional_text(value: Any) -> str | None:
    """Trimmed text, or None when nothing but whitespace is left."""
    if value is None:
        return None
    trimmed = (value if isinstance(value, str) else str(value)).strip()
    return trimmed or None


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if not value or not isinstance(value, str):
        return default
    match = _INT_PREFIX.match(value)
    if not match:
        return default
    return int(match.group(1))


def as_bool(value: Any) -> bool:
    """True only for the literal ``"true"`` (or an actual True)."""
    if isinstance(value, bool):
        return value
    return value == "true"


def as_json(value: Any) -> Any:
    """Parse a JSON cell. Returns None for empty or unparseable cells."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return None


def as_list(value: Any) -> list:
    """Parse a JSON array cell. Anything that is not an array becomes []."""
    if isinstance(value, list):
        return list(value)
    parsed = as_json(value)
    return parsed if isinstance(parsed, list) else []


def as_delimited(value: Any, delimiter: str = LIST_DELIMITER) -> list[str]:
    """Split a ``"a; b; c"`` cell into its non-empty parts."""
    if isinstance(value, list):
        return [str(v) for v in value if v]
    if not value or not isinstance(value, str):
        return []
    return [part for part in value.split(delimiter) if part]


def as_identifier(value: Any) -> str:
    """An identifier cell; a blank one gets a freshly generated id."""
    return as_optional_text(value) or new_id()


def as_timestamp(value: Any) -> str:
    """A timestamp cell; a blank one gets the current time."""
    return as_optional_text(value) or now_iso()


# --- writers ---------------------------------------------------------------


def text_cell(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def int_cell(value: int | None) -> str:
    return "" if value is None else str(value)


def bool_cell(value: bool | None) -> str:
    return "true" if value else "false"


def json_cell(value: Any) -> str:
    if value is None:
        return ""
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return ""


def delimited_cell(values: list[str] | None, delimiter: str = LIST_DELIMITER) -> str:
    if not values:
        return ""
    return delimiter.join(str(v) for v in values)
