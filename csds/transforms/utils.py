"""Common utilities for row transformation."""

import math
import re
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Iterable, List, Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_INTEGER = re.compile(r"^[+-]?\d+$")
_NUMERIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# Range of the Int64 timestamp_share column
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Tried in order after ISO 8601 parsing fails
_DATETIME_FORMATS = [
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%d %H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S %Z",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y",
    "%d %b %Y %H:%M:%S",
    "%d %b %Y",
    "%b %d, %Y %H:%M:%S",
    "%b %d, %Y",
    "%B %d, %Y",
]


def clean_text(value: Any) -> str:
    """Render a raw cell as trimmed text; missing cells become ''."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def _to_datetime_py(text: str) -> Optional[datetime]:
    """Best-effort parser for date/time cells exported by social platforms."""
    s = text.strip()
    if not s:
        return None
    iso = s[:-1] + "+00:00" if s.endswith(("Z", "z")) else s
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass
    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    # RFC 2822, e.g. "Sat, 01 May 2021 00:00:00 GMT"
    try:
        return parsedate_to_datetime(s)
    except (TypeError, ValueError, IndexError):
        return None


def parse_timestamp(value: Any) -> Optional[int]:
    """Convert a raw timestamp cell to whole seconds since the UNIX epoch.

    Numeric values are taken as epoch seconds already. Anything else is parsed
    as a calendar date/time; naive values are read as UTC. Returns None when
    the value cannot be interpreted or falls outside the Int64 range.
    """
    seconds = _to_epoch_seconds(value)
    if seconds is None or not INT64_MIN <= seconds <= INT64_MAX:
        return None
    return seconds


def _to_epoch_seconds(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return math.floor(value) if math.isfinite(value) else None

    s = str(value).strip()
    if not s:
        return None
    if _INTEGER.match(s):
        return int(s)
    if _NUMERIC.match(s):
        number = float(s)
        return math.floor(number) if math.isfinite(number) else None

    dt = _to_datetime_py(s)
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH) // timedelta(seconds=1)


def build_rename_map(columns: Iterable[str], expected: Iterable[str]) -> Dict[str, str]:
    """Map actual column names to the exact spelling a transformer reads.

    Matching is case-insensitive and ignores surrounding whitespace and a
    UTF-8 BOM. Columns already spelled correctly are left alone, as is any
    expected name that is present verbatim.
    """
    actual: List[str] = list(columns)
    present = set(actual)
    rename: Dict[str, str] = {}
    for want in expected:
        if want in present:
            continue
        key = want.lower()
        for col in actual:
            if col in rename:
                continue
            if col.lstrip("\ufeff").strip().lower() == key:
                rename[col] = want
                break
    return rename
