"""Detection of "9:00 - 10:00" style time ranges in OCR text."""

import re
from dataclasses import dataclass
from typing import List, Optional

# Matches: 9:00 - 10:00, 09:00 AM - 10:00 PM, 9.00–10.00, 9.00a.m.—10.00p.m.
_AM_PM = r'(?:\s*(?:am|pm|a\.?m\.?|p\.?m\.?))?'
TIME_RANGE_RE = re.compile(
    r'(\d{1,2})[:.](\d{2})' + _AM_PM + r'\s*[-–—]\s*(\d{1,2})[:.](\d{2})' + _AM_PM,
    re.IGNORECASE,
)


@dataclass(frozen=True)
class TimeRangeMatch:
    """A time range found in a piece of text."""
    label: str
    raw: str
    start: int
    end: int


def _to_match(m: re.Match) -> TimeRangeMatch:
    # Hours lose any leading zero; minutes are kept as written. No 12/24h conversion.
    label = f"{int(m.group(1))}:{m.group(2)} - {int(m.group(3))}:{m.group(4)}"
    return TimeRangeMatch(label=label, raw=m.group(0), start=m.start(), end=m.end())


def find_time_ranges(text: str) -> List[TimeRangeMatch]:
    """
    Find all non-overlapping time ranges in text, left to right.

    Args:
        text: Arbitrary OCR text

    Returns:
        List of matches with normalized labels and character offsets
    """
    if not text:
        return []
    return [_to_match(m) for m in TIME_RANGE_RE.finditer(text)]


def first_time_range(text: str) -> Optional[TimeRangeMatch]:
    """Return the left-most time range in text, or None."""
    if not text:
        return None
    m = TIME_RANGE_RE.search(text)
    return _to_match(m) if m else None


def contains_time_range(text: str) -> bool:
    return bool(text) and TIME_RANGE_RE.search(text) is not None
