"""Day-name normalization and detection of the days a timetable covers."""

import logging
import re
from typing import Iterable, List, Optional

from .models import OcrResult, Weekday

logger = logging.getLogger(__name__)

CANONICAL_DAYS = Weekday.names()

DAY_ALIASES = {
    'mon': 'monday', 'monday': 'monday',
    'tue': 'tuesday', 'tues': 'tuesday', 'tuesday': 'tuesday',
    'wed': 'wednesday', 'weds': 'wednesday', 'wednesday': 'wednesday',
    'thu': 'thursday', 'thur': 'thursday', 'thurs': 'thursday', 'thursday': 'thursday',
    'fri': 'friday', 'friday': 'friday',
    'sat': 'saturday', 'saturday': 'saturday',
    'sun': 'sunday', 'sunday': 'sunday',
}

# Every token that names a day, full or abbreviated
DAY_TOKENS = tuple(DAY_ALIASES)

# Lenient patterns to catch common OCR misreads (0/o, 3/e, 1/l/i, @/a, v/u)
FUZZY_DAY_PATTERNS = [
    (re.compile(r'm[o0]nday|m[o0]nd[a@]y|m[o0][nm]day'), 'monday'),
    (re.compile(r'tu[e3]sday|tu[e3]sd[a@]y|t[uv][e3]sday'), 'tuesday'),
    (re.compile(r'w[e3]dn[e3]sday|w[e3]dn[e3]sd[a@]y'), 'wednesday'),
    (re.compile(r'thursday|thursd[a@]y|th[uv]rsday'), 'thursday'),
    (re.compile(r'friday|frid[a@]y|fr[i1l]day|fr[i1]d[a@]y'), 'friday'),
    (re.compile(r'saturday|saturd[a@]y|s[a@]turday'), 'saturday'),
    (re.compile(r'sunday|sund[a@]y|s[uv]nday'), 'sunday'),
    # Abbreviations only count as whole words
    (re.compile(r'\bm[o0]n\b'), 'monday'),
    (re.compile(r'\btu[e3]s?\b'), 'tuesday'),
    (re.compile(r'\bw[e3]ds?\b'), 'wednesday'),
    (re.compile(r'\bth[uv]\b|\bthurs?\b'), 'thursday'),
    (re.compile(r'\bfr[i1l]\b'), 'friday'),
    (re.compile(r'\bs[a@]t\b'), 'saturday'),
    (re.compile(r'\bs[uv]n\b'), 'sunday'),
]

DATE_PATTERNS = [
    re.compile(r'\b\d{4}-\d{2}-\d{2}\b'),          # 2024-05-21
    re.compile(r'\b\d{2}[/.-]\d{2}[/.-]\d{4}\b'),  # 21/05/2024, 21-05-2024
    re.compile(r'\b\d{2}[/.-]\d{2}[/.-]\d{2}\b'),  # 21/05/24
]


def normalize_day(token: str) -> str:
    """
    Map a day token to its canonical lower-case name.

    Unknown tokens come back lower-cased with non-letters stripped, so the
    function never fails and is idempotent.

    Args:
        token: Raw day text (e.g. "Tues", "THU.", "wednesday")

    Returns:
        Canonical day name, or the stripped token when it is not a day
    """
    stripped = re.sub(r'[^a-z]', '', (token or '').lower())
    return DAY_ALIASES.get(stripped, stripped)


def is_canonical_day(name: str) -> bool:
    return name in CANONICAL_DAYS


def order_days(days: Iterable[str]) -> List[str]:
    """Deduplicate, keep canonical names only, and sort Monday first."""
    found = {normalize_day(d) for d in days}
    return [d for d in CANONICAL_DAYS if d in found]


def detect_days(ocr_result: OcrResult) -> List[str]:
    """
    Find every day the document mentions.

    Two passes are unioned: exact normalized matches over the OCR words, and
    fuzzy patterns over the lower-cased full text.

    Args:
        ocr_result: OCR output to scan

    Returns:
        Canonical day names in calendar order
    """
    found = []

    for word in ocr_result.words:
        day = normalize_day(word.text)
        if is_canonical_day(day):
            found.append(day)

    lower = (ocr_result.text or '').lower()
    for pattern, day in FUZZY_DAY_PATTERNS:
        if pattern.search(lower):
            logger.debug("Pattern matched: %s -> %s", pattern.pattern, day)
            found.append(day)

    logger.debug("Raw day detections: %s", found)
    return order_days(found)


def detect_date(text: str) -> Optional[str]:
    """Return the first date-like string, trying ISO, then 4-digit year, then 2-digit year."""
    if not text:
        return None
    for pattern in DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None
