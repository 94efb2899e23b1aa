"""Validation, text cleanup and other helpers for timetable processing."""

import re
from pathlib import Path
from typing import List, Optional

from .days import DAY_TOKENS
from .models import ExtractionResult

SUPPORTED_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.bmp', '.tiff', '.tif'}

ROOM_NUMBER_RE = re.compile(r'\b\d{3,4}\b')
PARENTHETICAL_RE = re.compile(r'\([^)]*\)')
SEPARATOR_RE = re.compile(r'[\t,;\-|]')
AM_PM_TOKEN_RE = re.compile(r'\b(a\.?m\.?|p\.?m\.?)\b', re.IGNORECASE)
NON_SUBJECT_CHARS_RE = re.compile(r'[^A-Za-z+&\s]')
THREE_LETTERS_RE = re.compile(r'[a-zA-Z]{3,}')
PURE_AM_PM_RE = re.compile(r'^(am|pm|ampm|pmam|a m|p m|am pm|pm am)$', re.IGNORECASE)

NOISE_WORDS = frozenset(
    ['period', 'time', 'duration', 'day', 'date', 'am', 'pm', 'name'] + list(DAY_TOKENS)
)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


def validate_file_path(file_path: str, supported_extensions: set = SUPPORTED_EXTENSIONS) -> Path:
    """
    Validate file path and extension.

    Args:
        file_path: Path to validate
        supported_extensions: Set of supported file extensions

    Returns:
        Validated Path object

    Raises:
        ValidationError: If validation fails
    """
    try:
        path = Path(file_path)
    except TypeError as e:
        raise ValidationError(f"Invalid file path: {e}")

    if not path.exists():
        raise ValidationError(f"File not found: {path}")

    if not path.is_file():
        raise ValidationError(f"Path is not a file: {path}")

    if path.suffix.lower() not in supported_extensions:
        raise ValidationError(
            f"Unsupported file format: {path.suffix}. "
            f"Supported formats: {', '.join(sorted(supported_extensions))}"
        )

    return path


def is_supported_file(file_path: str) -> bool:
    """Quick check if the file extension is one we can load."""
    return Path(file_path).suffix.lower() in SUPPORTED_EXTENSIONS


def sanitize_text(text: str) -> str:
    """
    Collapse whitespace and drop NUL characters.

    Args:
        text: Text to sanitize

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = re.sub(r'\s+', ' ', text)
    text = text.replace('\x00', '')
    return text.strip()


def clean_subject(raw: str, truncate: bool = False) -> Optional[str]:
    """
    Turn a raw OCR fragment into a subject name, or reject it.

    Room numbers, parenthetical notes, am/pm markers and anything that is not
    a letter, ``+`` or ``&`` are removed.

    Args:
        raw: Candidate subject text
        truncate: Cut the text at the first tab, comma, semicolon, hyphen or pipe

    Returns:
        Cleaned subject, or None if what is left is noise
    """
    subject = (raw or '').strip()
    subject = ROOM_NUMBER_RE.sub(' ', subject).strip()
    subject = PARENTHETICAL_RE.sub(' ', subject).strip()
    if truncate:
        subject = SEPARATOR_RE.split(subject, maxsplit=1)[0].strip()
    subject = AM_PM_TOKEN_RE.sub(' ', subject)
    subject = sanitize_text(NON_SUBJECT_CHARS_RE.sub(' ', subject))

    lower = subject.lower()
    if not THREE_LETTERS_RE.search(subject):
        return None
    if len(subject) < 3:
        return None
    if lower in NOISE_WORDS:
        return None
    if PURE_AM_PM_RE.match(re.sub(r'\s+', '', lower)):
        return None

    return subject


def validate_result(result: ExtractionResult) -> List[str]:
    """
    Return warnings worth showing for an extraction result.

    Args:
        result: ExtractionResult to inspect

    Returns:
        List of validation warning messages
    """
    warnings = []

    if result.error:
        warnings.append(f"Extraction failed: {result.message}")
        return warnings

    if result.holiday:
        return warnings

    if not result.timetable:
        warnings.append("Requested day was detected but no timetable rows could be extracted")
        return warnings

    missing_time = sum(1 for e in result.timetable if not e.time)
    if missing_time:
        warnings.append(f"{missing_time} entries missing time information")

    if not result.detected_date:
        warnings.append("No date detected in timetable")

    return warnings
