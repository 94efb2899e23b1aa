"""Extraction of one day's classes from OCR'd weekly timetable photos."""

__version__ = "0.1.0"

from .config import DEFAULT_CONFIG, ExtractionConfig, load_config
from .days import detect_date, detect_days, normalize_day
from .models import (
    BoundingBox,
    ExtractionResult,
    OcrLine,
    OcrResult,
    OcrWord,
    TimetableEntry,
    Weekday,
)
from .parser import TimetableParser, extract_day
from .time_ranges import find_time_ranges
from .utils import clean_subject

__all__ = [
    'DEFAULT_CONFIG',
    'ExtractionConfig',
    'load_config',
    'detect_date',
    'detect_days',
    'normalize_day',
    'BoundingBox',
    'ExtractionResult',
    'OcrLine',
    'OcrResult',
    'OcrWord',
    'TimetableEntry',
    'Weekday',
    'TimetableParser',
    'extract_day',
    'find_time_ranges',
    'clean_subject',
]
