"""Data models for timetable extraction."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Weekday(Enum):
    """Enumeration for days of the week, in calendar order starting Monday."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_string(cls, day_str: str) -> Optional['Weekday']:
        """
        Parse weekday from various string formats.

        Args:
            day_str: String representation of weekday (e.g., "Mon", "TUES.", "friday")

        Returns:
            Weekday enum or None if not matched
        """
        if not day_str or not isinstance(day_str, str):
            return None

        from .days import normalize_day

        try:
            return cls(normalize_day(day_str))
        except ValueError:
            return None

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        """Canonical day names in calendar order."""
        return tuple(day.value for day in cls)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in image pixel coordinates."""
    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def x_center(self) -> float:
        return (self.x0 + self.x1) / 2


@dataclass(frozen=True)
class OcrWord:
    """A single recognized word and where it sits on the page."""
    text: str
    bbox: Optional[BoundingBox] = None
    confidence: float = 0.0


@dataclass(frozen=True)
class OcrLine:
    """A group of words the OCR engine recognized together."""
    text: str
    bbox: Optional[BoundingBox] = None
    words: Tuple[OcrWord, ...] = ()


@dataclass(frozen=True)
class OcrResult:
    """
    Materialized output of one OCR pass.

    Words come in no guaranteed order; extractors sort as they need.
    """
    text: str = ""
    words: Tuple[OcrWord, ...] = ()
    lines: Tuple[OcrLine, ...] = ()


@dataclass(frozen=True)
class HeaderEntry:
    """A day-name word taken as a column header."""
    day: str
    bbox: BoundingBox

    @property
    def x_center(self) -> float:
        return self.bbox.x_center


@dataclass(frozen=True)
class TimetableEntry:
    """Represents a single class slot for the requested day."""
    sno: int
    subject: str
    time: str = ""
    status: str = ""

    def __str__(self) -> str:
        time = self.time or "No time"
        return f"{self.sno}. {time}: {self.subject}"


@dataclass(frozen=True)
class StrategyResult:
    """What every extraction strategy hands back to the orchestrator."""
    timetable: Tuple[TimetableEntry, ...] = ()
    subjects: Tuple[str, ...] = ()
    found_header: bool = False

    @classmethod
    def from_entries(cls, entries, found_header: bool = False) -> 'StrategyResult':
        """Build a result, collecting distinct subjects in first-seen order."""
        entries = tuple(entries)
        subjects = tuple(dict.fromkeys(e.subject for e in entries if e.subject))
        return cls(timetable=entries, subjects=subjects, found_header=found_header)

    def __len__(self) -> int:
        return len(self.timetable)


@dataclass(frozen=True)
class ExtractionResult:
    """Represents the extracted schedule for one requested day."""
    timetable: Tuple[TimetableEntry, ...] = ()
    subjects: Tuple[str, ...] = ()
    holiday: bool = False
    message: Optional[str] = None
    detected_days: Tuple[str, ...] = field(default_factory=tuple)
    detected_date: Optional[str] = None
    extraction_mode: str = ""
    error: Optional[str] = None

    @property
    def detected_days_count(self) -> int:
        return len(self.detected_days)

    def __len__(self) -> int:
        return len(self.timetable)
