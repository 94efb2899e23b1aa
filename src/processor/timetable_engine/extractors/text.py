"""Last-resort extraction from the raw recognized text, no geometry."""

from ..days import CANONICAL_DAYS
from ..models import OcrResult, StrategyResult, TimetableEntry
from ..time_ranges import first_time_range
from ..utils import clean_subject
from .base import BaseExtractor


class TextOnlyExtractor(BaseExtractor):
    """One entry per text line that carries a time range."""

    mode = "text"

    def extract(self, ocr_result: OcrResult, requested_day: str) -> StrategyResult:
        lines = [line for line in (ocr_result.text or '').split('\n') if line.strip()]
        other_days = [d for d in CANONICAL_DAYS if d != requested_day] if requested_day else []

        entries = []
        for line in lines:
            lower = line.lower()
            # Lines naming another day belong to a different column
            if any(day in lower for day in other_days):
                continue

            match = first_time_range(line)
            if match is None:
                continue

            subject = clean_subject(line.replace(match.raw, '', 1), truncate=True)
            if subject:
                entries.append(TimetableEntry(sno=len(entries) + 1, subject=subject, time=match.label))

        return StrategyResult.from_entries(entries)
