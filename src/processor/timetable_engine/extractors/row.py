"""Row-based extraction: the requested day labels a row of the timetable."""

import re

from ..layout import bucket_rows, join_text, positioned_words
from ..models import OcrResult, StrategyResult, TimetableEntry
from ..time_ranges import find_time_ranges
from ..utils import clean_subject
from .base import BaseExtractor


class RowLayoutExtractor(BaseExtractor):
    """Splits the first row mentioning the day into one entry per time range."""

    mode = "row"

    def extract(self, ocr_result: OcrResult, requested_day: str) -> StrategyResult:
        words = positioned_words(ocr_result.words)
        if not words or not requested_day:
            return StrategyResult()

        for row in bucket_rows(words, self.config.row_layout_tolerance):
            line = join_text(row)
            if requested_day not in line.lower():
                continue

            entries = []
            matches = find_time_ranges(line)
            if not matches:
                # No times at all: the rest of the row is one block
                remainder = re.sub(re.escape(requested_day), ' ', line, count=1, flags=re.IGNORECASE)
                subject = clean_subject(remainder)
                if subject:
                    entries.append(TimetableEntry(sno=1, subject=subject))
            else:
                for i, match in enumerate(matches):
                    end = matches[i + 1].start if i + 1 < len(matches) else len(line)
                    subject = clean_subject(line[match.end:end])
                    if subject:
                        entries.append(TimetableEntry(sno=len(entries) + 1, subject=subject, time=match.label))

            # Only the first matching row is used
            return StrategyResult.from_entries(entries)

        return StrategyResult()
