"""Column-based extraction: the requested day heads a column of the timetable."""

import logging
from typing import List, Optional, Sequence, Tuple

from ..days import is_canonical_day, normalize_day
from ..layout import (
    bucket_rows,
    horizontal_overlap_ratio,
    join_text,
    overlaps_vertically,
    positioned_words,
    row_span,
)
from ..models import HeaderEntry, OcrResult, OcrWord, StrategyResult, TimetableEntry
from ..time_ranges import contains_time_range, first_time_range
from ..utils import clean_subject
from .base import BaseExtractor

logger = logging.getLogger(__name__)


class ColumnLayoutExtractor(BaseExtractor):
    """
    Reads the column under the requested day's header.

    The header row is the top-most band of day-name words. Column edges sit
    halfway to the neighbouring headers; words below the header inside those
    edges are bucketed into rows, wrapped subject lines are merged back
    together, and every row becomes one entry.
    """

    mode = "column"

    def extract(self, ocr_result: OcrResult, requested_day: str) -> StrategyResult:
        words = list(ocr_result.words)
        if not words and not ocr_result.lines:
            return StrategyResult()

        located = self._locate_header(words, requested_day)
        if located is None:
            logger.debug("No header column found for %r", requested_day)
            return StrategyResult()

        headers, idx = located
        header = headers[idx]
        prev = headers[idx - 1] if idx > 0 else None
        nxt = headers[idx + 1] if idx + 1 < len(headers) else None
        left, right = self._column_bounds(header, prev, nxt)
        logger.debug("Column for %s spans x=%.1f..%.1f", header.day, left, right)

        entries = self._extract_rows(words, header, left, right)
        if not entries:
            widen = header.bbox.width or self.config.widen_fallback_width
            logger.debug("No rows in column, retrying widened by %.1fpx", widen)
            entries = self._extract_rows(
                words, header, max(0.0, left - widen), right + widen, truncate=True
            )

        return StrategyResult.from_entries(entries, found_header=True)

    def _day_words(self, words: Sequence[OcrWord]) -> List[OcrWord]:
        return [w for w in words if w.bbox is not None and is_canonical_day(normalize_day(w.text))]

    @staticmethod
    def _sorted_headers(words: Sequence[OcrWord]) -> List[HeaderEntry]:
        # Repeated day names are kept; their x position tells them apart.
        headers = [HeaderEntry(day=normalize_day(w.text), bbox=w.bbox) for w in words]
        return sorted((h for h in headers if is_canonical_day(h.day)), key=lambda h: h.x_center)

    @staticmethod
    def _find(headers: Sequence[HeaderEntry], day: str) -> Optional[int]:
        for i, h in enumerate(headers):
            if h.day == day:
                return i
        return None

    def _locate_header(
        self,
        words: Sequence[OcrWord],
        requested_day: str
    ) -> Optional[Tuple[List[HeaderEntry], int]]:
        """
        Find the header row and the requested day's position in it.

        Args:
            words: All OCR words
            requested_day: Canonical day name

        Returns:
            (headers sorted by x centre, index of the requested day) or None
        """
        day_words = self._day_words(words)
        if not day_words:
            return None

        heights = [w.bbox.height for w in day_words if w.bbox.height]
        avg_height = sum(heights) / len(heights) if heights else self.config.default_header_height
        tolerance = self.config.header_band_tolerance(avg_height)

        min_y = min(w.bbox.y0 for w in day_words)
        band = [w for w in day_words if w.bbox.y0 - min_y <= tolerance] or day_words
        headers = self._sorted_headers(band)
        idx = self._find(headers, requested_day)

        if idx is None:
            # Not in the top band: rebuild a band around the topmost mention of the day
            occurrences = [w for w in day_words if normalize_day(w.text) == requested_day]
            if occurrences:
                chosen = min(occurrences, key=lambda w: w.bbox.y0)
                band = [w for w in day_words if abs(w.bbox.y0 - chosen.bbox.y0) <= tolerance]
                headers = self._sorted_headers(band)
                idx = self._find(headers, requested_day)

        if idx is None:
            return None
        return headers, idx

    def _column_bounds(
        self,
        header: HeaderEntry,
        prev: Optional[HeaderEntry],
        nxt: Optional[HeaderEntry]
    ) -> Tuple[float, float]:
        extension = header.bbox.width * self.config.boundary_extension_factor
        if prev is not None:
            left = (prev.x_center + header.x_center) / 2
        else:
            left = max(0.0, header.bbox.x0 - extension)
        if nxt is not None:
            right = (header.x_center + nxt.x_center) / 2
        else:
            right = header.bbox.x1 + extension
        return left, right

    def _extract_rows(
        self,
        words: Sequence[OcrWord],
        header: HeaderEntry,
        left: float,
        right: float,
        truncate: bool = False
    ) -> List[TimetableEntry]:
        floor = header.bbox.y1 + self.config.header_bottom_margin
        column = positioned_words(
            w for w in words
            if w.bbox is not None and left <= w.bbox.x_center <= right and w.bbox.y0 >= floor
        )
        rows = bucket_rows(column, self.config.column_row_tolerance)
        rows = self._merge_continuations(rows)

        entries: List[TimetableEntry] = []
        for row in rows:
            entry = self._row_entry(row, words, len(entries) + 1, truncate)
            if entry is not None:
                entries.append(entry)
        return entries

    def _is_short(self, text: str) -> bool:
        return len(text) <= self.config.merge_max_text_length and not contains_time_range(text)

    def _merge_continuations(self, rows: List[List[OcrWord]]) -> List[List[OcrWord]]:
        """
        Join short rows that continue each other, e.g. "Social" over "Studies".

        Args:
            rows: Rows from bucket_rows, top to bottom

        Returns:
            Rows with wrapped cells merged
        """
        max_gap = self.config.column_row_tolerance * self.config.merge_gap_factor
        merged = []
        i = 0
        while i < len(rows):
            current = list(rows[i])
            span = row_span(current)
            if self._is_short(span.text):
                while i + 1 < len(rows):
                    next_span = row_span(rows[i + 1])
                    if (
                        self._is_short(next_span.text)
                        and abs(next_span.y0 - span.y1) <= max_gap
                        and horizontal_overlap_ratio(span, next_span) >= self.config.merge_min_overlap_ratio
                    ):
                        current.extend(rows[i + 1])
                        span = row_span(current)
                        i += 1
                    else:
                        break
            merged.append(current)
            i += 1
        return merged

    def _row_entry(
        self,
        row: List[OcrWord],
        words: Sequence[OcrWord],
        sno: int,
        truncate: bool
    ) -> Optional[TimetableEntry]:
        column_text = join_text(row)
        if not column_text:
            return None

        # The time label may sit outside the column at the same height
        span = row_span(row)
        in_row = {id(w) for w in row}
        same_height = [
            w for w in words
            if w.bbox is not None
            and id(w) not in in_row
            and overlaps_vertically(w.bbox.y0, w.bbox.y1, span.y0, span.y1, self.config.row_overlap_tolerance)
        ]
        full_text = join_text(sorted(row + same_height, key=lambda w: w.bbox.x0))

        match = first_time_range(full_text)
        subject_text = column_text.replace(match.raw, '', 1) if match else column_text
        subject = clean_subject(subject_text, truncate=truncate)
        if subject is None:
            return None

        return TimetableEntry(sno=sno, subject=subject, time=match.label if match else '')
