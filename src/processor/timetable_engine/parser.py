"""Parser that turns an OCR result into the timetable for one requested day."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, ExtractionConfig
from .days import detect_date, detect_days, normalize_day
from .extractors import BaseExtractor, ColumnLayoutExtractor, RowLayoutExtractor, TextOnlyExtractor
from .models import ExtractionResult, OcrResult, StrategyResult

logger = logging.getLogger(__name__)

PARSE_FAILURE = "Failed to parse timetable"


@dataclass(frozen=True)
class _Outcome:
    """Everything the holiday rules look at."""
    day_label: str
    requested_day: str
    detected_days: Sequence[str]
    column_found_header: bool
    rows_found: bool

    @property
    def day_detected(self) -> bool:
        return self.requested_day in self.detected_days


def _day_not_detected(o: _Outcome) -> Optional[str]:
    if o.requested_day and not o.day_detected:
        return f"No classes for {o.day_label}. Detected days: {', '.join(o.detected_days)}"
    return None


def _no_rows_and_not_detected(o: _Outcome) -> Optional[str]:
    if o.requested_day and not o.rows_found and not o.day_detected:
        return f"No classes for {o.day_label} in uploaded timetable"
    return None


def _no_header_and_not_detected(o: _Outcome) -> Optional[str]:
    if o.requested_day and not o.column_found_header and not o.day_detected:
        return f"No classes for {o.day_label} in uploaded timetable"
    return None


# Evaluated in order, first rule returning a message marks the day a holiday.
HOLIDAY_RULES = (
    _day_not_detected,
    _no_rows_and_not_detected,
    _no_header_and_not_detected,
)


class TimetableParser:
    """
    Extracts one day's classes from a photographed weekly timetable.

    Strategies are tried in order (column layout, row layout, plain text) and
    the first one that yields rows wins; the holiday rules then decide whether
    the day has classes at all.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """
        Initialize the parser and its extraction strategies.

        Args:
            config: Threshold overrides; defaults to DEFAULT_CONFIG
        """
        self.config = config or DEFAULT_CONFIG
        self.column = ColumnLayoutExtractor(self.config)
        self.row = RowLayoutExtractor(self.config)
        self.text = TextOnlyExtractor(self.config)

    def parse_day(self, ocr_result: OcrResult, requested_day: str) -> ExtractionResult:
        """
        Build the timetable for ``requested_day``.

        Never raises: an unexpected fault is reported as a holiday carrying the
        fault's message.

        Args:
            ocr_result: OCR output for the uploaded image
            requested_day: Day as typed by the user (e.g. "Mon", "wednesday")

        Returns:
            ExtractionResult for that day
        """
        try:
            return self._parse_day(ocr_result, requested_day)
        except Exception as e:
            logger.exception("Timetable extraction failed")
            return ExtractionResult(holiday=True, message=str(e), error=PARSE_FAILURE)

    def _parse_day(self, ocr_result: OcrResult, requested_day: str) -> ExtractionResult:
        day_label = (requested_day or '').strip()
        day = normalize_day(day_label)
        detected_days = tuple(detect_days(ocr_result))
        detected_date = detect_date(ocr_result.text)

        logger.info("Detected days: %s", ', '.join(detected_days) or 'none')
        logger.info("Requested day (normalized): %s", day or 'none')

        column = self.column.extract(ocr_result, day)
        chosen, mode = self._choose(ocr_result, day, detected_days, column)

        outcome = _Outcome(
            day_label=day_label,
            requested_day=day,
            detected_days=detected_days,
            column_found_header=column.found_header,
            rows_found=bool(chosen.timetable),
        )
        for rule in HOLIDAY_RULES:
            message = rule(outcome)
            if message:
                logger.info("Holiday: %s", message)
                return ExtractionResult(
                    holiday=True,
                    message=message,
                    detected_days=detected_days,
                    detected_date=detected_date,
                )

        logger.info("Extracted %d entries (mode=%s)", len(chosen), mode or 'none')
        return ExtractionResult(
            timetable=chosen.timetable,
            subjects=chosen.subjects,
            holiday=False,
            detected_days=detected_days,
            detected_date=detected_date,
            extraction_mode=mode,
        )

    def _choose(
        self,
        ocr_result: OcrResult,
        day: str,
        detected_days: Sequence[str],
        column: StrategyResult
    ) -> Tuple[StrategyResult, str]:
        """Return (StrategyResult, mode) from the first strategy that yields rows."""
        if column.timetable:
            return column, self.column.mode

        fallbacks: List[BaseExtractor] = []
        if day:
            fallbacks.append(self.row)
            if day in detected_days:
                fallbacks.append(self.text)

        for extractor in fallbacks:
            result = extractor.extract(ocr_result, day)
            if result.timetable:
                return result, extractor.mode

        return StrategyResult(found_header=column.found_header), ""


def extract_day(
    ocr_result: OcrResult,
    requested_day: str,
    config: Optional[ExtractionConfig] = None
) -> ExtractionResult:
    """Convenience wrapper around TimetableParser.parse_day."""
    return TimetableParser(config).parse_day(ocr_result, requested_day)
