"""Tunable thresholds and settings for the extraction engine.

The geometry values are pixel heuristics calibrated for phone photos of a
printed weekly timetable; recalibrate them for very different resolutions.
"""

import os
from dataclasses import dataclass


def _env(key: str, default: str) -> str:
    return os.getenv(key, default)


def _env_bool(key: str, default: bool) -> bool:
    return _env(key, 'true' if default else 'false').strip().lower() == 'true'


@dataclass(frozen=True)
class ExtractionConfig:
    """Named thresholds used by the layout extractors and the OCR adapter."""

    # Column layout
    column_row_tolerance: float = 18.0
    header_band_min_tolerance: float = 60.0
    header_band_height_factor: float = 3.0
    default_header_height: float = 20.0
    boundary_extension_factor: float = 0.8
    header_bottom_margin: float = 2.0
    row_overlap_tolerance: float = 16.0
    merge_max_text_length: int = 20
    merge_min_overlap_ratio: float = 0.5
    merge_gap_factor: float = 2.0
    widen_fallback_width: float = 40.0

    # Row layout
    row_layout_tolerance: float = 12.0

    # OCR collaborator
    ocr_lang: str = 'en'
    use_gpu: bool = False
    ocr_line_tolerance: float = 12.0

    # Persistence
    db_path: str = 'timetable_data.db'

    def header_band_tolerance(self, avg_header_height: float) -> float:
        """Vertical distance within which day words count as one header row."""
        return max(self.header_band_min_tolerance, avg_header_height * self.header_band_height_factor)


DEFAULT_CONFIG = ExtractionConfig()


def load_config() -> ExtractionConfig:
    """Build a config from ``TIMETABLE_*`` environment variables."""
    d = DEFAULT_CONFIG
    return ExtractionConfig(
        column_row_tolerance=float(_env('TIMETABLE_COLUMN_ROW_TOLERANCE', str(d.column_row_tolerance))),
        header_band_min_tolerance=float(_env('TIMETABLE_HEADER_BAND_MIN', str(d.header_band_min_tolerance))),
        header_band_height_factor=float(_env('TIMETABLE_HEADER_BAND_FACTOR', str(d.header_band_height_factor))),
        default_header_height=d.default_header_height,
        boundary_extension_factor=float(_env('TIMETABLE_BOUNDARY_EXTENSION', str(d.boundary_extension_factor))),
        header_bottom_margin=float(_env('TIMETABLE_HEADER_MARGIN', str(d.header_bottom_margin))),
        row_overlap_tolerance=float(_env('TIMETABLE_ROW_OVERLAP_TOLERANCE', str(d.row_overlap_tolerance))),
        merge_max_text_length=int(_env('TIMETABLE_MERGE_MAX_TEXT', str(d.merge_max_text_length))),
        merge_min_overlap_ratio=float(_env('TIMETABLE_MERGE_MIN_OVERLAP', str(d.merge_min_overlap_ratio))),
        merge_gap_factor=float(_env('TIMETABLE_MERGE_GAP_FACTOR', str(d.merge_gap_factor))),
        widen_fallback_width=d.widen_fallback_width,
        row_layout_tolerance=float(_env('TIMETABLE_ROW_LAYOUT_TOLERANCE', str(d.row_layout_tolerance))),
        ocr_lang=_env('TIMETABLE_OCR_LANG', d.ocr_lang),
        use_gpu=_env_bool('TIMETABLE_USE_GPU', d.use_gpu),
        ocr_line_tolerance=float(_env('TIMETABLE_OCR_LINE_TOLERANCE', str(d.ocr_line_tolerance))),
        db_path=_env('TIMETABLE_DB_PATH', d.db_path),
    )
