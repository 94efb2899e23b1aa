"""Core execution logic for processing an uploaded timetable photo."""

import json
from typing import Any, Dict, Optional

from .config import ExtractionConfig, load_config
from .models import ExtractionResult
from .ocr_extractor import OCRExtractor, build_ocr_result, calculate_confidence_score
from .parser import TimetableParser
from .preprocessor import DocumentPreprocessor
from .utils import validate_file_path


def process_timetable(
    file_path: str,
    day: str,
    use_gpu: bool = False,
    config: Optional[ExtractionConfig] = None
) -> ExtractionResult:
    """
    Process a timetable photo and extract the classes for one day.

    Args:
        file_path: Absolute or relative path to the timetable image
        day: Requested day (e.g. "Mon", "wednesday")
        use_gpu: Whether to use GPU acceleration for OCR (default: False)
        config: Thresholds and OCR settings; read from the environment if omitted

    Returns:
        ExtractionResult for the requested day

    Raises:
        ValidationError: If the file does not exist or is not a supported image
        ValueError: If the image cannot be read
    """
    config = config or load_config()
    path = validate_file_path(file_path)

    print(f"▶ Processing Timetable: {path.name} ({day})")

    print("\n[1/3] Preprocessing image...")
    image = DocumentPreprocessor().process(path)
    print(f"✓ Image ready: {image.shape[1]}x{image.shape[0]}")

    print("\n[2/3] Extracting text with PaddleOCR...")
    ocr = OCRExtractor(
        use_gpu=use_gpu or config.use_gpu,
        lang=config.ocr_lang,
        row_tolerance=config.ocr_line_tolerance,
    )
    items = ocr.extract_text(image)
    ocr_result = build_ocr_result(items, config.ocr_line_tolerance)
    print(f"✓ OCR completed: {len(ocr_result.words)} words (avg confidence: {calculate_confidence_score(items):.2%})")

    print("\n[3/3] Parsing timetable...")
    result = TimetableParser(config).parse_day(ocr_result, day)
    if result.holiday:
        print(f"✓ Holiday: {result.message}")
    else:
        print(f"✓ Extracted {len(result.timetable)} entries (mode: {result.extraction_mode or 'none'})")

    return result


def result_to_dict(result: ExtractionResult) -> Dict[str, Any]:
    """
    Serialize a result to the dictionary returned to API callers.

    Args:
        result: ExtractionResult to serialize

    Returns:
        JSON-ready dictionary
    """
    data = {
        'timetable': [
            {'sno': e.sno, 'subject': e.subject, 'time': e.time, 'status': e.status}
            for e in result.timetable
        ],
        'subjects': list(result.subjects),
        'holiday': result.holiday,
        'message': result.message,
        'detectedDays': list(result.detected_days),
        'detectedDaysCount': result.detected_days_count,
        'detectedDate': result.detected_date,
        'extractionMode': result.extraction_mode,
    }
    if result.error:
        data['error'] = result.error
    return data


def save_to_json(result: ExtractionResult, output_path: str) -> None:
    """
    Save an extraction result to a JSON file.

    Args:
        result: ExtractionResult to save
        output_path: Path to output JSON file
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(result_to_dict(result), f, indent=2, ensure_ascii=False)

    print(f"✓ Saved to: {output_path}")


def print_result_summary(result: ExtractionResult) -> None:
    """Print a short human-readable summary of a result."""
    print(f"  Detected days: {', '.join(result.detected_days) or 'none'} ({result.detected_days_count})")
    if result.detected_date:
        print(f"  Date: {result.detected_date}")

    if result.holiday:
        print(f"  Holiday: {result.message}")
        return

    print(f"\n  Total Entries: {len(result.timetable)}")
    for entry in result.timetable[:10]:
        subject = entry.subject[:40] + "..." if len(entry.subject) > 40 else entry.subject
        print(f"    {entry.sno}. {entry.time or 'N/A'} | {subject}")
    if len(result.timetable) > 10:
        print(f"    ... and {len(result.timetable) - 10} more entries")
