"""Command-line entry point: python -m timetable_engine <image> --day <day>."""

import logging
import sys
from datetime import date as date_cls
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .database import create_tables, get_db_engine, save_result
from .main import print_result_summary, process_timetable, save_to_json
from .utils import ValidationError, is_supported_file, validate_result

USAGE = """\
Usage: python -m timetable_engine <file_path> --day <day> [options]

Arguments:
  file_path    Path to timetable photo (required)
  --day        Day to extract, e.g. Mon, tuesday (required)

Options:
  --date       Date the upload is for (default: today)
  --output     Output JSON file path
  --db         Store the result in SQLite (optional path, default: $TIMETABLE_DB_PATH)
  --gpu        Use GPU acceleration for OCR
  --verbose    Show debug logging

Supported formats: PNG, JPG, JPEG, BMP, TIFF

Examples:
  python -m timetable_engine timetable.jpg --day tue
  python -m timetable_engine schedule.png --day monday --output monday.json --db timetable.sqlite
"""


def _option(argv: List[str], name: str) -> Optional[str]:
    if name in argv:
        idx = argv.index(name)
        if idx + 1 < len(argv):
            return argv[idx + 1]
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the extraction pipeline from the command line.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        Process exit code
    """
    argv = list(sys.argv[1:] if argv is None else argv)

    day = _option(argv, '--day')
    if not argv or argv[0].startswith('--') or not day:
        print(USAGE)
        return 1

    file_path = argv[0]
    upload_date = _option(argv, '--date') or date_cls.today().isoformat()
    output_path = _option(argv, '--output') or Path(file_path).stem + "_extracted.json"
    config = load_config()
    db_path = None
    if '--db' in argv:
        db_path = _option(argv, '--db')
        if not db_path or db_path.startswith('--'):
            db_path = config.db_path
    use_gpu = '--gpu' in argv

    logging.basicConfig(
        level=logging.DEBUG if '--verbose' in argv else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not is_supported_file(file_path):
        print("\n✗ Error: Unsupported file format")
        print("  Supported formats: PNG, JPG, JPEG, BMP, TIFF")
        return 1

    try:
        result = process_timetable(file_path, day, use_gpu=use_gpu, config=config)
    except ValidationError as e:
        print(f"\n✗ Validation Error: {e}")
        return 1
    except ValueError as e:
        print(f"\n✗ Image Error: {e}")
        return 1
    except ImportError as e:
        print(f"\n✗ Missing dependency: {e}")
        return 1

    print("\n" + "=" * 70)
    print("EXTRACTION SUMMARY")
    print("=" * 70)
    print_result_summary(result)

    warnings = validate_result(result)
    if warnings:
        print("\n" + "=" * 70)
        print("VALIDATION WARNINGS")
        print("=" * 70)
        for warning in warnings:
            print(f"⚠ {warning}")

    save_to_json(result, output_path)

    if db_path:
        engine = get_db_engine(db_path)
        create_tables(engine)
        upload_id = save_result(engine, upload_date, day, str(Path(file_path).absolute()), result)
        print(f"✓ Stored as {upload_date}-{day} (id {upload_id})")

    print("\n✓ Processing completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
