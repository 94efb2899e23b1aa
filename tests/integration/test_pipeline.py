from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

import timetable_engine.main as pipeline
from timetable_engine.config import DEFAULT_CONFIG
from timetable_engine.ocr_extractor import build_ocr_result, parse_paddle_output
from timetable_engine.parser import TimetableParser


def _box(x0: float, y0: float, x1: float, y1: float) -> list:
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1]]


# Legacy PaddleOCR output for a small weekly grid with a time column
PADDLE_OUTPUT = [[
    [_box(0, 0, 80, 20), ('Time', 0.98)],
    [_box(100, 0, 200, 20), ('Monday', 0.97)],
    [_box(250, 0, 350, 20), ('Tuesday', 0.96)],
    [_box(0, 50, 80, 70), ('9:00-10:00', 0.93)],
    [_box(110, 50, 190, 70), ('Maths', 0.91)],
    [_box(260, 50, 340, 70), ('Physics', 0.92)],
    [_box(0, 130, 80, 150), ('10:00-11:00', 0.9)],
    [_box(110, 130, 190, 150), ('English', 0.88)],
    [_box(260, 130, 340, 150), ('Chemistry', 0.9)],
    [_box(0, 200, 120, 220), ('21/05/2024', 0.85)],
]]


def _ocr():
    return build_ocr_result(parse_paddle_output(PADDLE_OUTPUT))


def test_paddle_output_to_day_timetable() -> None:
    result = TimetableParser().parse_day(_ocr(), 'Tue')

    assert result.holiday is False
    assert result.extraction_mode == 'column'
    assert [(e.sno, e.subject, e.time) for e in result.timetable] == [
        (1, 'Physics', '9:00 - 10:00'),
        (2, 'Chemistry', '10:00 - 11:00'),
    ]
    assert result.detected_days == ('monday', 'tuesday')
    assert result.detected_date == '21/05/2024'


def test_paddle_output_for_missing_day() -> None:
    result = TimetableParser().parse_day(_ocr(), 'Wed')

    assert result.holiday is True
    assert result.message == 'No classes for Wed. Detected days: monday, tuesday'


class _FakeOCRExtractor:
    def __init__(self, use_gpu: bool = False, lang: str = 'en', row_tolerance: float = 12.0):
        self.use_gpu = use_gpu

    def extract_text(self, image):
        assert image.ndim == 3
        return parse_paddle_output(PADDLE_OUTPUT)


def test_process_timetable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / 'week.png'
    Image.new('RGB', (360, 240), 'white').save(path)
    monkeypatch.setattr(pipeline, 'OCRExtractor', _FakeOCRExtractor)

    result = pipeline.process_timetable(str(path), 'monday', config=DEFAULT_CONFIG)

    assert [e.subject for e in result.timetable] == ['Maths', 'English']
    assert result.extraction_mode == 'column'
