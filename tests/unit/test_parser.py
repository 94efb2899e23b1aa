from __future__ import annotations

import itertools
import json

import pytest

from timetable_engine.main import result_to_dict
from timetable_engine.models import BoundingBox, ExtractionResult, OcrResult, OcrWord, TimetableEntry
from timetable_engine.parser import HOLIDAY_RULES, PARSE_FAILURE, TimetableParser, _Outcome, extract_day


def _w(text: str, x0: float, y0: float, x1: float, y1: float) -> OcrWord:
    return OcrWord(text=text, bbox=BoundingBox(x0, y0, x1, y1))


def _column_timetable() -> OcrResult:
    words = (
        _w('Monday', 10, 10, 90, 30),
        _w('Tuesday', 150, 10, 250, 30),
        _w('Wednesday', 300, 10, 400, 30),
        _w('9:00-10:00', 150, 60, 210, 78),
        _w('Physics', 215, 60, 245, 78),
    )
    return OcrResult(text='Monday Tuesday Wednesday\n9:00-10:00 Physics\n2024-05-21', words=words)


def test_column_layout_is_preferred() -> None:
    result = TimetableParser().parse_day(_column_timetable(), 'tue')

    assert result.holiday is False
    assert result.extraction_mode == 'column'
    assert result.timetable == (TimetableEntry(sno=1, subject='Physics', time='9:00 - 10:00', status=''),)
    assert result.subjects == ('Physics',)
    assert result.detected_days == ('monday', 'tuesday', 'wednesday')
    assert result.detected_days_count == 3
    assert result.detected_date == '2024-05-21'
    assert result.message is None


def test_undetected_day_is_a_holiday() -> None:
    ocr = OcrResult(
        text='Monday Tuesday\n9:00-10:00 Maths',
        words=(_w('Monday', 0, 0, 80, 20), _w('Tuesday', 100, 0, 180, 20)),
    )
    result = extract_day(ocr, 'Friday')

    assert result.holiday is True
    assert result.timetable == ()
    assert result.message == 'No classes for Friday. Detected days: monday, tuesday'
    assert result.detected_days == ('monday', 'tuesday')


def test_row_layout_is_used_when_column_has_no_rows() -> None:
    words = (
        _w('Monday', 0, 50, 60, 68),
        _w('9:00-10:00', 70, 50, 170, 68),
        _w('Maths', 180, 50, 230, 68),
        _w('Tuesday', 0, 90, 70, 108),
        _w('9:00-10:00', 80, 90, 180, 108),
        _w('Physics', 190, 90, 260, 108),
    )
    ocr = OcrResult(text='Monday 9:00-10:00 Maths\nTuesday 9:00-10:00 Physics', words=words)
    result = TimetableParser().parse_day(ocr, 'Tuesday')

    assert result.holiday is False
    assert result.extraction_mode == 'row'
    assert [(e.subject, e.time) for e in result.timetable] == [('Physics', '9:00 - 10:00')]


def test_text_fallback_when_there_is_no_geometry() -> None:
    ocr = OcrResult(text='Timetable for Saturday\n9:00-10:00 Chemistry\n10:00-11:00 Physics')
    result = TimetableParser().parse_day(ocr, 'sat')

    assert result.holiday is False
    assert result.extraction_mode == 'text'
    assert [e.subject for e in result.timetable] == ['Chemistry', 'Physics']
    assert result.detected_days == ('saturday',)


def test_detected_but_unparseable_day_is_not_a_holiday() -> None:
    ocr = OcrResult(text='Saturday: sports meet, no timings')
    result = TimetableParser().parse_day(ocr, 'saturday')

    assert result.holiday is False
    assert result.timetable == ()
    assert result.extraction_mode == ''


def test_no_requested_day() -> None:
    result = TimetableParser().parse_day(_column_timetable(), '')

    assert result.holiday is False
    assert result.timetable == ()
    assert result.detected_days_count == 3


def test_faults_are_reported_not_raised(monkeypatch: pytest.MonkeyPatch) -> None:
    parser = TimetableParser()

    def boom(*args, **kwargs):
        raise RuntimeError('boom')

    monkeypatch.setattr(parser.column, 'extract', boom)
    result = parser.parse_day(_column_timetable(), 'monday')

    assert result.holiday is True
    assert result.timetable == ()
    assert result.message == 'boom'
    assert result.error == PARSE_FAILURE


def test_holiday_implies_empty_timetable() -> None:
    for day in ['monday', 'tuesday', 'friday', 'sunday', 'xyz']:
        result = TimetableParser().parse_day(_column_timetable(), day)
        if result.holiday:
            assert result.timetable == ()


def test_repeated_calls_are_identical() -> None:
    first = TimetableParser().parse_day(_column_timetable(), 'tue')
    second = TimetableParser().parse_day(_column_timetable(), 'tue')

    assert first == second
    assert json.dumps(result_to_dict(first)) == json.dumps(result_to_dict(second))


def test_later_holiday_rules_only_fire_when_the_first_does() -> None:
    first, *later = HOLIDAY_RULES
    for detected, header, rows in itertools.product([(), ('monday',)], [True, False], [True, False]):
        outcome = _Outcome(
            day_label='Mon',
            requested_day='monday',
            detected_days=detected,
            column_found_header=header,
            rows_found=rows,
        )
        if first(outcome) is None:
            assert all(rule(outcome) is None for rule in later)


def test_result_to_dict_uses_wire_keys() -> None:
    result = ExtractionResult(
        timetable=(TimetableEntry(sno=1, subject='Art', time='1:00 - 2:00'),),
        subjects=('Art',),
        detected_days=('monday',),
        extraction_mode='column',
    )
    data = result_to_dict(result)

    assert data == {
        'timetable': [{'sno': 1, 'subject': 'Art', 'time': '1:00 - 2:00', 'status': ''}],
        'subjects': ['Art'],
        'holiday': False,
        'message': None,
        'detectedDays': ['monday'],
        'detectedDaysCount': 1,
        'detectedDate': None,
        'extractionMode': 'column',
    }
