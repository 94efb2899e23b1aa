from __future__ import annotations

from datetime import datetime
from pathlib import Path

from timetable_engine.database import create_tables, get_db_engine, load_timetables, save_result, storage_key
from timetable_engine.models import ExtractionResult, TimetableEntry


def _result(*subjects: str) -> ExtractionResult:
    entries = tuple(
        TimetableEntry(sno=i, subject=s, time=f'{8 + i}:00 - {9 + i}:00')
        for i, s in enumerate(subjects, start=1)
    )
    return ExtractionResult(
        timetable=entries,
        subjects=tuple(dict.fromkeys(subjects)),
        detected_days=('monday', 'tuesday'),
        detected_date='2024-05-21',
        extraction_mode='column',
    )


def _engine(tmp_path: Path):
    engine = get_db_engine(str(tmp_path / 'timetable.db'))
    create_tables(engine)
    return engine


def test_storage_key() -> None:
    assert storage_key('2024-05-21', 'Tue') == '2024-05-21-Tue'


def test_save_and_load(tmp_path: Path) -> None:
    engine = _engine(tmp_path)
    save_result(engine, '2024-05-21', 'Tue', '/uploads/a.jpg', _result('Maths', 'Physics'),
                uploaded_at=datetime(2024, 5, 21, 9, 0))

    stored = load_timetables(engine)['2024-05-21-Tue']

    assert stored['file'] == {'path': '/uploads/a.jpg', 'uploadedAt': '2024-05-21T09:00:00'}
    assert [e['subject'] for e in stored['schedule']] == ['Maths', 'Physics']
    assert stored['schedule'][0] == {'sno': 1, 'subject': 'Maths', 'time': '9:00 - 10:00', 'status': ''}
    assert stored['subjects'] == ['Maths', 'Physics']
    assert stored['holiday'] is False
    assert stored['detectedDays'] == ['monday', 'tuesday']
    assert stored['detectedDaysCount'] == 2
    assert stored['extractionMode'] == 'column'


def test_same_date_and_day_replaces_previous_upload(tmp_path: Path) -> None:
    engine = _engine(tmp_path)
    save_result(engine, '2024-05-21', 'Tue', '/uploads/a.jpg', _result('Maths'))
    save_result(engine, '2024-05-21', 'Tue', '/uploads/b.jpg', _result('Art', 'Music'))
    save_result(engine, '2024-05-22', 'Wed', '/uploads/c.jpg', ExtractionResult(holiday=True, message='No classes'))

    stored = load_timetables(engine)

    assert sorted(stored) == ['2024-05-21-Tue', '2024-05-22-Wed']
    assert stored['2024-05-21-Tue']['file']['path'] == '/uploads/b.jpg'
    assert stored['2024-05-21-Tue']['subjects'] == ['Art', 'Music']
    assert stored['2024-05-22-Wed']['holiday'] is True
    assert stored['2024-05-22-Wed']['schedule'] == []
    assert stored['2024-05-22-Wed']['detectedDays'] == []


def test_in_memory_engine() -> None:
    engine = get_db_engine(':memory:')
    assert str(engine.url) == 'sqlite://'
