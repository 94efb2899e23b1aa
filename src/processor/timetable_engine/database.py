"""Database setup and models for storing extracted timetables."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Session, relationship

from .models import ExtractionResult


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class TimetableUpload(Base):
    """One processed upload, stored under its "{date}-{day}" key."""
    __tablename__ = "timetable_uploads"

    id = Column(Integer, primary_key=True)
    key = Column(String(120), nullable=False, unique=True)
    date = Column(String(50), nullable=False)
    day = Column(String(50), nullable=False)
    file_path = Column(String(500), nullable=False)
    uploaded_at = Column(DateTime, nullable=False)
    holiday = Column(Boolean, nullable=False, default=False)
    message = Column(String(500), nullable=True)
    detected_days = Column(String(100), nullable=False, default="")
    detected_date = Column(String(20), nullable=True)
    extraction_mode = Column(String(10), nullable=False, default="")

    entries = relationship(
        "ScheduleEntry",
        back_populates="upload",
        cascade="all, delete-orphan",
        order_by="ScheduleEntry.sno",
    )


class ScheduleEntry(Base):
    """A single class slot belonging to an upload."""
    __tablename__ = "schedule_entries"

    id = Column(Integer, primary_key=True)
    upload_id = Column(Integer, ForeignKey("timetable_uploads.id"), nullable=False)
    sno = Column(Integer, nullable=False)
    subject = Column(String(200), nullable=False)
    time = Column(String(50), nullable=False, default="")
    status = Column(String(50), nullable=False, default="")

    upload = relationship("TimetableUpload", back_populates="entries")


def get_db_engine(db_path: str = "timetable_data.db"):
    """
    Create and return a SQLAlchemy Engine connected to SQLite database.

    Args:
        db_path: Path to the SQLite database file; relative paths resolve
            against the project root, ":memory:" gives an in-memory database

    Returns:
        sqlalchemy.Engine: Database engine instance
    """
    if db_path == ":memory:":
        return create_engine("sqlite://", echo=False)

    path = Path(db_path)
    if not path.is_absolute():
        path = Path(__file__).parent.parent / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{path}", echo=False)


def create_tables(engine) -> None:
    """
    Create all database tables defined in Base.metadata.

    Args:
        engine: SQLAlchemy Engine instance
    """
    Base.metadata.create_all(engine)


def storage_key(date: str, day: str) -> str:
    return f"{date}-{day}"


def save_result(
    engine,
    date: str,
    day: str,
    file_path: str,
    result: ExtractionResult,
    uploaded_at: Optional[datetime] = None
) -> int:
    """
    Persist an extraction result, replacing any earlier upload for the same date and day.

    Args:
        engine: SQLAlchemy Engine instance
        date: Date the timetable was uploaded for
        day: Day as requested by the user
        file_path: Where the uploaded image is stored
        result: ExtractionResult to store
        uploaded_at: Upload timestamp (default: now, UTC)

    Returns:
        Id of the stored TimetableUpload row
    """
    key = storage_key(date, day)
    with Session(engine) as session:
        existing = session.scalars(select(TimetableUpload).where(TimetableUpload.key == key)).first()
        if existing is not None:
            session.delete(existing)
            session.flush()

        upload = TimetableUpload(
            key=key,
            date=date,
            day=day,
            file_path=str(file_path),
            uploaded_at=uploaded_at or datetime.now(timezone.utc),
            holiday=result.holiday,
            message=result.message,
            detected_days=",".join(result.detected_days),
            detected_date=result.detected_date,
            extraction_mode=result.extraction_mode,
        )
        upload.entries = [
            ScheduleEntry(sno=e.sno, subject=e.subject, time=e.time, status=e.status)
            for e in result.timetable
        ]
        session.add(upload)
        session.commit()
        return upload.id


def load_timetables(engine) -> Dict[str, Dict[str, Any]]:
    """
    Return every stored timetable keyed by "{date}-{day}".

    Args:
        engine: SQLAlchemy Engine instance

    Returns:
        Mapping of key to the stored schedule and detection details
    """
    timetables = {}
    with Session(engine) as session:
        for upload in session.scalars(select(TimetableUpload).order_by(TimetableUpload.id)):
            days = [d for d in upload.detected_days.split(",") if d]
            timetables[upload.key] = {
                'date': upload.date,
                'day': upload.day,
                'file': {'path': upload.file_path, 'uploadedAt': upload.uploaded_at.isoformat()},
                'schedule': [
                    {'sno': e.sno, 'subject': e.subject, 'time': e.time, 'status': e.status}
                    for e in upload.entries
                ],
                'subjects': list(dict.fromkeys(e.subject for e in upload.entries)),
                'holiday': upload.holiday,
                'message': upload.message,
                'detectedDays': days,
                'detectedDaysCount': len(days),
                'detectedDate': upload.detected_date,
                'extractionMode': upload.extraction_mode,
            }
    return timetables
