"""Database models for the STT job service."""

import enum
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import (
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from stt_service.db.session import Base


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStatus(str, enum.Enum):
    """Status of a transcription job."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ApiKey(Base):
    """API keys for authentication. ``owner`` is the user identifier."""

    __tablename__ = "api_keys"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    key_hash: Mapped[str] = mapped_column(String(255), unique=True)
    key_prefix: Mapped[str] = mapped_column(String(12), index=True)  # First 12 chars for lookup
    name: Mapped[str] = mapped_column(String(100))
    owner: Mapped[str] = mapped_column(String(100), index=True)
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class Job(Base):
    """One transcription request and its result."""

    __tablename__ = "stt_jobs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(100), index=True)

    # Input
    input_audio_url: Mapped[str] = mapped_column(Text)
    audio_format: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)  # "mp3", "wav", ...
    language: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    model_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Results
    transcript_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_seconds: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    word_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    status: Mapped[Optional[JobStatus]] = mapped_column(
        Enum(
            JobStatus,
            name="sttjobstatus",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=True,
    )
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), index=True
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class Segment(Base):
    """A timed text fragment of a job's transcript. Immutable once inserted."""

    __tablename__ = "stt_segments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    job_id: Mapped[str] = mapped_column(String(36), ForeignKey("stt_jobs.id"), index=True)
    order_index: Mapped[int] = mapped_column(Integer)  # 1, 2, 3...

    start_time_seconds: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    end_time_seconds: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    text: Mapped[str] = mapped_column(Text)
    speaker_label: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)  # "Speaker 1"
    confidence: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
