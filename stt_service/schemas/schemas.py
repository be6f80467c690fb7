"""Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Generic, Literal, Optional, TypeVar

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

T = TypeVar("T")

_url_adapter = TypeAdapter(AnyUrl)

JobStatusValue = Literal["queued", "processing", "completed", "failed"]

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class ActionResponse(BaseModel, Generic[T]):
    """Envelope for every successful operation."""

    success: Literal[True] = True
    data: T


# ============== Job Schemas ==============


class JobCreateRequest(BaseModel):
    """Request to create a new transcription job."""

    input_audio_url: str = Field(..., description="URL to the source audio")
    audio_format: Optional[str] = Field(None, description='Audio format tag, e.g. "mp3" or "wav"')
    language: Optional[str] = Field(None, description="Detected or target language")
    model_name: Optional[str] = Field(None, description="STT model identifier")

    @field_validator("input_audio_url")
    @classmethod
    def validate_audio_url(cls, v: str) -> str:
        # Checked as a URL, stored exactly as sent
        try:
            _url_adapter.validate_python(v)
        except ValidationError as exc:
            raise ValueError(f"Invalid URL: {exc.errors()[0]['msg']}") from exc
        return v


class JobUpdateRequest(BaseModel):
    """Partial update of a job. Omitted or null fields keep their current value."""

    status: Optional[JobStatusValue] = None
    transcript_text: Optional[str] = None
    error_message: Optional[str] = None
    duration_seconds: Optional[float] = Field(None, ge=0, strict=True)
    word_count: Optional[int] = Field(None, ge=0, strict=True)
    completed_at: Optional[datetime] = None


class JobIdData(BaseModel):
    id: str


class JobResponse(BaseModel):
    """A job record as stored."""

    id: str
    user_id: str
    input_audio_url: str
    audio_format: Optional[str] = None
    language: Optional[str] = None
    model_name: Optional[str] = None
    transcript_text: Optional[str] = None
    duration_seconds: Optional[float] = None
    word_count: Optional[int] = None
    status: Optional[JobStatusValue] = None
    error_message: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None


class JobListData(BaseModel):
    """One page of the caller's jobs.

    ``count`` is the number of items on this page, ``total`` the number of
    the caller's jobs across all pages.
    """

    items: list[JobResponse]
    count: int
    total: int
    page: int
    page_size: int
    total_pages: int


# ============== Segment Schemas ==============


class SegmentCreate(BaseModel):
    """Single segment in an append request."""

    order_index: int = Field(..., gt=0, strict=True, description="Position of the segment in the transcript")
    text: str = Field(..., min_length=1)
    start_time_seconds: Optional[float] = Field(None, ge=0, strict=True)
    end_time_seconds: Optional[float] = Field(None, ge=0, strict=True)
    speaker_label: Optional[str] = Field(None, description='Speaker label, e.g. "Speaker 1"')
    confidence: Optional[float] = Field(None, ge=0, le=1, strict=True)


class SegmentsCreateRequest(BaseModel):
    """Request to append segments to a job."""

    segments: list[SegmentCreate] = Field(..., min_length=1, max_length=10000)


class SegmentsCreateData(BaseModel):
    inserted: int


class SegmentResponse(BaseModel):
    """A stored transcript segment."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    job_id: str
    order_index: int
    start_time_seconds: Optional[float] = None
    end_time_seconds: Optional[float] = None
    text: str
    speaker_label: Optional[str] = None
    confidence: Optional[float] = None
    created_at: datetime


class JobWithSegmentsData(BaseModel):
    job: JobResponse
    segments: list[SegmentResponse]


# ============== API Key Schemas ==============


class ApiKeyCreate(BaseModel):
    """Request to create a new API key."""

    name: str = Field(..., min_length=1, max_length=100)
    owner: str = Field(..., min_length=1, max_length=100, description="User identifier the key acts as")
    expires_in_days: Optional[int] = Field(None, ge=1, le=365)


class ApiKeyResponse(BaseModel):
    """Response after creating an API key (only time full key is shown)."""

    id: str
    api_key: str  # Full key, shown only once
    key_prefix: str
    name: str
    owner: str
    created_at: datetime
    expires_at: Optional[datetime] = None


class ApiKeyInfo(BaseModel):
    """API key info (without full key)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    key_prefix: str
    name: str
    owner: str
    is_active: bool
    created_at: datetime
    expires_at: Optional[datetime] = None


# ============== Health & Misc Schemas ==============


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: Optional[str] = None
    code: Optional[str] = None


# ============== Auth Schemas ==============


class CurrentUser(BaseModel):
    """The authenticated caller of an operation."""

    id: str
    api_key_id: Optional[str] = None
