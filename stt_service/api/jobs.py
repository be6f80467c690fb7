"""Transcription job API routes."""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from stt_service.auth.security import require_current_user
from stt_service.db.session import get_db
from stt_service.middleware.rate_limit import rate_limit_writes
from stt_service.schemas.schemas import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    ActionResponse,
    CurrentUser,
    ErrorResponse,
    JobCreateRequest,
    JobIdData,
    JobListData,
    JobUpdateRequest,
    JobWithSegmentsData,
    SegmentsCreateData,
    SegmentsCreateRequest,
)
from stt_service.services.job_service import job_service

router = APIRouter(
    prefix="/v1/stt-jobs",
    tags=["STT Jobs"],
    responses={401: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=ActionResponse[JobIdData],
    status_code=status.HTTP_201_CREATED,
    summary="Create a transcription job",
    description="Register a new speech-to-text job in the queued state.",
)
@rate_limit_writes()
async def create_job(
    request: Request,
    body: JobCreateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    """
    Create a new job.

    - **input_audio_url**: URL of the source audio (required)
    - **audio_format**: e.g. "mp3", "wav"
    - **language**: detected or target language
    - **model_name**: STT model identifier
    """
    job = await job_service.create_job(db, user, body)
    await db.commit()

    return ActionResponse(data=JobIdData(id=job.id))


@router.get(
    "",
    response_model=ActionResponse[JobListData],
    summary="List my jobs",
    description="Get a page of the caller's jobs, newest first.",
)
async def list_jobs(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"
    ),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    """List all jobs owned by the caller."""
    jobs, total = await job_service.list_jobs(db, user, page, page_size)

    total_pages = (total + page_size - 1) // page_size

    return ActionResponse(
        data=JobListData(
            items=[job_service.job_to_response(j) for j in jobs],
            count=len(jobs),
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
        )
    )


@router.get(
    "/{job_id}",
    response_model=ActionResponse[JobWithSegmentsData],
    responses={404: {"model": ErrorResponse}},
    summary="Get job with segments",
    description="Get a job and its transcript segments ordered by order index.",
)
async def get_job(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    job, segments = await job_service.get_job_with_segments(db, user, job_id)

    return ActionResponse(
        data=JobWithSegmentsData(
            job=job_service.job_to_response(job),
            segments=[job_service.segment_to_response(s) for s in segments],
        )
    )


@router.patch(
    "/{job_id}",
    response_model=ActionResponse[JobIdData],
    responses={404: {"model": ErrorResponse}},
    summary="Update a job",
    description="Merge status and result fields into a job. Omitted fields are left unchanged.",
)
async def update_job(
    job_id: str,
    body: JobUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    """
    Update a job.

    A worker reporting progress typically sends only **status**; on
    completion it sends **status**, **transcript_text**,
    **duration_seconds**, **word_count** and **completed_at**.
    """
    updated_id = await job_service.update_job(db, user, job_id, body)
    await db.commit()

    return ActionResponse(data=JobIdData(id=updated_id))


@router.post(
    "/{job_id}/segments",
    response_model=ActionResponse[SegmentsCreateData],
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
    summary="Append transcript segments",
    description="Insert a batch of transcript segments for a job.",
)
@rate_limit_writes()
async def add_segments(
    request: Request,
    job_id: str,
    body: SegmentsCreateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_current_user),
):
    inserted = await job_service.add_segments(db, user, job_id, body)
    await db.commit()

    return ActionResponse(data=SegmentsCreateData(inserted=inserted))
