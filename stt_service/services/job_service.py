"""Transcription job and segment operations."""

import logging
from typing import Optional
from uuid import uuid4

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from stt_service.auth.security import require_user
from stt_service.db.models import Job, JobStatus, Segment
from stt_service.errors import job_not_found
from stt_service.schemas.schemas import (
    CurrentUser,
    JobCreateRequest,
    JobResponse,
    JobUpdateRequest,
    SegmentResponse,
    SegmentsCreateRequest,
)

logger = logging.getLogger(__name__)


class JobService:
    """Service for managing transcription jobs and their segments.

    Every operation takes the requesting user first-class and checks it
    before touching the database. Jobs are only ever read or written
    through an ``id AND user_id`` filter, so a job owned by someone else
    is indistinguishable from a job that does not exist.
    """

    async def create_job(
        self,
        db: AsyncSession,
        user: Optional[CurrentUser],
        request: JobCreateRequest,
    ) -> Job:
        """
        Create a new queued job owned by the user.

        Args:
            db: Database session
            user: Authenticated user
            request: Job creation request

        Returns:
            Created Job
        """
        user = require_user(user)

        job = Job(
            id=str(uuid4()),
            user_id=user.id,
            input_audio_url=request.input_audio_url,
            audio_format=request.audio_format,
            language=request.language,
            model_name=request.model_name,
            status=JobStatus.QUEUED,
        )
        db.add(job)

        await db.flush()
        await db.refresh(job)

        logger.info(f"Created job {job.id} for user {user.id}")
        return job

    async def get_owned_job(
        self,
        db: AsyncSession,
        job_id: str,
        user_id: str,
    ) -> Job:
        """Get a job by ID for its owner, or raise NOT_FOUND."""
        result = await db.execute(
            select(Job).where(Job.id == job_id, Job.user_id == user_id)
        )
        job = result.scalar_one_or_none()

        if job is None:
            logger.warning(f"Job {job_id} not found for user {user_id}")
            raise job_not_found()

        return job

    async def update_job(
        self,
        db: AsyncSession,
        user: Optional[CurrentUser],
        job_id: str,
        request: JobUpdateRequest,
    ) -> str:
        """
        Merge the supplied fields into a job.

        Fields left out of the request (or sent as null) keep their stored
        value. The merge runs as one conditional UPDATE, so columns that
        were not supplied are never rewritten.

        Returns:
            The job ID
        """
        user = require_user(user)

        update_data = request.model_dump(exclude_none=True)

        if not update_data:
            job = await self.get_owned_job(db, job_id, user.id)
            return job.id

        if "status" in update_data:
            update_data["status"] = JobStatus(update_data["status"])

        result = await db.execute(
            update(Job)
            .where(Job.id == job_id, Job.user_id == user.id)
            .values(**update_data)
        )

        if result.rowcount == 0:
            logger.warning(f"Job {job_id} not found for user {user.id}")
            raise job_not_found()

        logger.info(f"Updated job {job_id}: {sorted(update_data)}")
        return job_id

    async def add_segments(
        self,
        db: AsyncSession,
        user: Optional[CurrentUser],
        job_id: str,
        request: SegmentsCreateRequest,
    ) -> int:
        """
        Append segments to an owned job.

        Order indices are stored as given; they are not checked for
        contiguity, uniqueness or sort order.

        Returns:
            Number of inserted segments
        """
        user = require_user(user)
        job = await self.get_owned_job(db, job_id, user.id)

        segments = [
            Segment(
                id=str(uuid4()),
                job_id=job.id,
                order_index=item.order_index,
                text=item.text,
                start_time_seconds=item.start_time_seconds,
                end_time_seconds=item.end_time_seconds,
                speaker_label=item.speaker_label,
                confidence=item.confidence,
            )
            for item in request.segments
        ]
        db.add_all(segments)
        await db.flush()

        logger.info(f"Added {len(segments)} segments to job {job.id}")
        return len(segments)

    async def get_segments_for_job(
        self,
        db: AsyncSession,
        job_id: str,
    ) -> list[Segment]:
        """Get all segments for a job, ascending by order index."""
        result = await db.execute(
            select(Segment)
            .where(Segment.job_id == job_id)
            .order_by(Segment.order_index, Segment.created_at)
        )
        return list(result.scalars().all())

    async def get_job_with_segments(
        self,
        db: AsyncSession,
        user: Optional[CurrentUser],
        job_id: str,
    ) -> tuple[Job, list[Segment]]:
        """Get an owned job and its ordered segments."""
        user = require_user(user)
        job = await self.get_owned_job(db, job_id, user.id)
        segments = await self.get_segments_for_job(db, job.id)
        return job, segments

    async def list_jobs(
        self,
        db: AsyncSession,
        user: Optional[CurrentUser],
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Job], int]:
        """
        List the user's jobs, newest first.

        Returns:
            Tuple of (jobs on this page, total_count across all pages)
        """
        user = require_user(user)

        query = select(Job).where(Job.user_id == user.id)

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        # Apply pagination
        query = (
            query.order_by(Job.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )

        result = await db.execute(query)
        jobs = list(result.scalars().all())

        return jobs, total

    def job_to_response(self, job: Job) -> JobResponse:
        """Convert Job model to response schema."""
        return JobResponse(
            id=job.id,
            user_id=job.user_id,
            input_audio_url=job.input_audio_url,
            audio_format=job.audio_format,
            language=job.language,
            model_name=job.model_name,
            transcript_text=job.transcript_text,
            duration_seconds=job.duration_seconds,
            word_count=job.word_count,
            status=job.status.value if job.status else None,
            error_message=job.error_message,
            created_at=job.created_at,
            completed_at=job.completed_at,
        )

    def segment_to_response(self, segment: Segment) -> SegmentResponse:
        return SegmentResponse.model_validate(segment)


# Singleton instance
job_service = JobService()
