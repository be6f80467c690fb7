"""Tests for the job service operations called directly."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from stt_service.db.models import Job, JobStatus, Segment
from stt_service.errors import ActionError
from stt_service.schemas.schemas import (
    CurrentUser,
    JobCreateRequest,
    JobUpdateRequest,
    SegmentCreate,
    SegmentsCreateRequest,
)
from stt_service.services.job_service import job_service


def new_job_request(url: str = "https://x/a.mp3") -> JobCreateRequest:
    return JobCreateRequest(input_audio_url=url)


async def count_rows(db: AsyncSession, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_every_operation_requires_a_user(db_session: AsyncSession, alice: CurrentUser):
    job = await job_service.create_job(db_session, alice, new_job_request())
    segments = SegmentsCreateRequest(segments=[SegmentCreate(order_index=1, text="hi")])

    calls = [
        job_service.create_job(db_session, None, new_job_request()),
        job_service.update_job(db_session, None, job.id, JobUpdateRequest(status="failed")),
        job_service.add_segments(db_session, None, job.id, segments),
        job_service.get_job_with_segments(db_session, None, job.id),
        job_service.list_jobs(db_session, None),
    ]
    for call in calls:
        with pytest.raises(ActionError) as exc_info:
            await call
        assert exc_info.value.code == "UNAUTHORIZED"
        assert exc_info.value.status_code == 401

    assert await count_rows(db_session, Job) == 1
    assert await count_rows(db_session, Segment) == 0
    assert job.status == JobStatus.QUEUED


@pytest.mark.asyncio
async def test_create_job_generates_id_and_owner(db_session: AsyncSession, alice: CurrentUser):
    job = await job_service.create_job(
        db_session,
        alice,
        JobCreateRequest(input_audio_url="https://x/a.mp3", audio_format="wav"),
    )

    assert len(job.id) == 36
    assert job.user_id == "alice"
    assert job.status == JobStatus.QUEUED
    assert job.audio_format == "wav"
    assert job.created_at is not None
    assert job.transcript_text is None
    assert job.duration_seconds is None
    assert job.word_count is None
    assert job.completed_at is None


@pytest.mark.asyncio
async def test_update_job_merges_supplied_fields(db_session: AsyncSession, alice: CurrentUser):
    job = await job_service.create_job(db_session, alice, new_job_request())
    completed_at = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    await job_service.update_job(
        db_session,
        alice,
        job.id,
        JobUpdateRequest(
            status="completed",
            transcript_text="one two three",
            duration_seconds=3.0,
            word_count=3,
            completed_at=completed_at,
        ),
    )
    returned_id = await job_service.update_job(
        db_session, alice, job.id, JobUpdateRequest(status="processing")
    )
    assert returned_id == job.id

    stored, _ = await job_service.get_job_with_segments(db_session, alice, job.id)
    assert stored.status == JobStatus.PROCESSING
    assert stored.transcript_text == "one two three"
    assert stored.duration_seconds == 3.0
    assert stored.word_count == 3
    assert stored.completed_at is not None


@pytest.mark.asyncio
async def test_update_job_only_writes_supplied_columns(
    db_session: AsyncSession, test_engine, alice: CurrentUser
):
    """A stale in-memory copy never overwrites columns the request did not name."""
    job = await job_service.create_job(db_session, alice, new_job_request())
    await db_session.commit()

    # Another writer fills in the transcript behind this session's back
    async with test_engine.connect() as conn:
        await conn.execute(
            Job.__table__.update().where(Job.id == job.id).values(transcript_text="from worker")
        )
        await conn.commit()

    await job_service.update_job(db_session, alice, job.id, JobUpdateRequest(status="completed"))
    await db_session.commit()

    row = (
        await db_session.execute(
            select(Job.status, Job.transcript_text).where(Job.id == job.id)
        )
    ).one()
    assert row.status == JobStatus.COMPLETED
    assert row.transcript_text == "from worker"


@pytest.mark.asyncio
async def test_operations_on_foreign_job_are_not_found(
    db_session: AsyncSession, alice: CurrentUser, bob: CurrentUser
):
    job = await job_service.create_job(db_session, alice, new_job_request())
    segments = SegmentsCreateRequest(segments=[SegmentCreate(order_index=1, text="hi")])

    for call in (
        job_service.update_job(db_session, bob, job.id, JobUpdateRequest(status="failed")),
        job_service.update_job(db_session, bob, job.id, JobUpdateRequest()),
        job_service.add_segments(db_session, bob, job.id, segments),
        job_service.get_job_with_segments(db_session, bob, job.id),
    ):
        with pytest.raises(ActionError) as exc_info:
            await call
        assert exc_info.value.code == "NOT_FOUND"
        assert exc_info.value.message == "Speech-to-text job not found."

    stored, stored_segments = await job_service.get_job_with_segments(db_session, alice, job.id)
    assert stored.status == JobStatus.QUEUED
    assert stored_segments == []


@pytest.mark.asyncio
async def test_add_segments_keeps_caller_ordering_metadata(db_session: AsyncSession, alice: CurrentUser):
    job = await job_service.create_job(db_session, alice, new_job_request())

    inserted = await job_service.add_segments(
        db_session,
        alice,
        job.id,
        SegmentsCreateRequest(
            segments=[
                SegmentCreate(order_index=10, text="ten"),
                SegmentCreate(order_index=3, text="three", speaker_label="Speaker 2"),
                SegmentCreate(order_index=7, text="seven", confidence=0.5),
            ]
        ),
    )
    assert inserted == 3

    # A second batch appends rather than replaces
    inserted = await job_service.add_segments(
        db_session,
        alice,
        job.id,
        SegmentsCreateRequest(segments=[SegmentCreate(order_index=1, text="one")]),
    )
    assert inserted == 1

    _, segments = await job_service.get_job_with_segments(db_session, alice, job.id)
    assert [s.order_index for s in segments] == [1, 3, 7, 10]
    assert [s.text for s in segments] == ["one", "three", "seven", "ten"]
    assert segments[1].speaker_label == "Speaker 2"
    assert segments[2].confidence == 0.5


@pytest.mark.asyncio
async def test_list_jobs_is_scoped_to_user(
    db_session: AsyncSession, alice: CurrentUser, bob: CurrentUser
):
    alice_jobs = [
        await job_service.create_job(db_session, alice, new_job_request(f"https://x/{i}.mp3"))
        for i in range(25)
    ]
    await job_service.create_job(db_session, bob, new_job_request())

    first_page, total = await job_service.list_jobs(db_session, alice, page=1, page_size=20)
    second_page, _ = await job_service.list_jobs(db_session, alice, page=2, page_size=20)

    assert total == 25
    assert len(first_page) == 20
    assert len(second_page) == 5
    listed = [j.id for j in first_page + second_page]
    assert listed == [j.id for j in reversed(alice_jobs)]
    assert all(j.user_id == "alice" for j in first_page + second_page)

    bob_jobs, bob_total = await job_service.list_jobs(db_session, bob)
    assert bob_total == 1
    assert len(bob_jobs) == 1


@pytest.mark.asyncio
async def test_job_to_response_renders_status_value(db_session: AsyncSession, alice: CurrentUser):
    job = await job_service.create_job(db_session, alice, new_job_request())

    response = job_service.job_to_response(job)
    assert response.status == "queued"
    assert response.input_audio_url == "https://x/a.mp3"


@pytest.mark.asyncio
async def test_create_job_keeps_audio_url_verbatim(db_session: AsyncSession, alice: CurrentUser):
    url = "https://EXAMPLE.com/A b.mp3"
    job = await job_service.create_job(db_session, alice, new_job_request(url))
    await db_session.commit()

    stored = (await db_session.execute(select(Job.input_audio_url).where(Job.id == job.id))).scalar_one()
    assert stored == url


def test_segments_are_linked_by_foreign_key_only():
    assert len(inspect(Job).relationships) == 0
    assert len(inspect(Segment).relationships) == 0
    assert [fk.target_fullname for fk in Segment.__table__.c.job_id.foreign_keys] == ["stt_jobs.id"]
