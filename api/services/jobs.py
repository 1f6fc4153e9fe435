"""
Job catalog service functions.

Every function takes the request's ``AsyncSession`` explicitly; domain
failures are raised as ``core.errors`` exceptions.
"""

from datetime import datetime
from typing import Iterable, Optional, Sequence
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.jobs import DeadlineFilter, JobCreate, JobSort, JobUpdate
from core.audit import AuditAction, ResourceType, log_audit_event
from core.errors import Forbidden, NotFound
from core.utils.datetime import days_until, is_expired
from database.models.applications import Application
from database.models.jobs import SUPPLEMENTAL_QUESTIONS_KEY, Job, JobStatus

logger = logging.getLogger(__name__)

# filter -> exclusive upper bound in days
DEADLINE_WINDOWS = {"urgent": 3, "week": 7, "month": 30}


def filter_by_deadline(
    jobs: Iterable[Job],
    deadline_filter: DeadlineFilter = "all",
    show_expired: bool = False,
    reference: Optional[datetime] = None,
) -> list[Job]:
    """
    Keep jobs matching a deadline window.

    Args:
        jobs: Jobs to filter, order is preserved
        deadline_filter: ``urgent``/``week``/``month`` keep jobs due in
            0 <= days < 3/7/30, ``no_deadline`` keeps jobs without one,
            ``all`` keeps everything except expired jobs
        show_expired: Keep expired jobs in the ``all`` filter
        reference: "Now" for the comparison (defaults to the current time)

    Returns:
        Filtered list of jobs
    """
    if deadline_filter in DEADLINE_WINDOWS:
        limit = DEADLINE_WINDOWS[deadline_filter]
        return [
            job for job in jobs
            if job.deadline is not None and 0 <= days_until(job.deadline, reference) < limit
        ]
    if deadline_filter == "no_deadline":
        return [job for job in jobs if job.deadline is None]
    if show_expired:
        return list(jobs)
    return [job for job in jobs if not is_expired(job.deadline, reference)]


def _order_by(sort: JobSort) -> tuple:
    # jobs without a deadline always sort last for the deadline orders
    if sort == "deadline_desc":
        return (Job.deadline.is_(None), Job.deadline.desc(), Job.created_at.desc())
    if sort == "created_desc":
        return (Job.created_at.desc(),)
    if sort == "title_asc":
        return (func.lower(Job.title).asc(), Job.created_at.desc())
    return (Job.deadline.is_(None), Job.deadline.asc(), Job.created_at.desc())


async def list_open_jobs(
    db: AsyncSession,
    deadline_filter: DeadlineFilter = "all",
    sort: JobSort = "deadline_asc",
    show_expired: bool = False,
) -> list[Job]:
    """List jobs accepting applications, filtered and sorted by deadline."""
    result = await db.execute(
        select(Job).where(Job.status == JobStatus.OPEN).order_by(*_order_by(sort))
    )
    return filter_by_deadline(result.scalars().all(), deadline_filter, show_expired)


async def get_job(db: AsyncSession, job_id: str) -> Job:
    job = await db.get(Job, job_id)
    if job is None:
        raise NotFound("Job not found")
    return job


async def get_owned_job(db: AsyncSession, job_id: str, user_id: str) -> Job:
    """
    Load a job the caller owns.

    Raises:
        NotFound: No job with this id
        Forbidden: Caller is not the job's employer (unclaimed jobs have no owner)
    """
    job = await get_job(db, job_id)
    if job.employer_id is None or job.employer_id != user_id:
        raise Forbidden("Only the recruiter who posted this job can do that")
    return job


def _requirements_with_questions(
    requirements: Optional[dict], questions: Sequence[dict]
) -> Optional[dict]:
    document = dict(requirements or {})
    document.pop(SUPPLEMENTAL_QUESTIONS_KEY, None)
    if questions:
        document[SUPPLEMENTAL_QUESTIONS_KEY] = list(questions)
    return document or None


def _dump_questions(questions) -> list[dict]:
    return [question.model_dump(exclude_none=True) for question in questions or []]


async def create_job(db: AsyncSession, user_id: str, payload: JobCreate) -> Job:
    """
    Post a job owned by the caller.

    Supplemental questions are embedded into ``requirements`` under
    ``supplementalQuestions``; ids were generated for questions sent without one.
    A raw ``supplementalQuestions`` key inside ``requirements`` is ignored.
    """
    job = Job(
        employer_id=user_id,
        title=payload.title,
        company=payload.company,
        location=payload.location,
        description=payload.description,
        salary_range=payload.salary_range,
        requirements=_requirements_with_questions(
            payload.requirements, _dump_questions(payload.supplemental_questions)
        ),
        status=payload.status,
        deadline=payload.deadline,
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)

    logger.info(f"Created job {job.id} for employer {user_id}")
    log_audit_event(
        AuditAction.CREATE,
        ResourceType.JOB,
        resource_id=job.id,
        user_id=user_id,
        details={"title": job.title, "status": job.status.value},
    )
    return job


async def update_job(db: AsyncSession, user_id: str, job_id: str, payload: JobUpdate) -> Job:
    """
    Apply a partial update to a job the caller owns.

    A new ``requirements`` document never drops the embedded questions;
    only an explicit ``supplemental_questions`` replaces them.
    """
    job = await get_owned_job(db, job_id, user_id)

    sent = payload.model_fields_set
    changes = payload.model_dump(exclude_unset=True, exclude={"supplemental_questions"})
    if "requirements" in sent or "supplemental_questions" in sent:
        questions = (
            _dump_questions(payload.supplemental_questions)
            if "supplemental_questions" in sent
            else job.supplemental_questions
        )
        base = changes["requirements"] if "requirements" in sent else job.requirements
        changes["requirements"] = _requirements_with_questions(base, questions)

    for field, value in changes.items():
        setattr(job, field, value)
    await db.commit()
    await db.refresh(job)

    log_audit_event(
        AuditAction.UPDATE,
        ResourceType.JOB,
        resource_id=job.id,
        user_id=user_id,
        details={"fields": sorted(sent)},
    )
    return job


async def list_recruiter_jobs(db: AsyncSession, user_id: str) -> Sequence[tuple[Job, int]]:
    """The caller's jobs, newest first, each with its application count."""
    counts = (
        select(Application.job_id, func.count(Application.id).label("application_count"))
        .group_by(Application.job_id)
        .subquery()
    )
    result = await db.execute(
        select(Job, func.coalesce(counts.c.application_count, 0))
        .outerjoin(counts, counts.c.job_id == Job.id)
        .where(Job.employer_id == user_id)
        .order_by(Job.created_at.desc())
    )
    return result.tuples().all()
