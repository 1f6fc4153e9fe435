"""
Application workflow service functions.

Creation is idempotent per (job, candidate): the unique constraint on
``applications`` settles races and the loser gets the existing row back.
Status changes are restricted to the recruiter who owns the parent job.
"""

from typing import Any, Optional, Sequence
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.applications import ApplicationCreate
from api.services.jobs import get_owned_job
from core.audit import AuditAction, ResourceType, log_audit_event
from core.errors import Forbidden, NotFound, ValidationFailed
from core.utils.datetime import now
from database.models.applications import Application, ApplicationStatus
from database.models.candidates import CandidateProfile
from database.models.jobs import Job, JobStatus

logger = logging.getLogger(__name__)


def missing_required_answers(
    questions: list[dict[str, Any]], answers: dict[str, str]
) -> list[str]:
    """
    Ids of required questions without a non-blank answer.

    Args:
        questions: The job's supplemental questions
        answers: Submitted answers keyed by question id

    Returns:
        Missing question ids in question order
    """
    missing = []
    for question in questions:
        if not question.get("required"):
            continue
        question_id = str(question.get("id", ""))
        answer = answers.get(question_id)
        if answer is None or not str(answer).strip():
            missing.append(question_id)
    return missing


async def find_application(
    db: AsyncSession, job_id: str, candidate_id: str
) -> Optional[Application]:
    result = await db.execute(
        select(Application).where(
            Application.job_id == job_id,
            Application.candidate_id == candidate_id,
        )
    )
    return result.scalar_one_or_none()


async def create_application(
    db: AsyncSession, user_id: str, payload: ApplicationCreate
) -> tuple[Application, bool]:
    """
    Submit an application for the caller.

    Args:
        db: Request-scoped session
        user_id: Applying candidate
        payload: Job id, answers, cover letter and optional resume URL

    Returns:
        ``(application, created)``; ``created`` is False when the caller had
        already applied to this job

    Raises:
        NotFound: The job doesn't exist or isn't open
        ValidationFailed: A required supplemental question is unanswered
    """
    existing = await find_application(db, payload.job_id, user_id)
    if existing is not None:
        logger.info(f"Candidate {user_id} already applied to job {payload.job_id}")
        return existing, False

    job = await db.get(Job, payload.job_id)
    if job is None or job.status != JobStatus.OPEN:
        raise NotFound("Job not found or not accepting applications")

    missing = missing_required_answers(job.supplemental_questions, payload.supplemental_answers)
    if missing:
        raise ValidationFailed(
            "Supplemental questions required",
            details={"missing_required_questions": missing},
        )

    resume_url = payload.resume_url
    if resume_url is None:
        resume_url = await db.scalar(
            select(CandidateProfile.resume_url).where(CandidateProfile.user_id == user_id)
        )

    application = Application(
        job_id=job.id,
        candidate_id=user_id,
        status=ApplicationStatus.APPLIED,
        resume_url=resume_url,
        cover_letter=payload.cover_letter,
        supplemental_answers=payload.supplemental_answers or None,
    )
    db.add(application)
    try:
        await db.commit()
    except IntegrityError:
        # rollback expires loaded rows, so only use plain values from here on
        await db.rollback()
        existing = await find_application(db, payload.job_id, user_id)
        if existing is None:
            # not the uniqueness race: the job vanished under us
            raise NotFound("Job not found or not accepting applications")
        logger.info(f"Concurrent duplicate application by {user_id} for job {payload.job_id}")
        return existing, False

    await db.refresh(application)
    log_audit_event(
        AuditAction.CREATE,
        ResourceType.APPLICATION,
        resource_id=application.id,
        user_id=user_id,
        details={"job_id": job.id, "status": application.status.value},
    )
    return application, True


async def update_application_status(
    db: AsyncSession, user_id: str, application_id: str, status: str
) -> Application:
    """
    Move an application to ``status``.

    Checks run in order: the application exists, the caller owns its job,
    then the status value parses. Any status may follow any other.
    """
    application = await db.get(Application, application_id)
    if application is None:
        raise NotFound("Application not found")

    job = await db.get(Job, application.job_id)
    if job is None or job.employer_id is None or job.employer_id != user_id:
        raise Forbidden("Only the recruiter who posted this job can update its applications")

    try:
        new_status = ApplicationStatus.parse(status)
    except ValueError:
        raise ValidationFailed(
            "Invalid status",
            details={"status": status, "allowed": [s.label for s in ApplicationStatus]},
        )

    previous = application.status
    application.status = new_status
    application.updated_at = now()
    await db.commit()
    await db.refresh(application)

    log_audit_event(
        AuditAction.STATUS_CHANGE,
        ResourceType.APPLICATION,
        resource_id=application.id,
        user_id=user_id,
        details={"from": previous.value, "to": new_status.value, "job_id": job.id},
    )
    return application


async def list_job_applications(
    db: AsyncSession, user_id: str, job_id: str
) -> Sequence[tuple[Application, Optional[CandidateProfile]]]:
    """
    Applications for a job the caller owns, newest first, each paired with
    the applicant's profile (None when they never created one).
    """
    await get_owned_job(db, job_id, user_id)

    result = await db.execute(
        select(Application, CandidateProfile)
        .outerjoin(CandidateProfile, CandidateProfile.user_id == Application.candidate_id)
        .where(Application.job_id == job_id)
        .order_by(Application.applied_at.desc())
    )
    return result.tuples().all()


async def get_application_detail(
    db: AsyncSession, user_id: str, application_id: str
) -> tuple[Application, Job, Optional[CandidateProfile]]:
    """An application visible to its candidate or to the job owner."""
    application = await db.get(Application, application_id)
    if application is None:
        raise NotFound("Application not found")

    job = await db.get(Job, application.job_id)
    if user_id != application.candidate_id and (job is None or job.employer_id != user_id):
        raise Forbidden("You don't have access to this application")

    profile = await db.scalar(
        select(CandidateProfile).where(CandidateProfile.user_id == application.candidate_id)
    )
    return application, job, profile


async def list_my_applications(
    db: AsyncSession, user_id: str
) -> Sequence[tuple[Application, Job]]:
    result = await db.execute(
        select(Application, Job)
        .join(Job, Job.id == Application.job_id)
        .where(Application.candidate_id == user_id)
        .order_by(Application.applied_at.desc())
    )
    return result.tuples().all()
