"""
Job catalog endpoints.

Provides REST API for browsing open jobs, posting jobs, and for recruiters
to manage their own postings and review applicants.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, require_identity
from api.schemas.applications import CandidateSnapshot, JobApplicationResponse
from api.schemas.common import ErrorResponse
from api.schemas.jobs import (
    DeadlineFilter,
    JobCreate,
    JobResponse,
    JobSort,
    JobUpdate,
    RecruiterJobResponse,
)
from api.services import applications as application_service
from api.services import jobs as job_service
from core.identity import Identity

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get(
    "",
    response_model=list[JobResponse],
    summary="List Open Jobs",
    description=(
        "Open jobs filtered by deadline window (urgent < 3 days, week < 7, "
        "month < 30, no_deadline, all) and sorted by deadline, creation time or title. "
        "Expired jobs are hidden from `all` unless show_expired is set."
    ),
)
async def list_jobs(
    deadline_filter: DeadlineFilter = Query("all", alias="filter", description="Deadline window"),
    sort: JobSort = Query("deadline_asc", description="Sort order"),
    show_expired: Optional[bool] = Query(None, description="Include expired jobs in `all`"),
    show_expired_camel: Optional[bool] = Query(None, alias="showExpired", include_in_schema=False),
    db: AsyncSession = Depends(get_db),
):
    include_expired = bool(show_expired if show_expired is not None else show_expired_camel)
    jobs = await job_service.list_open_jobs(db, deadline_filter, sort, include_expired)
    return [JobResponse.model_validate(job) for job in jobs]


@router.post(
    "",
    response_model=JobResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a Job",
    description="Create a job owned by the caller. Status defaults to open.",
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def create_job(
    payload: JobCreate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    job = await job_service.create_job(db, identity.user_id, payload)
    return JobResponse.model_validate(job)


@router.get(
    "/mine",
    response_model=list[RecruiterJobResponse],
    summary="List My Jobs",
    description="Jobs posted by the caller, newest first, with application counts.",
)
async def list_my_jobs(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    rows = await job_service.list_recruiter_jobs(db, identity.user_id)
    results = []
    for job, application_count in rows:
        item = RecruiterJobResponse.model_validate(job)
        item.application_count = application_count
        results.append(item)
    return results


@router.get(
    "/{job_id}",
    response_model=JobResponse,
    summary="Get Job Details",
    responses={404: {"model": ErrorResponse}},
)
async def get_job(
    job_id: str = Path(..., description="Job ID"),
    db: AsyncSession = Depends(get_db),
):
    job = await job_service.get_job(db, job_id)
    return JobResponse.model_validate(job)


@router.patch(
    "/{job_id}",
    response_model=JobResponse,
    summary="Update Job",
    description="Partial update, including status (draft, open, closed). Owner only.",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_job(
    job_id: str = Path(..., description="Job ID"),
    payload: JobUpdate = Body(...),
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    job = await job_service.update_job(db, identity.user_id, job_id, payload)
    return JobResponse.model_validate(job)


@router.get(
    "/{job_id}/applications",
    response_model=list[JobApplicationResponse],
    summary="List Applications for a Job",
    description=(
        "Every application to the job, newest first, with a snapshot of the "
        "candidate's contact details. Only the job owner may call this."
    ),
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def list_job_applications(
    job_id: str = Path(..., description="Job ID"),
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    rows = await application_service.list_job_applications(db, identity.user_id, job_id)
    results = []
    for application, profile in rows:
        item = JobApplicationResponse.model_validate(application)
        item.candidate = CandidateSnapshot.model_validate(profile) if profile else None
        results.append(item)
    return results
