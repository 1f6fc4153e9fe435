"""
Application workflow endpoints.

Candidates apply and list their own applications; the recruiter who owns a
job moves its applications between statuses.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, require_identity
from api.schemas.applications import (
    ApplicationCreate,
    ApplicationCreateResponse,
    ApplicationDetailResponse,
    ApplicationJobSummary,
    ApplicationResponse,
    ApplicationStatusUpdate,
    MyApplicationResponse,
)
from api.schemas.candidates import CandidateProfileResponse
from api.schemas.common import ErrorResponse
from api.services import applications as application_service
from core.identity import Identity
from core.utils.normalizers import (
    normalize_email,
    normalize_name,
    normalize_phone,
    normalize_skills,
    normalize_url,
)
from database.models.candidates import CandidateProfile

router = APIRouter(prefix="/applications", tags=["applications"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


def candidate_view(profile: Optional[CandidateProfile]) -> Optional[dict[str, Any]]:
    """Stored profile plus the standardized form recruiters read."""
    if profile is None:
        return None
    view = CandidateProfileResponse.model_validate(profile).model_dump(mode="json")
    view["normalized"] = {
        "name": normalize_name(profile.name),
        "email": normalize_email(profile.email),
        "phone": normalize_phone(profile.phone),
        "skills": normalize_skills(profile.skills),
        "linkedin_url": normalize_url(profile.linkedin_url),
        "github_url": normalize_url(profile.github_url),
        "portfolio_url": normalize_url(profile.portfolio_url),
    }
    return view


@router.post(
    "",
    response_model=ApplicationCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to a Job",
    description=(
        "One-click application. Returns 201 for a new application and 200 with "
        "created=false when the caller already applied to this job."
    ),
    responses=ERROR_RESPONSES,
)
async def create_application(
    response: Response,
    payload: ApplicationCreate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
) -> ApplicationCreateResponse:
    application, created = await application_service.create_application(
        db, identity.user_id, payload
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return ApplicationCreateResponse(
        application=ApplicationResponse.model_validate(application),
        created=created,
    )


@router.get(
    "",
    response_model=list[MyApplicationResponse],
    summary="List My Applications",
    description="Applications submitted by the caller, newest first.",
)
async def list_my_applications(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    rows = await application_service.list_my_applications(db, identity.user_id)
    return [
        MyApplicationResponse(
            **ApplicationResponse.model_validate(application).model_dump(),
            job=ApplicationJobSummary.model_validate(job),
        )
        for application, job in rows
    ]


@router.get(
    "/{application_id}",
    response_model=ApplicationDetailResponse,
    summary="Get Application Details",
    description="Visible to the applying candidate and to the recruiter who owns the job.",
    responses=ERROR_RESPONSES,
)
async def get_application(
    application_id: str = Path(..., description="Application ID"),
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    application, job, profile = await application_service.get_application_detail(
        db, identity.user_id, application_id
    )
    return ApplicationDetailResponse(
        application=ApplicationResponse.model_validate(application),
        job=ApplicationJobSummary.model_validate(job),
        candidate=candidate_view(profile),
    )


@router.patch(
    "/{application_id}",
    response_model=ApplicationResponse,
    summary="Update Application Status",
    description=(
        "Set the status to applied, under_review, interview, offer, hired or "
        "rejected. Display labels such as \"Under Review\" are accepted. Only "
        "the recruiter who owns the job may do this."
    ),
    responses=ERROR_RESPONSES,
)
async def update_application_status(
    application_id: str = Path(..., description="Application ID"),
    payload: ApplicationStatusUpdate = Body(...),
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    application = await application_service.update_application_status(
        db, identity.user_id, application_id, payload.status
    )
    return ApplicationResponse.model_validate(application)
