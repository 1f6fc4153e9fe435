"""
Profile endpoints: candidate profile and resume, recruiter profile, role.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_app_settings, get_db, get_resume_store, require_identity
from api.schemas.candidates import CandidateProfileResponse, CandidateProfileUpsert
from api.schemas.common import ErrorResponse
from api.schemas.recruiters import (
    RecruiterProfileCreate,
    RecruiterProfileResponse,
    RecruiterProfileUpdate,
    RoleResponse,
)
from api.services import candidates as candidate_service
from api.services import recruiters as recruiter_service
from core.config import Settings
from core.identity import Identity
from core.storage.factory import ResumeStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


# ==================== Candidate Profile ==================== #

@router.get(
    "",
    response_model=Optional[CandidateProfileResponse],
    summary="Get My Candidate Profile",
    description="Returns null when the caller has not created a profile yet.",
    responses={401: {"model": ErrorResponse}},
)
async def get_profile(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    profile = await candidate_service.get_profile(db, identity.user_id)
    return CandidateProfileResponse.model_validate(profile) if profile else None


@router.put(
    "",
    response_model=CandidateProfileResponse,
    summary="Create or Update My Candidate Profile",
    description=(
        "Creates the profile (name and email required) or updates only the "
        "fields present in the body. Returns 201 on creation."
    ),
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def upsert_profile(
    response: Response,
    payload: CandidateProfileUpsert,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    profile, created = await candidate_service.upsert_profile(db, identity.user_id, payload)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return CandidateProfileResponse.model_validate(profile)


@router.post(
    "/resume",
    response_model=CandidateProfileResponse,
    summary="Upload Resume",
    description="PDF, DOC or DOCX up to the configured size. Replaces any previous resume.",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def upload_resume(
    file: UploadFile = File(..., description="Resume document"),
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
    store: ResumeStore = Depends(get_resume_store),
    settings: Settings = Depends(get_app_settings),
):
    # read one byte past the limit so oversize files are detected without buffering them whole
    data = await file.read(settings.resume_max_bytes + 1)
    profile = await candidate_service.replace_resume(
        db,
        store,
        identity.user_id,
        filename=file.filename,
        content_type=file.content_type,
        data=data,
        max_bytes=settings.resume_max_bytes,
    )
    return CandidateProfileResponse.model_validate(profile)


@router.delete(
    "/resume",
    response_model=CandidateProfileResponse,
    summary="Remove Resume",
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_resume(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
    store: ResumeStore = Depends(get_resume_store),
):
    profile = await candidate_service.delete_resume(db, store, identity.user_id)
    return CandidateProfileResponse.model_validate(profile)


# ==================== Recruiter Profile ==================== #

@router.get(
    "/recruiter",
    response_model=RecruiterProfileResponse,
    summary="Get My Recruiter Profile",
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_recruiter_profile(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    profile = await recruiter_service.require_recruiter_profile(db, identity.user_id)
    return RecruiterProfileResponse.model_validate(profile)


@router.post(
    "/recruiter",
    response_model=RecruiterProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create My Recruiter Profile",
    description="A recruiter profile can be created once; a second attempt returns 409.",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_recruiter_profile(
    payload: RecruiterProfileCreate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    profile = await recruiter_service.create_recruiter_profile(db, identity.user_id, payload)
    return RecruiterProfileResponse.model_validate(profile)


@router.patch(
    "/recruiter",
    response_model=RecruiterProfileResponse,
    summary="Update My Recruiter Profile",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_recruiter_profile(
    payload: RecruiterProfileUpdate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    profile = await recruiter_service.update_recruiter_profile(db, identity.user_id, payload)
    return RecruiterProfileResponse.model_validate(profile)


@router.get(
    "/role",
    response_model=RoleResponse,
    summary="Get My Role",
    description="recruiter when a recruiter profile exists, otherwise candidate.",
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_role(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    return RoleResponse(role=await recruiter_service.get_role(db, identity.user_id))
