"""Recruiter profile service functions and role lookup."""

import logging
from typing import Literal, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.recruiters import RecruiterProfileCreate, RecruiterProfileUpdate
from core.audit import AuditAction, ResourceType, log_audit_event
from core.errors import Duplicate, NotFound
from database.models.candidates import CandidateProfile
from database.models.recruiters import RecruiterProfile

logger = logging.getLogger(__name__)


async def get_recruiter_profile(db: AsyncSession, user_id: str) -> Optional[RecruiterProfile]:
    result = await db.execute(
        select(RecruiterProfile).where(RecruiterProfile.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def require_recruiter_profile(db: AsyncSession, user_id: str) -> RecruiterProfile:
    profile = await get_recruiter_profile(db, user_id)
    if profile is None:
        raise NotFound("Recruiter profile not found")
    return profile


async def create_recruiter_profile(
    db: AsyncSession, user_id: str, payload: RecruiterProfileCreate
) -> RecruiterProfile:
    """
    Create the caller's recruiter profile. A profile can only be created once.

    Raises:
        Duplicate: The caller already has one
    """
    if await get_recruiter_profile(db, user_id) is not None:
        raise Duplicate("Recruiter profile already exists")

    profile = RecruiterProfile(user_id=user_id, **payload.model_dump())
    db.add(profile)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Duplicate("Recruiter profile already exists")
    await db.refresh(profile)

    logger.info(f"Created recruiter profile for {user_id}")
    log_audit_event(
        AuditAction.CREATE,
        ResourceType.RECRUITER_PROFILE,
        resource_id=profile.id,
        user_id=user_id,
        details={"company_name": profile.company_name, "email": profile.email},
        contains_pii=True,
    )
    return profile


async def update_recruiter_profile(
    db: AsyncSession, user_id: str, payload: RecruiterProfileUpdate
) -> RecruiterProfile:
    profile = await require_recruiter_profile(db, user_id)

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(profile, field, value)
    await db.commit()
    await db.refresh(profile)

    log_audit_event(
        AuditAction.UPDATE,
        ResourceType.RECRUITER_PROFILE,
        resource_id=profile.id,
        user_id=user_id,
        details={"fields": sorted(changes)},
    )
    return profile


async def get_role(db: AsyncSession, user_id: str) -> Literal["recruiter", "candidate"]:
    """
    Role derived from which profile the user has; recruiter wins if both exist.

    Raises:
        NotFound: The user has no profile of either kind
    """
    if await get_recruiter_profile(db, user_id) is not None:
        return "recruiter"
    candidate = await db.scalar(
        select(CandidateProfile.id).where(CandidateProfile.user_id == user_id)
    )
    if candidate is not None:
        return "candidate"
    raise NotFound("No profile found for this user")
