"""
Candidate profile service functions, including resume storage.
"""

import logging
import re
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.candidates import CandidateProfileUpsert
from core.audit import AuditAction, ResourceType, log_audit_event
from core.errors import NotFound, UpstreamFailure, ValidationFailed
from core.storage.factory import ResumeStore
from core.utils.datetime import epoch_millis
from database.models.candidates import CandidateProfile

logger = logging.getLogger(__name__)

ALLOWED_RESUME_TYPES = {
    "application/pdf": ".pdf",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
}
REQUIRED_ON_CREATE = ("name", "email")


def sanitize_filename(filename: Optional[str]) -> str:
    """Keep letters, digits, dot, dash and underscore; everything else becomes ``_``."""
    name = re.sub(r"[^A-Za-z0-9._-]", "_", (filename or "").strip())
    name = name.lstrip(".")[-100:]
    return name or "resume"


def resume_key(user_id: str, filename: Optional[str]) -> str:
    return f"{user_id}/{epoch_millis()}-{sanitize_filename(filename)}"


async def get_profile(db: AsyncSession, user_id: str) -> Optional[CandidateProfile]:
    result = await db.execute(
        select(CandidateProfile).where(CandidateProfile.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def require_profile(db: AsyncSession, user_id: str) -> CandidateProfile:
    profile = await get_profile(db, user_id)
    if profile is None:
        raise NotFound("Candidate profile not found")
    return profile


async def upsert_profile(
    db: AsyncSession, user_id: str, payload: CandidateProfileUpsert
) -> tuple[CandidateProfile, bool]:
    """
    Create the caller's profile or update the supplied fields.

    Args:
        db: Request-scoped session
        user_id: Profile owner
        payload: Only fields present in the request body are written

    Returns:
        ``(profile, created)``

    Raises:
        ValidationFailed: Creating without name/email, or nulling either
    """
    changes = payload.model_dump(exclude_unset=True)
    profile = await get_profile(db, user_id)

    missing = [
        field for field in REQUIRED_ON_CREATE
        if (profile is None and not changes.get(field))
        or (field in changes and changes[field] is None)
    ]
    if missing:
        raise ValidationFailed(
            "Name and email are required",
            details=[{"field": field, "message": "Field required"} for field in missing],
        )

    created = profile is None
    if created:
        profile = CandidateProfile(user_id=user_id, skills=[], experience=[], certifications=[])
        db.add(profile)

    for field, value in changes.items():
        if field in ("skills", "experience", "certifications") and value is None:
            value = []
        setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)

    log_audit_event(
        AuditAction.CREATE if created else AuditAction.UPDATE,
        ResourceType.CANDIDATE_PROFILE,
        resource_id=profile.id,
        user_id=user_id,
        details={"fields": sorted(changes), "name": profile.name, "email": profile.email},
        contains_pii=True,
    )
    return profile, created


async def replace_resume(
    db: AsyncSession,
    store: ResumeStore,
    user_id: str,
    filename: Optional[str],
    content_type: Optional[str],
    data: bytes,
    max_bytes: int,
) -> CandidateProfile:
    """
    Store a new resume and point the profile at it.

    The previous object is deleted afterwards on a best-effort basis; a
    failure there is logged and does not fail the request.
    """
    if content_type not in ALLOWED_RESUME_TYPES:
        raise ValidationFailed(
            "Resume must be a PDF, DOC or DOCX file",
            details={"content_type": content_type, "allowed": sorted(ALLOWED_RESUME_TYPES)},
        )
    if not data:
        raise ValidationFailed("Resume file is empty")
    if len(data) > max_bytes:
        raise ValidationFailed(
            "Resume file is too large",
            details={"size": len(data), "max_bytes": max_bytes},
        )

    profile = await require_profile(db, user_id)
    previous_path = profile.resume_path

    key = resume_key(user_id, filename)
    try:
        url = await store.upload(data, key, content_type=content_type)
    except Exception as e:
        logger.error(f"Resume upload failed for {user_id}: {type(e).__name__}")
        raise UpstreamFailure("Resume storage is unavailable") from e

    profile.resume_url = url
    profile.resume_path = key
    profile.resume_original_name = (filename or "")[:255] or None
    profile.resume_mime_type = content_type
    profile.resume_size = len(data)
    await db.commit()
    await db.refresh(profile)

    if previous_path and previous_path != key:
        await _delete_quietly(store, previous_path)

    log_audit_event(
        AuditAction.UPLOAD,
        ResourceType.RESUME,
        resource_id=key,
        user_id=user_id,
        details={"size": len(data), "content_type": content_type},
    )
    return profile


async def delete_resume(db: AsyncSession, store: ResumeStore, user_id: str) -> CandidateProfile:
    """Detach the resume from the profile and remove the stored object."""
    profile = await require_profile(db, user_id)
    previous_path = profile.resume_path

    profile.resume_url = None
    profile.resume_path = None
    profile.resume_original_name = None
    profile.resume_mime_type = None
    profile.resume_size = None
    await db.commit()
    await db.refresh(profile)

    if previous_path:
        await _delete_quietly(store, previous_path)

    log_audit_event(
        AuditAction.DELETE,
        ResourceType.RESUME,
        resource_id=previous_path,
        user_id=user_id,
    )
    return profile


async def _delete_quietly(store: ResumeStore, key: str) -> None:
    try:
        await store.delete(key)
    except Exception as e:
        logger.warning(f"Failed to delete stored resume {key}: {type(e).__name__}: {e}")
