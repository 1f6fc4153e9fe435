"""Candidate profile Pydantic schemas."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from api.schemas.common import ResponseModel, TimestampMixin, clean_optional_url, strip_or_none
from core.utils.datetime import ensure_utc
from core.utils.validators import validate_phone, validate_year_month

MAX_SKILLS = 50
MAX_SKILL_LENGTH = 50
MAX_EXPERIENCE_ENTRIES = 20
MAX_CERTIFICATIONS = 20

URL_FIELDS = ("resume_url", "linkedin_url", "github_url", "portfolio_url")


def _check_year_month(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    is_valid, error = validate_year_month(v)
    if not is_valid:
        raise ValueError(error)
    return v


class WorkExperience(BaseModel):
    company: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=100)
    start_date: str = Field(..., description="YYYY-MM")
    end_date: Optional[str] = Field(None, description="YYYY-MM, null while current")
    description: str = Field(default="", max_length=1000)

    @field_validator("company", "title", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("start_date", "end_date")
    @classmethod
    def year_month(cls, v: Optional[str]) -> Optional[str]:
        return _check_year_month(v)


class Certification(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    issuer: str = Field(..., min_length=1, max_length=100)
    date: str = Field(..., description="YYYY-MM")
    expiry: Optional[str] = Field(None, description="YYYY-MM")

    @field_validator("name", "issuer", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("date", "expiry")
    @classmethod
    def year_month(cls, v: Optional[str]) -> Optional[str]:
        return _check_year_month(v)


class CandidateProfileUpsert(BaseModel):
    """
    Body of ``PUT /profile``.

    Every field is optional; creating a profile additionally needs ``name``
    and ``email``. Only fields present in the body are written.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=40)
    location: Optional[str] = Field(None, max_length=200)
    education: Optional[str] = Field(None, max_length=200)
    school: Optional[str] = Field(None, max_length=200)
    degree_level: Optional[str] = Field(None, max_length=100)
    graduation_date: Optional[str] = Field(None, description="YYYY-MM")
    resume_url: Optional[str] = None
    skills: Optional[list[str]] = Field(None, max_length=MAX_SKILLS)
    experience: Optional[list[WorkExperience]] = Field(None, max_length=MAX_EXPERIENCE_ENTRIES)
    certifications: Optional[list[Certification]] = Field(None, max_length=MAX_CERTIFICATIONS)
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    work_authorization: Optional[str] = Field(None, max_length=100)
    requires_sponsorship: Optional[bool] = None
    open_to_relocation: Optional[bool] = None
    offer_deadline: Optional[datetime] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("phone", mode="before")
    @classmethod
    def check_phone(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            is_valid, error = validate_phone(v)
            if not is_valid:
                raise ValueError(error)
            return v or None
        return v

    @field_validator("location", "education", "school", "degree_level", "work_authorization", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return strip_or_none(v)

    @field_validator("graduation_date", mode="before")
    @classmethod
    def graduation_year_month(cls, v: Any) -> Any:
        return _check_year_month(strip_or_none(v))

    @field_validator(*URL_FIELDS, mode="before")
    @classmethod
    def check_urls(cls, v: Any) -> Optional[str]:
        return clean_optional_url(v)

    @field_validator("skills")
    @classmethod
    def skill_lengths(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        # stored verbatim: order kept, duplicates and blanks tolerated
        if v is not None:
            for skill in v:
                if len(skill) > MAX_SKILL_LENGTH:
                    raise ValueError(f"Skills must be at most {MAX_SKILL_LENGTH} characters")
        return v

    @field_validator("offer_deadline")
    @classmethod
    def deadline_in_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class CandidateProfileResponse(ResponseModel, TimestampMixin):
    id: str
    user_id: str
    name: str
    email: str
    phone: Optional[str] = None
    location: Optional[str] = None
    education: Optional[str] = None
    school: Optional[str] = None
    degree_level: Optional[str] = None
    graduation_date: Optional[str] = None
    resume_url: Optional[str] = None
    resume_path: Optional[str] = None
    resume_original_name: Optional[str] = None
    resume_mime_type: Optional[str] = None
    resume_size: Optional[int] = None
    skills: list[str] = Field(default_factory=list)
    experience: list[dict[str, Any]] = Field(default_factory=list)
    certifications: list[dict[str, Any]] = Field(default_factory=list)
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    work_authorization: Optional[str] = None
    requires_sponsorship: Optional[bool] = None
    open_to_relocation: Optional[bool] = None
    offer_deadline: Optional[datetime] = None
