"""Recruiter profile Pydantic schemas."""

from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from api.schemas.common import ResponseModel, TimestampMixin, clean_optional_url, strip_or_none
from core.utils.validators import validate_phone
from database.models.recruiters import CompanySize


def _check_phone(v: Any) -> Any:
    if isinstance(v, str):
        v = v.strip()
        is_valid, error = validate_phone(v)
        if not is_valid:
            raise ValueError(error)
        return v or None
    return v


class RecruiterProfileBase(BaseModel):
    model_config = ConfigDict(extra="ignore")

    company_size: Optional[CompanySize] = None
    phone: Optional[str] = Field(None, max_length=40)
    linkedin_url: Optional[str] = None
    company_website: Optional[str] = None

    @field_validator("phone", mode="before")
    @classmethod
    def check_phone(cls, v: Any) -> Any:
        return _check_phone(v)

    @field_validator("linkedin_url", "company_website", mode="before")
    @classmethod
    def check_urls(cls, v: Any) -> Optional[str]:
        return clean_optional_url(v)

    @field_validator("company_size", mode="before")
    @classmethod
    def blank_size(cls, v: Any) -> Any:
        return strip_or_none(v)


class RecruiterProfileCreate(RecruiterProfileBase):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    company_name: str = Field(..., min_length=1, max_length=200)
    job_title: str = Field(..., min_length=1, max_length=100)

    @field_validator("name", "company_name", "job_title", mode="before")
    @classmethod
    def strip_required(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class RecruiterProfileUpdate(RecruiterProfileBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    company_name: Optional[str] = Field(None, min_length=1, max_length=200)
    job_title: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("name", "company_name", "job_title", mode="before")
    @classmethod
    def strip_required(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def no_nulls_for_required(self) -> "RecruiterProfileUpdate":
        for name in ("name", "email", "company_name", "job_title"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class RecruiterProfileResponse(ResponseModel, TimestampMixin):
    id: str
    user_id: str
    name: str
    email: str
    company_name: str
    job_title: str
    company_size: Optional[CompanySize] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    company_website: Optional[str] = None


class RoleResponse(BaseModel):
    role: Literal["recruiter", "candidate"]
