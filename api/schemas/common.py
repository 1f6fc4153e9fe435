"""Common Pydantic schemas shared across the API."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.datetime import ensure_utc
from core.utils.validators import validate_url


def clean_optional_url(value: Any) -> Optional[str]:
    """
    Shared validator body for optional URL fields.

    Blank strings clear the field; anything else must be an absolute
    http(s) URL.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("URL must be a string")
    value = value.strip()
    if not value:
        return None
    is_valid, error = validate_url(value)
    if not is_valid:
        raise ValueError(error)
    return value


def strip_or_none(value: Any) -> Any:
    """Trim strings; blank strings become None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class ResponseModel(BaseModel):
    """Base for response schemas built from ORM rows."""

    model_config = ConfigDict(from_attributes=True)

    @field_validator("*")
    @classmethod
    def timestamps_in_utc(cls, v: Any) -> Any:
        # SQLite returns naive datetimes, everything stored is UTC
        if isinstance(v, datetime):
            return ensure_utc(v)
        return v


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields."""

    created_at: datetime = Field(description="Timestamp when the resource was created")
    updated_at: datetime = Field(description="Timestamp when the resource was last updated")


class ErrorBody(BaseModel):
    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Human readable message")
    path: str
    method: str
    details: Optional[Any] = Field(None, description="Field level details, when any")
    request_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error response model."""

    error: ErrorBody
