"""Job-related Pydantic schemas."""

import uuid
from datetime import datetime
from typing import Any, Literal, Optional
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from api.schemas.common import ResponseModel, strip_or_none
from core.utils.datetime import deadline_status, deadline_text, ensure_utc
from database.models.jobs import JobStatus

DeadlineFilter = Literal["all", "urgent", "week", "month", "no_deadline"]
JobSort = Literal["deadline_asc", "deadline_desc", "created_desc", "title_asc"]
QuestionType = Literal["text", "textarea", "select"]


class SupplementalQuestion(BaseModel):
    """A recruiter-defined question candidates answer when applying."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1)
    question: str = Field(..., min_length=1, max_length=500)
    type: QuestionType = "text"
    required: bool = False
    options: Optional[list[str]] = None

    @field_validator("id", "question", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def select_needs_options(self) -> "SupplementalQuestion":
        if self.type == "select" and not self.options:
            raise ValueError("Select questions need at least one option")
        return self


def _unique_question_ids(questions: Optional[list[SupplementalQuestion]]):
    ids = [question.id for question in questions or []]
    if len(ids) != len(set(ids)):
        raise ValueError("Supplemental question ids must be unique within a job")
    return questions


class JobBase(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    description: Optional[str] = Field(None, max_length=20000)
    salary_range: Optional[str] = Field(None, max_length=100)
    deadline: Optional[datetime] = Field(None, description="Application deadline")
    requirements: Optional[dict[str, Any]] = Field(
        None, description="Free-form requirements document"
    )

    @field_validator("description", "salary_range", mode="before")
    @classmethod
    def strip_optional(cls, v: Any) -> Any:
        return strip_or_none(v)

    @field_validator("deadline")
    @classmethod
    def deadline_in_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class JobCreate(JobBase):
    """Schema for posting a job."""

    title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    location: str = Field(..., min_length=1, max_length=200)
    status: JobStatus = Field(default=JobStatus.OPEN)
    supplemental_questions: list[SupplementalQuestion] = Field(
        default_factory=list,
        validation_alias=AliasChoices("supplemental_questions", "supplementalQuestions"),
    )

    @field_validator("title", "company", "location", mode="before")
    @classmethod
    def strip_required(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("supplemental_questions")
    @classmethod
    def unique_question_ids(cls, v: list[SupplementalQuestion]) -> list[SupplementalQuestion]:
        return _unique_question_ids(v)


class JobUpdate(JobBase):
    """
    Partial update; only fields present in the body are applied.

    Replacing ``requirements`` keeps the job's supplemental questions; they
    change only when ``supplemental_questions`` is sent (null or [] clears them).
    """

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    status: Optional[JobStatus] = None
    supplemental_questions: Optional[list[SupplementalQuestion]] = Field(
        None,
        validation_alias=AliasChoices("supplemental_questions", "supplementalQuestions"),
    )

    @field_validator("title", "company", "location", mode="before")
    @classmethod
    def strip_required(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("supplemental_questions")
    @classmethod
    def unique_question_ids(
        cls, v: Optional[list[SupplementalQuestion]]
    ) -> Optional[list[SupplementalQuestion]]:
        return _unique_question_ids(v)

    @model_validator(mode="after")
    def no_nulls_for_required(self) -> "JobUpdate":
        for name in ("title", "company", "location", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class JobResponse(ResponseModel):
    id: str
    employer_id: Optional[str] = None
    title: str
    company: str
    location: str
    description: Optional[str] = None
    salary_range: Optional[str] = None
    requirements: Optional[dict[str, Any]] = None
    supplemental_questions: list[dict[str, Any]] = Field(default_factory=list)
    status: JobStatus
    deadline: Optional[datetime] = None
    urgency: Optional[str] = Field(None, description="urgent, soon, normal, expired or none")
    deadline_text: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def derive_urgency(self) -> "JobResponse":
        self.urgency = deadline_status(self.deadline)
        self.deadline_text = deadline_text(self.deadline)
        return self


class RecruiterJobResponse(JobResponse):
    application_count: int = 0
