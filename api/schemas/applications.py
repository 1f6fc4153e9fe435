"""Application-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Optional
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from api.schemas.common import ResponseModel, clean_optional_url
from database.models.applications import ApplicationStatus
from database.models.jobs import JobStatus

MAX_COVER_LETTER_LENGTH = 5000


def normalize_answers(value: Any) -> dict[str, str]:
    """
    Accept answers as ``{question_id: answer}`` or as a list of
    ``{"questionId": ..., "answer": ...}`` pairs and return the mapping form.
    Answers are stringified and trimmed.
    """
    if value is None:
        return {}

    if isinstance(value, list):
        pairs = {}
        for item in value:
            if not isinstance(item, dict):
                raise ValueError("Each answer must be an object with questionId and answer")
            question_id = item.get("questionId", item.get("question_id"))
            if not question_id:
                raise ValueError("Each answer must include a questionId")
            pairs[str(question_id)] = item.get("answer")
        value = pairs

    if not isinstance(value, dict):
        raise ValueError("Supplemental answers must be a mapping of question id to answer")

    normalized = {}
    for question_id, answer in value.items():
        if answer is None:
            continue
        normalized[str(question_id)] = answer.strip() if isinstance(answer, str) else str(answer)
    return normalized


class ApplicationCreate(BaseModel):
    """Schema for a one-click application."""

    model_config = ConfigDict(extra="ignore")

    job_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("job_id", "jobId"),
        description="Job being applied to",
    )
    supplemental_answers: dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("supplemental_answers", "supplementalAnswers"),
        description="Answers keyed by supplemental question id",
    )
    cover_letter: Optional[str] = Field(None, max_length=MAX_COVER_LETTER_LENGTH)
    resume_url: Optional[str] = Field(
        None, description="Defaults to the resume on the candidate's profile"
    )

    @model_validator(mode="before")
    @classmethod
    def merge_answer_forms(cls, data: Any) -> Any:
        # both spellings may arrive together; snake_case wins on conflict
        if isinstance(data, dict) and "supplementalAnswers" in data and "supplemental_answers" in data:
            data = dict(data)
            merged = normalize_answers(data.pop("supplementalAnswers"))
            merged.update(normalize_answers(data["supplemental_answers"]))
            data["supplemental_answers"] = merged
        return data

    @field_validator("job_id", mode="before")
    @classmethod
    def strip_job_id(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("supplemental_answers", mode="before")
    @classmethod
    def coerce_answers(cls, v: Any) -> dict[str, str]:
        return normalize_answers(v)

    @field_validator("resume_url", mode="before")
    @classmethod
    def check_resume_url(cls, v: Any) -> Optional[str]:
        return clean_optional_url(v)


class ApplicationStatusUpdate(BaseModel):
    """
    New status for an application.

    Parsed by the service so that ownership is checked before the value.
    """

    status: str = Field(..., description='Canonical value or label, e.g. "Interview"')


class ApplicationResponse(ResponseModel):
    id: str
    job_id: str
    candidate_id: str
    status: ApplicationStatus
    status_label: Optional[str] = None
    resume_url: Optional[str] = None
    cover_letter: Optional[str] = None
    supplemental_answers: Optional[dict[str, str]] = None
    applied_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def fill_label(self) -> "ApplicationResponse":
        self.status_label = self.status.label
        return self


class ApplicationCreateResponse(BaseModel):
    application: ApplicationResponse
    created: bool = Field(description="False when the caller had already applied")


class CandidateSnapshot(ResponseModel):
    """Candidate contact details joined at read time."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    offer_deadline: Optional[datetime] = None


class JobApplicationResponse(ApplicationResponse):
    candidate: Optional[CandidateSnapshot] = None


class ApplicationJobSummary(ResponseModel):
    id: str
    title: str
    company: str
    location: str
    status: JobStatus
    deadline: Optional[datetime] = None
    supplemental_questions: list[dict[str, Any]] = Field(default_factory=list)


class MyApplicationResponse(ApplicationResponse):
    job: Optional[ApplicationJobSummary] = None


class ApplicationDetailResponse(BaseModel):
    application: ApplicationResponse
    job: ApplicationJobSummary
    candidate: Optional[dict[str, Any]] = Field(
        None, description="Candidate profile with a normalized display block"
    )
