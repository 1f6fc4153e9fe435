"""
Job posting model.

Supplemental questions are not a separate table: they live inside the free
form ``requirements`` document under ``supplementalQuestions``.
"""

import uuid
from datetime import datetime
from enum import Enum as PyEnum
from typing import Any, TYPE_CHECKING

from sqlalchemy import JSON, DateTime, Enum as SQLEnum, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.utils.datetime import now
from database.engine import Base

if TYPE_CHECKING:
    from database.models.applications import Application


SUPPLEMENTAL_QUESTIONS_KEY = "supplementalQuestions"


class JobStatus(str, PyEnum):
    """Lifecycle of a posting. Owners may set any value at any time."""

    DRAFT = "draft"
    OPEN = "open"
    CLOSED = "closed"


class Job(Base):
    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    employer_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True, comment="Owning recruiter user id"
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    company: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    salary_range: Mapped[str | None] = mapped_column(String(100), nullable=True)
    requirements: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    status: Mapped[JobStatus] = mapped_column(
        SQLEnum(
            JobStatus,
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=JobStatus.OPEN,
        nullable=False,
        index=True,
    )
    deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=now, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=now,
        server_default=func.now(),
        onupdate=now,
        nullable=False,
    )

    applications: Mapped[list["Application"]] = relationship(
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_jobs_employer_status", "employer_id", "status"),
    )

    @property
    def supplemental_questions(self) -> list[dict[str, Any]]:
        questions = (self.requirements or {}).get(SUPPLEMENTAL_QUESTIONS_KEY)
        return questions if isinstance(questions, list) else []
