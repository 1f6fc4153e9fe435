"""
Application model and the canonical application status set.
"""

import re
import uuid
from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.utils.datetime import now
from database.engine import Base

if TYPE_CHECKING:
    from database.models.jobs import Job


class ApplicationStatus(str, PyEnum):
    """
    Canonical statuses for a job application.

    There is no ordering between them: the job owner may move an application
    from any status to any other.
    """

    APPLIED = "applied"
    UNDER_REVIEW = "under_review"
    INTERVIEW = "interview"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"

    @property
    def label(self) -> str:
        """Display form, e.g. ``Under Review``."""
        return self.value.replace("_", " ").title()

    @classmethod
    def parse(cls, value: str) -> "ApplicationStatus":
        """
        Accept the canonical value or its display form.

        ``"Interview"``, ``"Under Review"``, ``"under-review"`` and
        ``"under_review"`` all resolve. Raises ValueError otherwise.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid application status: {value!r}")

        key = re.sub(r"[\s\-]+", "_", value.strip().lower())
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Invalid application status: {value!r}") from None


class Application(Base):
    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    job_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
    )
    candidate_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    status: Mapped[ApplicationStatus] = mapped_column(
        SQLEnum(
            ApplicationStatus,
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=ApplicationStatus.APPLIED,
        nullable=False,
    )
    resume_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_letter: Mapped[str | None] = mapped_column(Text, nullable=True)
    supplemental_answers: Mapped[dict[str, str] | None] = mapped_column(
        JSON, nullable=True, comment="Question id -> answer text"
    )

    # Timestamps
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=now, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=now,
        server_default=func.now(),
        onupdate=now,
        nullable=False,
    )

    job: Mapped["Job"] = relationship(back_populates="applications")

    __table_args__ = (
        UniqueConstraint("job_id", "candidate_id", name="uq_applications_job_candidate"),
        Index("idx_applications_job_status", "job_id", "status"),
    )
