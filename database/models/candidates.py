"""Candidate profile model (one row per user)."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from core.utils.datetime import now
from database.engine import Base


class CandidateProfile(Base):
    __tablename__ = "candidate_profiles"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    # Contact
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Resume
    resume_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    resume_path: Mapped[str | None] = mapped_column(
        Text, nullable=True, comment="Content store key of the current resume"
    )
    resume_original_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    resume_mime_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    resume_size: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Background
    education: Mapped[str | None] = mapped_column(String(200), nullable=True)
    school: Mapped[str | None] = mapped_column(String(200), nullable=True)
    degree_level: Mapped[str | None] = mapped_column(String(100), nullable=True)
    graduation_date: Mapped[str | None] = mapped_column(String(7), nullable=True)
    skills: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    experience: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    certifications: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, default=list, nullable=False
    )

    # Links
    linkedin_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    github_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    portfolio_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Work preferences
    work_authorization: Mapped[str | None] = mapped_column(String(100), nullable=True)
    requires_sponsorship: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    open_to_relocation: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    offer_deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
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
