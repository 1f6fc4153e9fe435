"""Datetime utilities for timestamps and job deadlines."""

from datetime import datetime, timezone
from typing import Literal, Optional

DeadlineStatus = Literal["urgent", "soon", "normal", "expired", "none"]

SECONDS_PER_DAY = 60 * 60 * 24


def now() -> datetime:
    """Get current datetime in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes, convert aware ones to UTC.

    Some backends (SQLite) hand back naive datetimes even for
    ``DateTime(timezone=True)`` columns; everything we store is UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_until(deadline: datetime, reference: Optional[datetime] = None) -> float:
    """Fractional days from ``reference`` (default: now) to ``deadline``."""
    reference = ensure_utc(reference) or now()
    return (ensure_utc(deadline) - reference).total_seconds() / SECONDS_PER_DAY


def is_expired(deadline: Optional[datetime], reference: Optional[datetime] = None) -> bool:
    if deadline is None:
        return False
    return days_until(deadline, reference) < 0


def deadline_status(
    deadline: Optional[datetime], reference: Optional[datetime] = None
) -> DeadlineStatus:
    """
    Classify how close a deadline is.

    Returns:
        ``none`` without a deadline, ``expired`` once passed, ``urgent`` under
        three days, ``soon`` under a week, otherwise ``normal``
    """
    if deadline is None:
        return "none"
    days = days_until(deadline, reference)
    if days < 0:
        return "expired"
    if days < 3:
        return "urgent"
    if days < 7:
        return "soon"
    return "normal"


def deadline_text(deadline: Optional[datetime], reference: Optional[datetime] = None) -> str:
    """Human readable countdown such as "3 days left" or "Due in 5 hours"."""
    if deadline is None:
        return "No deadline"
    days = days_until(deadline, reference)
    if days < 0:
        return "Expired"

    whole_days = int(days)
    if whole_days == 0:
        hours = int(days * 24)
        if hours <= 1:
            return "Due in 1 hour"
        return f"Due in {hours} hours"
    if whole_days == 1:
        return "1 day left"
    if whole_days < 7:
        return f"{whole_days} days left"

    weeks = whole_days // 7
    if weeks == 1:
        return "1 week left"
    if weeks < 4 or whole_days < 30:
        return f"{weeks} weeks left"

    months = whole_days // 30
    if months == 1:
        return "1 month left"
    return f"{months} months left"


def epoch_millis(dt: Optional[datetime] = None) -> int:
    """Milliseconds since the Unix epoch."""
    return int((ensure_utc(dt) or now()).timestamp() * 1000)
