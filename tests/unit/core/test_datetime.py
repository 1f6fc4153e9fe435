"""Tests for deadline arithmetic and classification."""

from datetime import datetime, timedelta, timezone

import pytest

from core.utils.datetime import (
    days_until,
    deadline_status,
    deadline_text,
    ensure_utc,
    epoch_millis,
    is_expired,
)

REFERENCE = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestEnsureUtc:
    def test_naive_gets_utc(self):
        assert ensure_utc(datetime(2025, 1, 1)).tzinfo == timezone.utc

    def test_aware_is_converted(self):
        plus_two = timezone(timedelta(hours=2))
        converted = ensure_utc(datetime(2025, 1, 1, 12, tzinfo=plus_two))
        assert converted == datetime(2025, 1, 1, 10, tzinfo=timezone.utc)

    def test_none(self):
        assert ensure_utc(None) is None


class TestDeadlineStatus:
    @pytest.mark.parametrize("days,expected", [
        (-0.01, "expired"),
        (0, "urgent"),
        (2.99, "urgent"),
        (3, "soon"),
        (6.9, "soon"),
        (7, "normal"),
        (45, "normal"),
    ])
    def test_thresholds(self, days, expected):
        assert deadline_status(REFERENCE + timedelta(days=days), REFERENCE) == expected

    def test_no_deadline(self):
        assert deadline_status(None, REFERENCE) == "none"

    def test_naive_deadline_treated_as_utc(self):
        naive = (REFERENCE + timedelta(days=1)).replace(tzinfo=None)
        assert deadline_status(naive, REFERENCE) == "urgent"


class TestDeadlineText:
    @pytest.mark.parametrize("delta,expected", [
        (timedelta(minutes=30), "Due in 1 hour"),
        (timedelta(hours=5, minutes=30), "Due in 5 hours"),
        (timedelta(days=1, hours=2), "1 day left"),
        (timedelta(days=3), "3 days left"),
        (timedelta(days=8), "1 week left"),
        (timedelta(days=21), "3 weeks left"),
        (timedelta(days=28), "4 weeks left"),
        (timedelta(days=29, hours=23), "4 weeks left"),
        (timedelta(days=30), "1 month left"),
        (timedelta(days=35), "1 month left"),
        (timedelta(days=95), "3 months left"),
        (timedelta(seconds=-1), "Expired"),
    ])
    def test_countdown(self, delta, expected):
        assert deadline_text(REFERENCE + delta, REFERENCE) == expected

    def test_no_deadline(self):
        assert deadline_text(None) == "No deadline"


class TestArithmetic:
    def test_days_until_is_fractional(self):
        assert days_until(REFERENCE + timedelta(hours=36), REFERENCE) == pytest.approx(1.5)

    def test_is_expired(self):
        assert is_expired(REFERENCE - timedelta(seconds=1), REFERENCE)
        assert not is_expired(REFERENCE + timedelta(seconds=1), REFERENCE)
        assert not is_expired(None, REFERENCE)

    def test_epoch_millis(self):
        assert epoch_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)) == 1000
