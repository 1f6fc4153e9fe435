"""Validation utilities for profile and application fields."""

import re
from typing import Optional
from urllib.parse import urlparse

# Loose on purpose: international formats, separators and blanks all pass
PHONE_PATTERN = re.compile(
    r"^[\+]?[1-9][\d]{0,15}$|^[\+]?[(]?[\d\s\-\(\)]{10,}$|^$"
)
YEAR_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def validate_phone(phone: str) -> tuple[bool, Optional[str]]:
    """
    Validate phone number format.

    Args:
        phone: Phone number to validate, empty string is accepted

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not PHONE_PATTERN.match(phone):
        return False, "Invalid phone number format"
    return True, None


def validate_url(url: str) -> tuple[bool, Optional[str]]:
    """
    Validate an absolute http(s) URL.

    Args:
        url: URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url:
        return False, "URL is required"

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False, "URL must be an absolute http(s) URL"
    if any(ch.isspace() for ch in url):
        return False, "URL must not contain whitespace"

    return True, None


def validate_year_month(value: str) -> tuple[bool, Optional[str]]:
    if not YEAR_MONTH_PATTERN.match(value):
        return False, "Date must be in YYYY-MM format"
    return True, None
