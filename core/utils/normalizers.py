"""
Display normalization for candidate data.

Stored profiles keep what the candidate typed; these helpers produce the
standardized form shown to recruiters.
"""

import re


def normalize_name(name: str | None) -> str:
    """Title-case each space separated word ("john DOE" -> "John Doe")."""
    if not name:
        return ""
    return " ".join(word[:1].upper() + word[1:] for word in name.strip().lower().split(" "))


def normalize_email(email: str | None) -> str:
    if not email:
        return ""
    return email.strip().lower()


def normalize_phone(phone: str | None) -> str:
    """
    Format phone numbers by digit count.

    10 digits become ``(XXX) XXX-XXXX``, 11 digits with a leading 1 become
    ``+1-XXX-XXX-XXXX`` and longer numbers ``+CC-XXX-XXX-XXXX``. Anything
    else is returned trimmed.
    """
    if not phone:
        return ""

    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+1-{digits[1:4]}-{digits[4:7]}-{digits[7:]}"
    if len(digits) > 11:
        country, number = digits[:-10], digits[-10:]
        return f"+{country}-{number[:3]}-{number[3:6]}-{number[6:]}"
    return phone.strip()


def normalize_skills(skills: list[str] | None) -> list[str]:
    """Lowercase, trim, drop blanks and de-duplicate keeping first occurrence."""
    if not skills:
        return []

    seen: dict[str, None] = {}
    for skill in skills:
        if isinstance(skill, str) and skill.strip():
            seen.setdefault(skill.strip().lower(), None)
    return list(seen)


def normalize_url(url: str | None) -> str:
    """Prefix bare hosts with https://."""
    if not url or not url.strip():
        return ""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        return f"https://{url}"
    return url
