"""Security validators."""

import re
from typing import Final

from zxcvbn import zxcvbn

MAX_SUBDOMAIN_LENGTH: Final[int] = 63  # DNS label limit
MIN_SUBDOMAIN_LENGTH: Final[int] = 3
SUBDOMAIN_REGEX: Final[str] = r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$"
RESERVED_SUBDOMAINS: Final[frozenset[str]] = frozenset({"www", "api", "admin", "app"})

# Minimum zxcvbn score (0-4 scale): 3 = "safely unguessable"
MIN_PASSWORD_SCORE: Final[int] = 3

_SUBDOMAIN_PATTERN: Final[re.Pattern[str]] = re.compile(SUBDOMAIN_REGEX)


def validate_subdomain_format(subdomain: str) -> str:
    """Validate a tenant subdomain (a single DNS label).

    This validates **format only**. Length is enforced by Field(max_length=...).
    """
    if not _SUBDOMAIN_PATTERN.match(subdomain):
        raise ValueError(
            "Subdomain must contain only lowercase letters, numbers and hyphens, "
            "and must not start or end with a hyphen"
        )
    if subdomain in RESERVED_SUBDOMAINS:
        raise ValueError(f"Subdomain '{subdomain}' is reserved")
    return subdomain


def validate_password_strength(password: str) -> str:
    """Validate password strength using zxcvbn entropy estimation."""
    result = zxcvbn(password)
    if result["score"] >= MIN_PASSWORD_SCORE:
        return password

    feedback = result.get("feedback", {})
    warning = feedback.get("warning", "")
    suggestions = feedback.get("suggestions", [])

    if warning:
        raise ValueError(f"Weak password: {warning}")
    if suggestions:
        raise ValueError(f"Weak password: {suggestions[0]}")
    raise ValueError("Password is too weak. Use a longer password with a mix of characters.")
