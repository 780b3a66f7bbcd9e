"""
Core Utilities.

Shared utility functions used across the backend.
"""

from datetime import datetime, timezone

# Key separators and operators that may not appear in view-tracking keys
_FINGERPRINT_FORBIDDEN = str.maketrans({".": "_", "$": "_"})


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and
    assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def sanitize_fingerprint(raw: str) -> str:
    """Replace characters that are not allowed in view-tracking keys."""
    return raw.translate(_FINGERPRINT_FORBIDDEN)


def viewer_fingerprint(client_ip: str | None, user_agent: str | None) -> str:
    """
    Build the viewer fingerprint used for unique-view counting.

    IP and User-Agent are joined and sanitized. Collisions under-count
    distinct people and a changing address over-counts them; the counter
    is best effort.
    """
    return sanitize_fingerprint(f"{client_ip or 'unknown'}_{user_agent or 'unknown'}")
