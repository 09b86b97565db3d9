"""
Date and datetime helpers for Patient Service API.

- Timestamps (created_at, error timestamps) are timezone-aware UTC.
- Appointment dates are calendar dates exchanged as strict ISO 8601
  ``YYYY-MM-DD`` strings, both on the wire and in SQLite.

Usage:
    from core.datetime_utils import utc_now, parse_iso_date, format_iso

    appointment_day = parse_iso_date(" 2024-02-15 ")   # date(2024, 2, 15)
    created_at = format_iso(utc_now())                  # "2024-02-15T10:30:00Z"
"""
import logging
import re
from datetime import date, datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

# Four-digit year, two-digit month and day. date.fromisoformat alone also
# accepts the basic "20240215" form on newer interpreters.
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# =============================================================================
# CORE UTILITIES
# =============================================================================

def utc_now() -> datetime:
    """Get current datetime in UTC with timezone info."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# =============================================================================
# PARSING
# =============================================================================

def parse_iso_date(value: str) -> date:
    """
    Parse an ISO 8601 calendar date.

    Surrounding whitespace is trimmed first. The remaining text must be
    exactly ``YYYY-MM-DD`` and name a real day.

    Args:
        value: Date string, e.g. "2024-02-15".

    Returns:
        date: The parsed calendar date.

    Raises:
        ValueError: If the value is not a string, does not match the
            pattern, or is not a valid calendar date (e.g. "2024-02-30").

    Examples:
        >>> parse_iso_date("2024-02-15")
        datetime.date(2024, 2, 15)
        >>> parse_iso_date("15/02/2024")
        Traceback (most recent call last):
        ...
        ValueError: Text '15/02/2024' could not be parsed as an ISO date (YYYY-MM-DD)
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected date string, got {type(value).__name__}")

    text = value.strip()
    if not _ISO_DATE_RE.match(text):
        raise ValueError(f"Text '{text}' could not be parsed as an ISO date (YYYY-MM-DD)")

    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Text '{text}' could not be parsed: {e}") from e


def parse_iso_date_safe(value: Optional[str]) -> Optional[date]:
    """Parse a date, returning None for missing or unparsable input."""
    if value is None:
        return None
    try:
        return parse_iso_date(value)
    except ValueError as e:
        logger.warning(f"Failed to parse date '{value}': {e}")
        return None


# =============================================================================
# FORMATTING
# =============================================================================

def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string with 'Z' suffix.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00Z'
    """
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_iso_date(value: Optional[date]) -> Optional[str]:
    """Format a date for SQLite storage, passing None through."""
    return value.isoformat() if value is not None else None
