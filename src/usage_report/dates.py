"""Date parsing and formatting helpers.

All instants are UTC. Report dates are plain ``YYYY-MM-DD`` strings and are
only converted to instants at the vendor API boundary.
"""

import math
import re
from datetime import UTC, datetime

from usage_report.exceptions import DateRangeError, InvalidDateError, InvalidDateFormatError

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(text: str) -> datetime:
    """Parse a strict ``YYYY-MM-DD`` string into a UTC midnight instant.

    Args:
        text: Date string.

    Returns:
        Timezone-aware datetime at 00:00 UTC.

    Raises:
        InvalidDateFormatError: The text is not ``YYYY-MM-DD``.
        InvalidDateError: The calendar date does not exist (e.g. 2024-02-30).
    """
    if not DATE_PATTERN.fullmatch(text):
        raise InvalidDateFormatError(text)

    year, month, day = (int(part) for part in text.split("-"))
    try:
        instant = datetime(year, month, day, tzinfo=UTC)
    except ValueError as e:
        raise InvalidDateError(text) from e

    # Reject anything that would not serialize back to the same text
    if instant.date().isoformat() != text:
        raise InvalidDateError(text)

    return instant


def validate_date_range(start: datetime, end: datetime) -> None:
    """Require ``end`` to be strictly after ``start``."""
    if end <= start:
        raise DateRangeError()


def to_unix_seconds(instant: datetime) -> int:
    """Convert an instant to whole unix seconds (floored)."""
    return math.floor(instant.timestamp())


def to_rfc3339(date_text: str) -> str:
    """Midnight UTC of ``date_text`` as an RFC 3339 timestamp with milliseconds."""
    instant = parse_date(date_text)
    return instant.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def parse_rfc3339(text: str) -> int:
    """Parse an RFC 3339 timestamp into unix seconds."""
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    instant = datetime.fromisoformat(text)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return to_unix_seconds(instant)


def utc_date(unix_seconds: int | float) -> str:
    """Return the UTC calendar day of a unix timestamp as ``YYYY-MM-DD``."""
    return datetime.fromtimestamp(unix_seconds, tz=UTC).date().isoformat()


def format_report_date(date_text: str, include_year: bool) -> str:
    """Format a report date as ``January 5`` or ``January 5, 2024``."""
    instant = parse_date(date_text)
    label = f"{instant.strftime('%B')} {instant.day}"
    if include_year:
        return f"{label}, {instant.year}"
    return label
