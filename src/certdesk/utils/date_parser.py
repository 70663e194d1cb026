"""Date parsing utilities."""

from datetime import UTC, date, datetime, tzinfo
from typing import Optional

from dateutil import parser as date_parser


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a timestamp string from the remote service.

    Accepts ISO 8601 (``2024-01-15T10:30:00.000Z``) and the other formats
    understood by dateutil. Naive results are assumed to be UTC.

    Args:
        value: Timestamp string, or None

    Returns:
        Timezone-aware datetime, or None if value is empty or unparsable
    """
    if not value:
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def calendar_date(value: datetime, tz: Optional[tzinfo] = None) -> date:
    """Return the calendar date of a timestamp in the given zone (UTC by default)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(tz or UTC).date()


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Format a timestamp the way the remote service does (ISO 8601, ``Z`` suffix)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    text = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")
