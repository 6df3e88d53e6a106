"""Date and time parsing utilities."""

from datetime import datetime, timedelta, UTC
from dateutil import parser as date_parser

from betconta.utils.clock import utcnow


def parse_datetime(value: str) -> datetime:
    """Parse a timestamp string into an aware UTC datetime.

    Supports:
    - "now"
    - Relative offsets: "+3h", "-73h", "+2d", "-30m"
    - Absolute timestamps understood by dateutil: "2024-01-15 10:30",
      "2024-01-15T10:30:00-03:00", etc. Naive values are taken as UTC.

    Args:
        value: Timestamp string

    Returns:
        Aware datetime in UTC

    Raises:
        ValueError: If the string cannot be parsed
    """
    text = value.strip().lower()
    if text == "now":
        return utcnow()

    if text[:1] in ("+", "-") and text[-1:] in ("d", "h", "m"):
        try:
            amount = int(text[:-1])
        except ValueError:
            raise ValueError(f"Could not parse relative time '{value}'")
        unit = {"d": "days", "h": "hours", "m": "minutes"}[text[-1]]
        return utcnow() + timedelta(**{unit: amount})

    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse time '{value}': {e}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
