"""ISO 8601 timestamp parsing."""

import re
from datetime import UTC, datetime

# Internet date-time, with then without fractional seconds
_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
)

# strptime's %f takes at most six digits
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an ISO 8601 timestamp with a UTC offset.

    Returns an aware UTC datetime, or None when the value is missing or does
    not match either format. Never raises.
    """
    if not value or not isinstance(value, str):
        return None

    text = _LONG_FRACTION.sub(r"\1", value.strip())
    for fmt in _FORMATS:
        try:
            return datetime.strptime(text, fmt).astimezone(UTC)
        except ValueError:
            continue
    return None
