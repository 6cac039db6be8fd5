"""Time utilities for timezone-aware UTC datetimes and stored timestamps."""

from datetime import UTC, datetime

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def timestamp(moment: datetime | None = None) -> str:
    """Format a UTC moment the way timestamp columns store it.

    SQLite date functions understand this layout, and the microsecond part keeps
    two writes within the same second ordered.
    """
    return (moment or utc_now()).strftime(TIMESTAMP_FORMAT)
