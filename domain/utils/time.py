from datetime import UTC, datetime


def utc_now() -> datetime:
    """Returns the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)
