from datetime import datetime, timezone


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensures a datetime object is timezone-aware and in UTC.
    If input is naive, it assumes UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt
