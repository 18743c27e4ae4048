from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    # SQLite often returns naive datetimes; treat as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
