from datetime import UTC, datetime


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


def _ensure_utc(value: datetime | None) -> datetime | None:
    """Interpret naive datetimes as UTC so comparisons never mix naive and aware values."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
