"""Time helpers shared by models and services."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, as stored in the database."""

    return datetime.now(timezone.utc).replace(tzinfo=None)
