"""Clock for the domain layer. All stored and compared times are UTC."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)
