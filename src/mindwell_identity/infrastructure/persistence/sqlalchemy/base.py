"""SQLAlchemy declarative base and column types for identity models."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, TypeDecorator
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from mindwell.domain.shared.time import utc_now


class UtcDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every backend.

    PostgreSQL hands back aware values in the connection's zone; SQLite
    drops the offset entirely. Both are normalized to UTC on load.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is not None and value.tzinfo is None:
            msg = "Naive datetimes cannot be stored"
            raise ValueError(msg)
        return value

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class IdentityBase(DeclarativeBase):
    """Base class for all identity database models."""


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime,
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UtcDateTime,
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
