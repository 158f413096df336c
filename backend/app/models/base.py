"""Shared model mixins and portable column types"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, JSON, String, Enum as SQLEnum
from sqlalchemy.dialects import postgresql


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# PostgreSQL gets native ARRAY/JSONB; other dialects (SQLite in tests) store JSON
StringArray = JSON().with_variant(postgresql.ARRAY(String()), "postgresql")
JSONDocument = JSON().with_variant(postgresql.JSONB(), "postgresql")


class TimestampMixin:
    """Adds created_at / updated_at columns"""

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


def value_enum(enum_cls, name: str) -> SQLEnum:
    """Enum column type that stores member values (lowercase strings) rather than names"""
    return SQLEnum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])
