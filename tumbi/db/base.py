"""SQLAlchemy declarative base class."""

import json
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator, Text
from sqlalchemy.dialects.postgresql import JSONB as PG_JSONB


class JSONB(TypeDecorator):
    """
    Platform-agnostic JSONB type.

    Uses JSONB on PostgreSQL and Text with JSON serialization on other databases.
    This allows tests to run with SQLite while production uses PostgreSQL JSONB.
    """
    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PG_JSONB())
        else:
            return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if value is not None:
            if dialect.name != 'postgresql':
                return json.dumps(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            if dialect.name != 'postgresql' and isinstance(value, str):
                return json.loads(value)
        return value


def utcnow() -> datetime:
    """Timezone-aware now() for Python-side column defaults."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass
