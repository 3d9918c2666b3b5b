"""SQLAlchemy table models for the relational backend."""

from datetime import timezone

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every dialect.

    SQLite drops the offset on write, so values are stored as UTC and tagged
    as UTC again when read back.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class UserRecord(Base):
    """Users table (kept for interface completeness, unused by the contact flow)."""
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)


class ContactSubmissionRecord(Base):
    """Accepted contact form submissions. Rows are never updated."""
    __tablename__ = "contact_submissions"

    id = Column(String, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    company = Column(Text, nullable=True)
    message = Column(Text, nullable=False)
    submitted_at = Column(UTCDateTime(), nullable=False, index=True)
