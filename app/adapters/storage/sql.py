"""Relational storage backend built on SQLAlchemy.

Database calls are blocking, so each operation runs in the default executor.
The event loop (and with it the rate limiter) stays free while a slow
database call is pending.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.adapters.storage.base import AbstractStorage
from app.adapters.storage.models import Base, ContactSubmissionRecord, UserRecord
from app.core.errors import StorageAppError, StoreUnavailableError
from app.schemas.contact import ContactSubmission, ContactSubmissionCreate
from app.schemas.user import User, UserCreate

logger = logging.getLogger(__name__)

T = TypeVar("T")


def normalize_database_url(url: str) -> str:
    """Rewrite Heroku-style ``postgres://`` URLs for SQLAlchemy 2.x."""

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class SQLAlchemyStorage(AbstractStorage):
    """Storage backed by a relational database.

    Constructed without an engine, every operation raises
    ``StoreUnavailableError``.
    """

    backend_name = "sql"

    def __init__(self, engine: Engine | None) -> None:
        self._engine = engine
        self._session_factory: sessionmaker[Session] | None = (
            sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
            if engine is not None
            else None
        )

    @classmethod
    def from_url(
        cls,
        database_url: str,
        *,
        pool_pre_ping: bool = True,
        pool_recycle_seconds: int = 3600,
        echo: bool = False,
    ) -> "SQLAlchemyStorage":
        """Create an engine for ``database_url`` and wrap it.

        Args:
            database_url: SQLAlchemy URL (``postgres://`` is accepted).
            pool_pre_ping: Verify pooled connections before use.
            pool_recycle_seconds: Connection recycle age.
            echo: Log emitted SQL.
        """
        url = normalize_database_url(database_url)
        # Bound values are submission PII; keep them out of exception text
        engine_kwargs: dict[str, Any] = {"echo": echo, "hide_parameters": True}
        if url.startswith("sqlite"):
            # Sessions are opened from executor threads
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs["pool_pre_ping"] = pool_pre_ping
            engine_kwargs["pool_recycle"] = pool_recycle_seconds
        return cls(create_engine(url, **engine_kwargs))

    def init_schema(self) -> None:
        """Create missing tables."""
        engine = self._require_engine()
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("storage.schema_ready", extra={"dialect": engine.dialect.name})

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()

    def _require_engine(self) -> Engine:
        if self._engine is None:
            raise StoreUnavailableError(
                code="database_unavailable",
                message="Database not available",
                details={"hint": "Set DATABASE_URL to enable durable storage"},
            )
        return self._engine

    def _require_sessions(self) -> sessionmaker[Session]:
        self._require_engine()
        assert self._session_factory is not None
        return self._session_factory

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args))

    # Users

    def _get_user(self, sessions: sessionmaker[Session], user_id: str) -> User | None:
        with sessions() as session:
            row = session.get(UserRecord, user_id)
            return User.model_validate(row) if row is not None else None

    def _get_user_by_username(self, sessions: sessionmaker[Session], username: str) -> User | None:
        with sessions() as session:
            row = session.scalars(
                select(UserRecord).where(UserRecord.username == username)
            ).first()
            return User.model_validate(row) if row is not None else None

    def _create_user(self, sessions: sessionmaker[Session], user: UserCreate) -> User:
        row = UserRecord(id=str(uuid.uuid4()), **user.model_dump())
        try:
            with sessions() as session, session.begin():
                session.add(row)
        except IntegrityError as exc:
            raise StorageAppError(code="username_taken", message="Username already exists") from exc
        return User.model_validate(row)

    async def get_user(self, user_id: str) -> User | None:
        return await self._run(self._get_user, self._require_sessions(), user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        return await self._run(self._get_user_by_username, self._require_sessions(), username)

    async def create_user(self, user: UserCreate) -> User:
        return await self._run(self._create_user, self._require_sessions(), user)

    # Contact submissions

    def _insert_submission(
        self,
        sessions: sessionmaker[Session],
        submission: ContactSubmissionCreate,
    ) -> ContactSubmission:
        row = ContactSubmissionRecord(
            id=str(uuid.uuid4()),
            submitted_at=datetime.now(timezone.utc),
            **submission.model_dump(),
        )
        with sessions() as session, session.begin():
            session.add(row)
        return ContactSubmission.model_validate(row)

    def _get_submission(
        self,
        sessions: sessionmaker[Session],
        submission_id: str,
    ) -> ContactSubmission | None:
        with sessions() as session:
            row = session.get(ContactSubmissionRecord, submission_id)
            return ContactSubmission.model_validate(row) if row is not None else None

    async def insert_contact_submission(
        self,
        submission: ContactSubmissionCreate,
    ) -> ContactSubmission:
        return await self._run(self._insert_submission, self._require_sessions(), submission)

    async def get_contact_submission(self, submission_id: str) -> ContactSubmission | None:
        return await self._run(self._get_submission, self._require_sessions(), submission_id)
