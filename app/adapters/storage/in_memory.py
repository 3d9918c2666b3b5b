"""Process-lifetime storage backend used when no database is configured."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from app.adapters.storage.base import AbstractStorage
from app.core.errors import StorageAppError
from app.schemas.contact import ContactSubmission, ContactSubmissionCreate
from app.schemas.user import User, UserCreate


class InMemoryStorage(AbstractStorage):
    """Dict-backed storage. Everything is lost when the process exits."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._submissions: dict[str, ContactSubmission] = {}

    def __len__(self) -> int:
        return len(self._submissions)

    async def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    async def create_user(self, user: UserCreate) -> User:
        if await self.get_user_by_username(user.username) is not None:
            raise StorageAppError(code="username_taken", message="Username already exists")
        stored = User(id=str(uuid.uuid4()), **user.model_dump())
        self._users[stored.id] = stored
        return stored

    async def insert_contact_submission(
        self,
        submission: ContactSubmissionCreate,
    ) -> ContactSubmission:
        stored = ContactSubmission(
            id=str(uuid.uuid4()),
            submitted_at=datetime.now(timezone.utc),
            **submission.model_dump(),
        )
        self._submissions[stored.id] = stored
        return stored

    async def get_contact_submission(self, submission_id: str) -> ContactSubmission | None:
        return self._submissions.get(submission_id)
