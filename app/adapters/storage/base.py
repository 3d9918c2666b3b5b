from __future__ import annotations

from abc import ABC, abstractmethod

from app.schemas.contact import ContactSubmission, ContactSubmissionCreate
from app.schemas.user import User, UserCreate


class AbstractStorage(ABC):
	"""Persistence interface shared by the in-memory and relational backends."""

	backend_name: str = "abstract"

	@abstractmethod
	async def get_user(self, user_id: str) -> User | None:
		"""Return the user with ``user_id`` or None."""
		...

	@abstractmethod
	async def get_user_by_username(self, username: str) -> User | None:
		"""Return the user named ``username`` or None."""
		...

	@abstractmethod
	async def create_user(self, user: UserCreate) -> User:
		"""Store a new user under a fresh identifier.

		Raises:
			StorageAppError: ``username_taken`` when the username exists.
		"""
		...

	@abstractmethod
	async def insert_contact_submission(
		self,
		submission: ContactSubmissionCreate,
	) -> ContactSubmission:
		"""Persist a validated submission.

		Args:
			submission: Normalized form data.

		Returns:
			ContactSubmission: The stored record with its new id and timestamp.

		Raises:
			StoreUnavailableError: If the backend was never configured.
			Exception: Backend-specific failures propagate unchanged.
		"""
		...

	@abstractmethod
	async def get_contact_submission(self, submission_id: str) -> ContactSubmission | None:
		"""Return a stored submission by id, or None."""
		...

	def close(self) -> None:
		"""Release backend resources. No-op by default."""
