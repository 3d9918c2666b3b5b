from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RepositoryInfo:
	"""Public coordinates of a hosted repository."""

	name: str
	url: str
	clone_url: str


class AbstractRepositoryHost(ABC):
	"""Interface for code hosts that can create or look up repositories."""

	@abstractmethod
	async def ensure_repository(
		self,
		name: str,
		*,
		description: str = "",
		private: bool = False,
	) -> RepositoryInfo:
		"""Create ``name`` for the authenticated account, or return it if it exists.

		Args:
			name: Repository name.
			description: Description used when the repository is created.
			private: Create the repository as private.

		Returns:
			RepositoryInfo: Name and URLs of the created or existing repository.

		Raises:
			GitHubAppError: If the host rejects the call or is unreachable.
		"""
		...
