"""Factory for the repository host used by the bootstrap endpoint."""

from app.adapters.github.base import AbstractRepositoryHost
from app.adapters.github.client import GitHubClient
from app.core.config import GitHubSettings
from app.core.errors import GitHubAppError


def create_repository_host(github: GitHubSettings) -> AbstractRepositoryHost:
    """Build a GitHub client from settings.

    Raises:
        GitHubAppError: If no token is configured.
    """
    if not github.token:
        raise GitHubAppError(
            code="github_not_configured",
            message="GitHub integration is not configured",
            details={"hint": "Set GITHUB_TOKEN to enable repository bootstrap"},
        )
    return GitHubClient(
        github.token,
        api_url=github.api_url,
        timeout_seconds=github.timeout_seconds,
    )
