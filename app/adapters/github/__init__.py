"""Code-hosting adapter layer used by the repository bootstrap endpoint."""

from app.adapters.github.base import AbstractRepositoryHost, RepositoryInfo
from app.adapters.github.client import GitHubClient
from app.adapters.github.factory import create_repository_host

__all__ = [
    "AbstractRepositoryHost",
    "GitHubClient",
    "RepositoryInfo",
    "create_repository_host",
]
