"""GitHub REST API adapter for the repository bootstrap endpoint."""

import logging
from typing import Any

import httpx

from app.adapters.github.base import AbstractRepositoryHost, RepositoryInfo
from app.core.errors import GitHubAppError

logger = logging.getLogger(__name__)


class GitHubClient(AbstractRepositoryHost):
    """Creates or reuses a repository owned by the token's account.

    Each call opens its own ``httpx.AsyncClient``; no connection or credential
    state outlives a request.
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = "https://api.github.com",
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            token: GitHub token with ``repo`` scope.
            api_url: REST API base URL.
            timeout_seconds: Per-request timeout.
            transport: Optional httpx transport (used by tests).
        """
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._api_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    @staticmethod
    def _to_info(data: dict[str, Any]) -> RepositoryInfo:
        return RepositoryInfo(
            name=data["name"],
            url=data["html_url"],
            clone_url=data["clone_url"],
        )

    @staticmethod
    def _raise_for(response: httpx.Response, action: str) -> None:
        if response.is_success:
            return
        raise GitHubAppError(
            code="github_api_error",
            message=f"GitHub API call failed while trying to {action}",
            details={"status_code": response.status_code},
        )

    async def ensure_repository(
        self,
        name: str,
        *,
        description: str = "",
        private: bool = False,
    ) -> RepositoryInfo:
        try:
            async with self._client() as client:
                user_resp = await client.get("/user")
                self._raise_for(user_resp, "read the authenticated user")
                login = user_resp.json()["login"]

                create_resp = await client.post(
                    "/user/repos",
                    json={
                        "name": name,
                        "description": description,
                        "private": private,
                        "auto_init": False,
                    },
                )
                if create_resp.status_code == 422:
                    # Name already taken on this account
                    logger.info("github.repository_exists", extra={"repo_name": name})
                    existing = await client.get(f"/repos/{login}/{name}")
                    self._raise_for(existing, "look up the existing repository")
                    return self._to_info(existing.json())

                self._raise_for(create_resp, "create the repository")
                logger.info("github.repository_created", extra={"repo_name": name})
                return self._to_info(create_resp.json())
        except httpx.HTTPError as exc:
            raise GitHubAppError(
                code="github_unreachable",
                message="Could not reach the GitHub API",
                details={"context": {"error_type": type(exc).__name__}},
            ) from exc
