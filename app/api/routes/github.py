from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.adapters.github.factory import create_repository_host
from app.core.auth import verify_admin_key
from app.core.config import Settings
from app.core.dependencies import get_app_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Admin"])


class RepositoryPayload(BaseModel):
    name: str
    url: str
    clone_url: str


class RepositoryBootstrapResponse(BaseModel):
    success: bool = True
    message: str = "Repository created/found successfully"
    repository: RepositoryPayload


@router.post(
    "/github/push",
    response_model=RepositoryBootstrapResponse,
    dependencies=[Depends(verify_admin_key)],
)
async def bootstrap_repository(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> RepositoryBootstrapResponse:
    """Create the website repository on GitHub, or reuse it if it already exists.

    A fresh client is built per call from the configured token.
    """
    host = create_repository_host(settings.github)
    info = await host.ensure_repository(
        settings.github.repo_name,
        description=settings.github.repo_description,
        private=settings.github.repo_private,
    )
    logger.info("github.bootstrap_done", extra={"repo_name": info.name})
    return RepositoryBootstrapResponse(
        repository=RepositoryPayload(name=info.name, url=info.url, clone_url=info.clone_url),
    )
