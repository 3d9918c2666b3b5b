from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.adapters.storage.base import AbstractStorage
from app.core.dependencies import get_storage

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(storage: Annotated[AbstractStorage, Depends(get_storage)]) -> dict:
    """Health check endpoint.

    Returns:
        dict: ``status`` ("ok") and the active storage backend name.
    """

    return {"status": "ok", "storage": storage.backend_name}
