"""Factory for selecting the storage backend at startup."""

import logging

from app.adapters.storage.base import AbstractStorage
from app.adapters.storage.in_memory import InMemoryStorage
from app.adapters.storage.sql import SQLAlchemyStorage
from app.core.config import DatabaseSettings

logger = logging.getLogger(__name__)


def create_storage(database: DatabaseSettings) -> AbstractStorage:
    """Build the storage backend for this process.

    A configured ``database.url`` selects the relational backend (tables are
    created if missing); otherwise submissions live in memory only.

    Args:
        database: Explicit database settings.

    Returns:
        AbstractStorage: The backend used for the rest of the process lifetime.
    """
    if database.url:
        storage = SQLAlchemyStorage.from_url(
            database.url,
            pool_pre_ping=database.pool_pre_ping,
            pool_recycle_seconds=database.pool_recycle_seconds,
            echo=database.echo,
        )
        storage.init_schema()
        logger.info("storage.selected", extra={"backend": storage.backend_name})
        return storage

    logger.warning(
        "storage.selected",
        extra={
            "backend": InMemoryStorage.backend_name,
            "reason": "database_url_not_configured",
        },
    )
    return InMemoryStorage()
