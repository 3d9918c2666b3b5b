"""Storage adapter layer - in-memory and relational backends behind one interface."""

from app.adapters.storage.base import AbstractStorage
from app.adapters.storage.factory import create_storage
from app.adapters.storage.in_memory import InMemoryStorage
from app.adapters.storage.sql import SQLAlchemyStorage

__all__ = [
    "AbstractStorage",
    "InMemoryStorage",
    "SQLAlchemyStorage",
    "create_storage",
]
