"""FastAPI dependencies exposing components built by the app factory.

Components live on ``app.state`` for the lifetime of the application, so
routes never reach for module-level singletons.
"""

from __future__ import annotations

from fastapi import Request

from app.adapters.storage.base import AbstractStorage
from app.core.config import Settings
from app.services.contact_service import ContactIntakeService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> AbstractStorage:
    return request.app.state.storage


def get_contact_service(request: Request) -> ContactIntakeService:
    return request.app.state.contact_service
