from __future__ import annotations

from app.api.routes.contact import router as contact_router
from app.api.routes.github import router as github_router
from app.api.routes.health import router as health_router

__all__ = ["contact_router", "github_router", "health_router"]
