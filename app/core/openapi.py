"""OpenAPI customization.

Adds tag descriptions and an ``X-API-Key`` security scheme that applies only
to admin endpoints; the contact form and health check stay public.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

ADMIN_PATH_PREFIXES = ("/api/github",)

TAGS_METADATA = [
    {"name": "Contact", "description": "Public contact form submission."},
    {"name": "Admin", "description": "One-off operational endpoints (X-API-Key required)."},
    {"name": "Health", "description": "Liveness check."},
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Wrap ``app.openapi`` to inject tags and the admin security scheme."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "AdminApiKey",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-API-Key",
                "description": "Admin API key (APP_ADMIN_API_KEYS).",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            if not path.startswith(ADMIN_PATH_PREFIXES):
                continue
            for method_obj in methods.values():
                if isinstance(method_obj, dict):
                    method_obj["security"] = [{"AdminApiKey": []}]

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
