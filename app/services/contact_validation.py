"""Validation of raw contact form payloads."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from app.core.errors import FieldProblem, ValidationAppError
from app.schemas.contact import ContactSubmissionCreate

_MESSAGES_BY_TYPE = {
    "missing": "Field is required",
    "string_too_short": "Field must not be empty",
    "string_type": "Field must be a string",
}


def _field_problems(exc: ValidationError) -> list[FieldProblem]:
    """Collapse pydantic errors into one problem per top-level field."""

    problems: list[FieldProblem] = []
    seen: set[str] = set()
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else "body"
        if field in seen:
            continue
        seen.add(field)
        problems.append(
            {
                "field": field,
                "message": _MESSAGES_BY_TYPE.get(err.get("type", ""), err.get("msg", "Invalid value")),
            }
        )
    return problems


def validate_contact_submission(payload: Any) -> ContactSubmissionCreate:
    """Validate and normalize a contact form payload.

    Args:
        payload: Decoded request body (expected to be a JSON object).

    Returns:
        ContactSubmissionCreate with trimmed strings and ``company`` set to
        None when absent or empty.

    Raises:
        ValidationAppError: With one ``{"field", "message"}`` problem per
            missing or invalid field.
    """
    if not isinstance(payload, dict):
        raise ValidationAppError(
            code="invalid_form_data",
            message="Invalid form data",
            details={"errors": [{"field": "body", "message": "Expected a JSON object"}]},
        )

    try:
        return ContactSubmissionCreate.model_validate(payload)
    except ValidationError as exc:
        raise ValidationAppError(
            code="invalid_form_data",
            message="Invalid form data",
            details={"errors": _field_problems(exc)},
        ) from exc
