import json
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from app.core.config import Settings
from app.core.dependencies import get_app_settings, get_contact_service
from app.core.rate_limit import resolve_client_id
from app.schemas.contact import ContactSubmissionResponse, ErrorResponse
from app.services.contact_service import ContactIntakeService

router = APIRouter(tags=["Contact"])

# Sentinel handed to the validator when the body is not valid JSON
_UNPARSEABLE_BODY = object()


async def _read_json_body(request: Request) -> object:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        return _UNPARSEABLE_BODY


@router.post(
    "/contact",
    status_code=status.HTTP_201_CREATED,
    response_model=ContactSubmissionResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid form data"},
        429: {"model": ErrorResponse, "description": "Too many submissions"},
        500: {"model": ErrorResponse, "description": "Submission could not be stored"},
    },
)
async def submit_contact_form(
    request: Request,
    service: Annotated[ContactIntakeService, Depends(get_contact_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ContactSubmissionResponse:
    """Accept a contact form submission.

    The body is read raw rather than through a Pydantic parameter: the rate
    limit must be charged before any validation happens, including for bodies
    that are not JSON at all.

    Returns:
        ContactSubmissionResponse: ``success``, ``message`` and ``submissionId``.

    Raises:
        RateLimitAppError: 429 when the caller exhausted its attempts.
        ValidationAppError: 400 with field-level problems.
        StorageAppError: 500 when persistence fails.
    """
    client_id = resolve_client_id(request, settings.app)
    payload = await _read_json_body(request)
    stored = await service.submit(client_id, payload)
    return ContactSubmissionResponse(submission_id=stored.id)
