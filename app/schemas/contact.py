"""Pydantic schemas for contact form submissions."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class ContactSubmissionCreate(BaseModel):
    """Normalized contact form input, ready to be stored."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: StrictStr = Field(..., min_length=1, description="Sender's name.")
    email: StrictStr = Field(
        ...,
        min_length=1,
        description="Sender's email address (presence only, format is not enforced).",
    )
    company: StrictStr | None = Field(
        default=None,
        description="Optional company name; empty values are stored as null.",
    )
    message: StrictStr = Field(..., min_length=1, description="Message body.")

    @field_validator("company")
    @classmethod
    def _blank_company_is_null(cls, value: str | None) -> str | None:
        return value or None


class ContactSubmission(BaseModel):
    """A persisted contact submission."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Opaque unique identifier (UUID4).")
    name: str
    email: str
    company: str | None = None
    message: str
    submitted_at: datetime = Field(..., description="UTC time the record was stored.")


class ContactSubmissionResponse(BaseModel):
    """Body returned after a successful submission."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Contact form submitted successfully"
    submission_id: str = Field(..., alias="submissionId")


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Envelope used for every failed request."""

    success: bool = False
    message: str
    errors: list[FieldError] | None = None
