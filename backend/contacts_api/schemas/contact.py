"""
Contacts API — Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract.
How:   ContactService validates raw request bodies against ContactPayload
       (so failures become InvalidContactError / HTTP 400); routes use the
       response models for serialization and OpenAPI docs.

Schemas are separate from the SQLAlchemy model: `created_at` is internal and
never leaves the service.
"""

import uuid
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ContactPayload(BaseModel):
    """
    Body of POST /contacts and PUT /contacts/{id}.

    PUT is a full replacement, so both verbs share the same required fields.
    Surrounding whitespace is stripped before the non-empty checks run.
    """
    fname: str = Field(min_length=1, max_length=100, description="First name")
    lname: str = Field(min_length=1, max_length=100, description="Last name")
    email: EmailStr = Field(description="Email address, unique across contacts")
    phone: Optional[str] = Field(default=None, max_length=50, description="Phone number")
    birthday: date = Field(description="Date of birth (YYYY-MM-DD)")

    model_config = {"str_strip_whitespace": True, "extra": "ignore"}

    @field_validator("phone")
    @classmethod
    def blank_phone_is_none(cls, v: Optional[str]) -> Optional[str]:
        """An empty phone string means "no phone"."""
        return v or None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ContactResponse(BaseModel):
    """Full representation of a contact."""
    id: uuid.UUID = Field(description="Unique contact identifier (UUID)")
    fname: str
    lname: str
    email: str
    phone: Optional[str] = None
    birthday: date

    model_config = {"from_attributes": True}


class PaginationInfo(BaseModel):
    """
    Page window metadata, mirrored in the X-Page-* response headers.

    next_page / prev_page are null when that page does not exist.
    """
    total_pages: int = Field(description="Number of pages at this page size")
    total_contacts: int = Field(description="Contacts matching the filter")
    current_page: int = Field(description="The page returned")
    page_size: int = Field(description="Maximum contacts per page")
    next_page: Optional[int] = Field(default=None)
    prev_page: Optional[int] = Field(default=None)


class ContactListResponse(BaseModel):
    """Envelope returned by GET /contacts."""
    contacts: List[ContactResponse]
    pagination: PaginationInfo


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "page_out_of_range",
            "message": "Requested page 99 is out of range. Any value of 1 through 1 is allowed.",
            "details": {"page": 99, "min_page": 1, "max_page": 1},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Response of GET /health."""
    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float
