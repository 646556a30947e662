"""
Contacts API — Contact Route Handlers
=======================================

What:  CRUD endpoints for the contact resource.
How:   Handlers parse query parameters and X-Filter-* headers, delegate to
       ContactService, and translate results into status codes and headers.
       Errors are raised as ContactsAPIError subclasses and rendered by the
       handler registered in main.py.

Endpoints:
    GET    /contacts          list (filter headers, sort/direction/page/size)
    GET    /contacts/{id}     fetch one
    POST   /contacts          create → 201 + Location
    PUT    /contacts/{id}     replace → 303 See Other + Location
    DELETE /contacts/{id}     delete → 200 with the deleted contact

The same router is also mounted under /v1.

Pagination headers on GET /contacts:
    X-Page-Total   number of pages (always present)
    X-Page-Next    next page number (only when it exists)
    X-Page-Prev    previous page number (only when it exists)
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Header, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from contacts_api.database import get_db_session
from contacts_api.repositories.contact_repository import ContactRepository
from contacts_api.schemas.contact import (
    ContactListResponse,
    ContactResponse,
    ErrorResponse,
)
from contacts_api.services.contact_service import ContactService
from contacts_api.services.list_query import FilterSpec, ListQuery, PageSpec, SortSpec

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contacts"])


def get_contact_service(db: AsyncSession = Depends(get_db_session)) -> ContactService:
    """Build a ContactService around this request's repository."""
    return ContactService(ContactRepository(db))


@router.get(
    "/contacts",
    response_model=ContactListResponse,
    responses={
        200: {"description": "One page of contacts", "model": ContactListResponse},
        400: {"description": "Unsupported filter operator", "model": ErrorResponse},
        416: {"description": "Requested page out of range", "model": ErrorResponse},
    },
    summary="List contacts with filtering, sorting and pagination",
)
async def list_contacts(
    request: Request,
    response: Response,
    sort: str | None = Query(default=None, description="Field to sort by (default: lname)"),
    direction: str | None = Query(default=None, description="asc (default) or desc"),
    page: int = Query(default=1, description="1-indexed page number"),
    size: int | None = Query(default=None, ge=1, description="Contacts per page"),
    filter_by: str | None = Header(default=None, alias="X-Filter-By"),
    filter_operator: str | None = Header(default=None, alias="X-Filter-Operator"),
    filter_value: str | None = Header(default=None, alias="X-Filter-Value"),
    service: ContactService = Depends(get_contact_service),
) -> ContactListResponse:
    """
    List contacts.

    Example:
        GET /contacts?sort=fname&direction=desc&page=2&size=10
        X-Filter-By: birthday
        X-Filter-Operator: gte
        X-Filter-Value: 1990-01-01

    Sizes above the configured max_page_size are capped to it.
    """
    settings = request.app.state.settings
    page_size = min(size or settings.default_page_size, settings.max_page_size)

    query = ListQuery(
        filter=FilterSpec.from_headers(filter_by, filter_operator, filter_value),
        sort=SortSpec(field=sort or "lname", direction=direction or "asc"),
        page=PageSpec(page=page, size=page_size),
    )
    result = await service.list_contacts(query)

    pagination = result.pagination
    response.headers["X-Page-Total"] = str(pagination.total_pages)
    if pagination.next_page is not None:
        response.headers["X-Page-Next"] = str(pagination.next_page)
    if pagination.prev_page is not None:
        response.headers["X-Page-Prev"] = str(pagination.prev_page)

    return result


@router.get(
    "/contacts/{contact_id}",
    response_model=ContactResponse,
    responses={404: {"description": "Contact not found", "model": ErrorResponse}},
    summary="Get a single contact by ID",
)
async def get_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    return await service.get_contact(contact_id)


@router.post(
    "/contacts",
    status_code=201,
    response_model=ContactResponse,
    responses={
        201: {"description": "Contact created", "model": ContactResponse},
        400: {"description": "Invalid contact or duplicate email", "model": ErrorResponse},
    },
    summary="Create a contact",
)
async def create_contact(
    request: Request,
    response: Response,
    payload: Any = Body(default=None),
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    """
    Create a contact.

    The Location header points at the new resource under the same prefix
    the request used (/contacts or /v1/contacts).
    """
    contact = await service.create_contact(payload)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{contact.id}"
    return contact


@router.put(
    "/contacts/{contact_id}",
    status_code=303,
    response_class=Response,
    responses={
        303: {"description": "Contact updated; see Location"},
        400: {"description": "Invalid contact or duplicate email", "model": ErrorResponse},
        404: {"description": "Contact not found", "model": ErrorResponse},
    },
    summary="Replace a contact",
)
async def update_contact(
    contact_id: str,
    request: Request,
    payload: Any = Body(default=None),
    service: ContactService = Depends(get_contact_service),
) -> Response:
    contact = await service.update_contact(contact_id, payload)
    location = request.url.path.rsplit("/", 1)[0] + f"/{contact.id}"
    return Response(status_code=303, headers={"Location": location})


@router.delete(
    "/contacts/{contact_id}",
    response_model=ContactResponse,
    responses={404: {"description": "Contact not found", "model": ErrorResponse}},
    summary="Delete a contact",
)
async def delete_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    """Delete a contact and return the removed record."""
    return await service.delete_contact(contact_id)
