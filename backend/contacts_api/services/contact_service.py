"""
Contacts API — Contact Service (Business Logic)
=================================================

What:  CRUD operations and the list workflow for contacts.
How:   Wraps a ContactStore (the repository for the current request),
       validates request bodies against ContactPayload, and runs the
       list-query pipeline over a single find() per list request.
Who:   Built per request by the `get_contact_service` dependency and called
       by the route handlers in routes/contacts.py.

List Flow (GET /contacts):
    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌──────────┐
    │  find()  │───▶│  Filter  │───▶│   Sort   │───▶│   Page   │
    │  (store) │    │          │    │ (stable) │    │          │
    └──────────┘    └──────────┘    └──────────┘    └──────────┘

Error Handling:
    Validation failures    → InvalidContactError (400)
    Unknown ids            → ContactNotFoundError (404)
    Email collisions       → DuplicateContactResourceError (400, from the store)
    Pipeline errors        → InvalidFilterOperatorError (400) / PageOutOfRangeError (416)
    Storage failures       → DatabaseError (500, from the store)
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from contacts_api.exceptions import ContactNotFoundError, InvalidContactError
from contacts_api.models.contact import Contact
from contacts_api.repositories.contact_repository import ContactStore
from contacts_api.schemas.contact import (
    ContactListResponse,
    ContactPayload,
    ContactResponse,
    PaginationInfo,
)
from contacts_api.services.list_query import ListQuery, run_list_query

logger = logging.getLogger(__name__)


def validate_contact_payload(payload: Any) -> Dict[str, Any]:
    """
    Validate a raw request body and return the column values to store.

    Raises:
        InvalidContactError: body is not an object, a required field is
            missing or empty, or a field is malformed.
    """
    if not isinstance(payload, dict):
        raise InvalidContactError(message="Request body must be a JSON object")

    try:
        contact = ContactPayload.model_validate(payload)
    except PydanticValidationError as e:
        problems = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        first = problems[0]
        raise InvalidContactError(
            message=f"Invalid contact field '{first['field']}': {first['message']}",
            field=first["field"],
            context={"errors": problems},
        )

    return contact.model_dump()


class ContactService:
    """
    Business logic layer for contact operations.

    Responsibilities:
        - list_contacts(): one fetch, then filter → sort → paginate
        - get_contact(): single lookup with not-found handling
        - create_contact() / update_contact(): validate, then write
        - delete_contact(): remove and return the deleted record
    """

    def __init__(self, store: ContactStore) -> None:
        self._store = store

    async def list_contacts(self, query: ListQuery) -> ContactListResponse:
        """
        Run the list-query pipeline over every stored contact.

        Raises:
            InvalidFilterOperatorError: unsupported X-Filter-Operator
            PageOutOfRangeError: page outside [1, total] for a non-empty result
        """
        records = await self._store.find()
        page = run_list_query(records, query)

        logger.debug(
            "Listed contacts: %d matched, page %d/%d (size %d)",
            page.count,
            page.page,
            page.total,
            page.size,
        )

        return ContactListResponse(
            contacts=[ContactResponse.model_validate(c) for c in page.results],
            pagination=PaginationInfo(
                total_pages=page.total,
                total_contacts=page.count,
                current_page=page.page,
                page_size=page.size,
                next_page=page.next_page,
                prev_page=page.prev_page,
            ),
        )

    async def get_contact(self, contact_id: str) -> ContactResponse:
        """Return one contact or raise ContactNotFoundError."""
        contact = await self._store.find_by_id(contact_id)
        if contact is None:
            raise ContactNotFoundError(contact_id=contact_id)
        return ContactResponse.model_validate(contact)

    async def create_contact(self, payload: Any) -> ContactResponse:
        """Validate and store a new contact."""
        fields = validate_contact_payload(payload)
        contact: Contact = await self._store.insert(fields)
        logger.info("Contact created: %s", contact.id)
        return ContactResponse.model_validate(contact)

    async def update_contact(self, contact_id: str, payload: Any) -> ContactResponse:
        """
        Replace a contact's fields.

        The body is validated before the lookup, so an invalid body for an
        unknown id reports 400 rather than 404.
        """
        fields = validate_contact_payload(payload)
        contact = await self._store.update_by_id(contact_id, fields)
        if contact is None:
            raise ContactNotFoundError(contact_id=contact_id)
        logger.info("Contact updated: %s", contact.id)
        return ContactResponse.model_validate(contact)

    async def delete_contact(self, contact_id: str) -> ContactResponse:
        """Delete a contact and return what was removed."""
        contact = await self._store.delete_by_id(contact_id)
        if contact is None:
            raise ContactNotFoundError(contact_id=contact_id)
        logger.info("Contact deleted: %s", contact.id)
        return ContactResponse.model_validate(contact)
