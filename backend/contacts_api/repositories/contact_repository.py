"""
Contact repository for database operations.

Duplicate emails are detected here, at the storage layer: the unique index
on `contacts.email` rejects the row during flush and the IntegrityError is
translated into DuplicateContactResourceError. There is no separate
look-up-then-insert check.
"""

import logging
import uuid
from typing import Any, Dict, Optional, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from contacts_api.exceptions import DatabaseError, DuplicateContactResourceError
from contacts_api.models.contact import Contact

logger = logging.getLogger(__name__)


class ContactStore(Protocol):
    """Protocol for contact storage operations."""

    async def find(self) -> Sequence[Contact]:
        """Return every contact in insertion order."""
        ...

    async def find_by_id(self, contact_id: str) -> Optional[Contact]:
        """Return the contact with the given id, or None."""
        ...

    async def insert(self, fields: Dict[str, Any]) -> Contact:
        """Store a new contact; raises DuplicateContactResourceError on email collision."""
        ...

    async def update_by_id(self, contact_id: str, fields: Dict[str, Any]) -> Optional[Contact]:
        """Replace a contact's fields; None when the id does not exist."""
        ...

    async def delete_by_id(self, contact_id: str) -> Optional[Contact]:
        """Remove a contact and return it; None when the id does not exist."""
        ...


def parse_contact_id(contact_id: str) -> Optional[uuid.UUID]:
    """Parse a path identifier; malformed ids are treated as not found."""
    try:
        return uuid.UUID(str(contact_id))
    except ValueError:
        return None


class ContactRepository:
    """Repository for contact database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async database session.
        """
        self._session = session

    async def find(self) -> Sequence[Contact]:
        """Fetch all contacts.

        Returns:
            Contacts ordered by insertion time, then id.
        """
        stmt = select(Contact).order_by(Contact.created_at, Contact.id)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Database error listing contacts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve contacts. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return list(result.scalars().all())

    async def find_by_id(self, contact_id: str) -> Optional[Contact]:
        """Fetch one contact.

        Args:
            contact_id: Contact UUID as received in the request path.

        Returns:
            The contact, or None if the id is malformed or unknown.
        """
        parsed = parse_contact_id(contact_id)
        if parsed is None:
            return None
        try:
            return await self._session.get(Contact, parsed)
        except SQLAlchemyError as e:
            logger.error("Database error fetching contact %s: %s", contact_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the contact. Please try again.",
                context={"contact_id": str(contact_id)},
            )

    async def insert(self, fields: Dict[str, Any]) -> Contact:
        """Create a contact.

        Args:
            fields: Validated column values (fname, lname, email, phone, birthday).

        Returns:
            The stored contact with its id assigned.

        Raises:
            DuplicateContactResourceError: the email is already in use.
        """
        contact = Contact(**fields)
        self._session.add(contact)
        await self._flush(fields.get("email"))
        return contact

    async def update_by_id(
        self, contact_id: str, fields: Dict[str, Any]
    ) -> Optional[Contact]:
        """Replace a contact's fields in place; the id never changes.

        Returns:
            The updated contact, or None if it does not exist.

        Raises:
            DuplicateContactResourceError: the new email belongs to another contact.
        """
        contact = await self.find_by_id(contact_id)
        if contact is None:
            return None
        for name, value in fields.items():
            if name == "id":
                continue
            setattr(contact, name, value)
        await self._flush(fields.get("email"))
        return contact

    async def delete_by_id(self, contact_id: str) -> Optional[Contact]:
        """Delete a contact.

        Returns:
            The deleted contact, or None if it did not exist.
        """
        contact = await self.find_by_id(contact_id)
        if contact is None:
            return None
        await self._session.delete(contact)
        await self._flush()
        return contact

    async def _flush(self, email: Optional[str] = None) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            logger.info(
                "Unique constraint rejected contact email %s (%s)",
                email,
                type(e.orig).__name__,
            )
            raise DuplicateContactResourceError(email=email)
        except SQLAlchemyError as e:
            logger.error("Database error writing contact: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the contact. Please try again.",
                context={"error_type": type(e).__name__},
            )
