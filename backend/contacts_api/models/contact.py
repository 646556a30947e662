"""
Contacts API — Contact SQLAlchemy Model
=========================================

What:  ORM model representing the `contacts` table.
How:   Inherits from the shared DeclarativeBase; Alembic mirrors it in
       versions/001_create_contacts_table.py.
Who:   Used by ContactRepository for CRUD operations.

Table Design:
    - UUID primary key, generated in Python so the id is known after flush
    - email: unique index; duplicate detection relies on it
    - birthday: DATE (no time component)
    - created_at: insertion timestamp, internal only; gives find() a
      deterministic base order for the stable sort stage
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from contacts_api.database import Base


class Contact(Base):
    """
    A person's contact details.

    Lifecycle:
        1. Created by POST /contacts (id assigned here, never changed)
        2. Replaced in place by PUT /contacts/{id}
        3. Removed by DELETE /contacts/{id}
    """

    __tablename__ = "contacts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    fname: Mapped[str] = mapped_column(String(100), nullable=False)
    lname: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Unique across all contacts",
    )

    phone: Mapped[str | None] = mapped_column(String(50), nullable=True, default=None)

    birthday: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="Insertion time (UTC); base ordering for list queries",
    )

    __table_args__ = (
        Index("uq_contacts_email", "email", unique=True),
        Index("idx_contacts_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, email='{self.email}')>"
