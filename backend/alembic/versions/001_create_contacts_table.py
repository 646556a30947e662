"""Create contacts table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `contacts` table with a unique index on email.
       The unique index is what turns a second contact with the same email
       into DuplicateContactResourceError.

Rollback: downgrade() drops the table (all contact data is lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the contacts table, its unique email index and ordering index."""
    op.create_table(
        "contacts",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("fname", sa.String(100), nullable=False),
        sa.Column("lname", sa.String(100), nullable=False),
        sa.Column(
            "email",
            sa.String(255),
            nullable=False,
            comment="Unique across all contacts",
        ),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("birthday", sa.Date(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Insertion time (UTC); base ordering for list queries",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("uq_contacts_email", "contacts", ["email"], unique=True)
    op.create_index("idx_contacts_created_at", "contacts", ["created_at"])


def downgrade() -> None:
    """Drop the contacts table entirely."""
    op.drop_index("idx_contacts_created_at", table_name="contacts")
    op.drop_index("uq_contacts_email", table_name="contacts")
    op.drop_table("contacts")
