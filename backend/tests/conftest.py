"""
Contacts API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── make_contact: Builds in-memory contact records for pipeline tests
    ├── mock_store: AsyncMock standing in for ContactRepository
    ├── test_settings: Settings pointing at in-memory SQLite
    ├── session_factory: Fresh in-memory database with the schema created
    ├── test_client: HTTPX AsyncClient bound to an app using that database
    └── seed_contacts: Inserts contacts directly through the session factory
"""

import os
import uuid
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

# Settings are read at import time; point them at SQLite before importing the app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from contacts_api.config import Settings
from contacts_api.database import build_engine, build_session_factory, create_schema
from contacts_api.main import create_app
from contacts_api.models.contact import Contact


@pytest.fixture
def make_contact():
    """
    Factory for lightweight contact records.

    Usage:
        c = make_contact("Ada", "Lovelace", birthday=date(1815, 12, 10))
    """
    def _make(
        fname: str,
        lname: str,
        email: str | None = None,
        phone: str | None = None,
        birthday: date = date(1990, 1, 1),
    ) -> SimpleNamespace:
        return SimpleNamespace(
            id=uuid.uuid4(),
            fname=fname,
            lname=lname,
            email=email or f"{fname.lower()}.{lname.lower()}@example.com",
            phone=phone,
            birthday=birthday,
        )

    return _make


@pytest.fixture
def mock_store():
    """
    Provides a mock ContactStore.

    Usage:
        mock_store.find.return_value = [contact]
        result = await ContactService(mock_store).list_contacts(ListQuery())
    """
    store = AsyncMock()
    store.find = AsyncMock(return_value=[])
    store.find_by_id = AsyncMock(return_value=None)
    store.insert = AsyncMock()
    store.update_by_id = AsyncMock(return_value=None)
    store.delete_by_id = AsyncMock(return_value=None)
    return store


@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        log_level="WARNING",
        default_page_size=10,
        max_page_size=100,
    )


@pytest_asyncio.fixture
async def session_factory(test_settings):
    """A fresh in-memory database per test."""
    engine = build_engine(test_settings)
    await create_schema(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(test_settings, session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/contacts")
            assert response.status_code == 200
    """
    app = create_app(settings=test_settings, session_factory=session_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def seed_contacts(session_factory):
    """
    Insert contacts straight into the database.

    Each row is a dict of Contact columns; created_at is staggered so the
    storage order matches the order given.
    """
    async def _seed(rows):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        contacts = []
        async with session_factory() as session:
            for i, row in enumerate(rows):
                contact = Contact(created_at=base + timedelta(seconds=i), **row)
                session.add(contact)
                contacts.append(contact)
            await session.commit()
        return contacts

    return _seed
