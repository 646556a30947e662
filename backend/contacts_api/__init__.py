"""
Contacts API — Application Package Initializer
===============================================

What: Marks the `contacts_api` directory as a Python package.
Who:  Imported by uvicorn (`contacts_api.main:app`), Alembic and pytest.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (CRUD + list pipeline)   │  ← validation, filter/sort/page
    ├─────────────────────────────────────┤
    │   Repositories (storage access)     │  ← find / insert / update / delete
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes translate headers and query parameters into service calls and
    service results into status codes and headers. The list-query pipeline
    in `services.list_query` is pure and never touches the database.
"""

__version__ = "1.0.0"
