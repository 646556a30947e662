# Services package init
"""
Contacts API — Services Layer
===============================

What:  Business logic between routes (HTTP) and repositories (persistence).
How:   Services accept plain values, apply business rules, and return
       response schemas. They are built per request through FastAPI
       dependencies.

Service Inventory:
    - list_query:       Pure filter / sort / paginate pipeline for list results
    - ContactService:   Validation, CRUD orchestration, list workflow
"""
