# Routes package init
"""
Contacts API — API Routes Package
===================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - contacts.py:  GET/POST /contacts, GET/PUT/DELETE /contacts/{id}
                    (also mounted under /v1)
    - health.py:    GET /health

Routes stay thin: they read query parameters, headers and bodies, call
ContactService, and set status codes and response headers. Validation and
the list-query pipeline live in the services package.
"""
