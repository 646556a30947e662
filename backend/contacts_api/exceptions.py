"""
Contacts API — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions, one per failure kind the API reports.
How:   Each exception carries a user-facing message, an optional context dict
       (logged, and returned only for client errors) and a machine-readable
       `error_code`. The app factory maps each class to an HTTP status via
       `ERROR_STATUS_CODES` in main.py.
Who:   Raised by the list-query pipeline, the repository and the service;
       caught by the single ContactsAPIError handler.

Exception Hierarchy:
    ContactsAPIError (base)
    ├── InvalidContactError            → 400 Bad Request
    ├── DuplicateContactResourceError  → 400 Bad Request
    ├── InvalidFilterOperatorError     → 400 Bad Request
    ├── ContactNotFoundError           → 404 Not Found
    ├── PageOutOfRangeError            → 416 Range Not Satisfiable
    └── DatabaseError                  → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class ContactsAPIError(Exception):
    """
    Base exception for all Contacts API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    error_code = "internal_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidContactError(ContactsAPIError):
    """
    Raised when a contact payload is missing a required field or a field is
    malformed (empty name, bad email, unparseable birthday).

    HTTP: 400 Bad Request
    """

    error_code = "invalid_contact"

    def __init__(
        self,
        message: str = "Contact data is invalid",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DuplicateContactResourceError(ContactsAPIError):
    """
    Raised when storage rejects a contact because its email already exists.

    HTTP: 400 Bad Request
    """

    error_code = "duplicate_contact"

    def __init__(
        self,
        email: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = "A contact with this email already exists"
        if email:
            message = f"A contact with email '{email}' already exists"
        ctx = context or {}
        if email:
            ctx["email"] = email
        super().__init__(message=message, context=ctx)
        self.email = email


class InvalidFilterOperatorError(ContactsAPIError):
    """
    Raised by the filter stage for an operator other than `eq` or `gte`.

    HTTP: 400 Bad Request
    """

    error_code = "invalid_filter_operator"

    def __init__(
        self,
        operator: str,
        supported: Optional[tuple] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["operator"] = operator
        if supported:
            ctx["supported"] = list(supported)
        super().__init__(
            message=f"Invalid filter operator '{operator}'",
            context=ctx,
        )
        self.operator = operator


class ContactNotFoundError(ContactsAPIError):
    """
    Raised when no contact exists for the requested identifier.

    HTTP: 404 Not Found
    """

    error_code = "not_found"

    def __init__(
        self,
        contact_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = "Contact not found"
        if contact_id:
            message = f"Contact with ID '{contact_id}' was not found"
        ctx = context or {}
        if contact_id:
            ctx["contact_id"] = contact_id
        super().__init__(message=message, context=ctx)


class PageOutOfRangeError(ContactsAPIError):
    """
    Raised by the pager when the requested page lies outside [1, total].

    HTTP: 416 Range Not Satisfiable. The message states the valid range.
    """

    error_code = "page_out_of_range"

    def __init__(
        self,
        page: int,
        total: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update({"page": page, "min_page": 1, "max_page": total})
        super().__init__(
            message=(
                f"Requested page {page} is out of range. "
                f"Any value of 1 through {total} is allowed."
            ),
            context=ctx,
        )
        self.page = page
        self.total = total


class DatabaseError(ContactsAPIError):
    """
    Raised when a storage operation fails unexpectedly.

    HTTP: 500 Internal Server Error. The response message is always generic;
    the context is logged server-side only.
    """

    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
