"""
CodeCollab Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) translate them
       into `{"success": false, "error": ...}` envelopes with the right status.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    CodeCollabError (base)
    ├── ValidationError   → 400 Bad Request
    ├── NotFoundError     → 404 Not Found (also used for malformed ids)
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional, Union


class CodeCollabError(Exception):
    """
    Base exception for all CodeCollab application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CodeCollabError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request

    `errors` is either a single message (the create-time title check) or a
    list of constraint messages; the envelope's `error` field carries it
    unchanged.

    Example responses:
        {"success": false, "error": "Please provide a project title"}
        {"success": false, "error": ["Title cannot be more than 100 characters"]}
    """

    def __init__(
        self,
        errors: Union[str, List[str]] = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.errors = errors
        message = errors if isinstance(errors, str) else "; ".join(errors)
        super().__init__(message=message, context=context)


class NotFoundError(CodeCollabError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /api/projects/{id} with an unknown or malformed id.
    HTTP:    404 Not Found

    The service converts SQLAlchemy's `None` result (and unparseable ids)
    into this exception, keeping HTTP concerns out of the query code.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(CodeCollabError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is the fixed per-operation text
        passed in by the service. Driver details (SQL, constraint names) go
        to the server log via `context` only.
    """

    def __init__(
        self,
        message: str = "Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
