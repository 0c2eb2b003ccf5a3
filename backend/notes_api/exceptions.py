"""
Notes API: Custom Exception Hierarchy
======================================

What:  Application-specific exceptions for the three failure classes a note
       operation can end in.
How:   Each exception carries a human-readable ``message``, an ``error``
       detail string, and an optional ``context`` dict for logging. Global
       exception handlers (registered in main.py) turn them into the uniform
       response envelope with the matching HTTP status code.
Who:   Raised by the connection manager, repository and service layers.

Exception Hierarchy:
    NotesAPIError (base)
    ├── ValidationError              → 400 Bad Request
    ├── NotFoundError                → 404 Not Found
    └── InternalError                → 500 Internal Server Error
        └── DatabaseUnavailableError → 500 (no database configured/reachable)

Envelope produced for every error:
    {"success": false, "message": "<what failed>", "error": "<detail>"}
"""

from typing import Any, Dict, Optional


class NotesAPIError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:     User-facing description of the failed operation
        error:       Underlying detail (returned to the caller in ``error``)
        context:     Extra debug info (logged only)
        status_code: HTTP status the global handler responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error = error or message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesAPIError):
    """
    Raised when the client omitted a required field or sent an unusable value.

    HTTP: 400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        fields: Optional[list] = None,
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = list(fields)
            if error is None:
                error = "Missing required field(s): " + ", ".join(fields)
        super().__init__(message=message, error=error, context=ctx)
        self.fields = list(fields or [])


class NotFoundError(NotesAPIError):
    """
    Raised when a referenced note id does not resolve to a record.

    HTTP: 404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        error = f"No {resource.lower()} exists"
        if resource_id:
            ctx["resource_id"] = resource_id
            error = f"{resource} with ID '{resource_id}' was not found"
        super().__init__(message=f"{resource} not found", error=error, context=ctx)
        self.resource_id = resource_id


class InternalError(NotesAPIError):
    """
    Raised when a storage or driver call fails.

    Covers connection faults, constraint violations, and identifiers the
    storage layer cannot parse. The underlying exception text is surfaced in
    ``error`` so the caller can see what went wrong.

    HTTP: 500 Internal Server Error
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, error=error, context=context)


class DatabaseUnavailableError(InternalError):
    """Raised when a data operation runs while no database connection exists."""

    def __init__(
        self,
        message: str = "Database connection is not available",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error="DATABASE_URL is not configured or the database could not be reached",
            context=context,
        )
