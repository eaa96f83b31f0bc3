"""
Habit Tracker Backend — Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for the two failure kinds the API has.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by the habit service and the store; caught by global handlers.

Exception Hierarchy:
    HabitTrackerError (base)
    ├── ValidationError   → 400 Bad Request
    └── StoreError        → 500 Internal Server Error

Both messages are returned to the caller verbatim. The service is an
internal tool and the raw store text is the only diagnostic a caller gets.
"""

from typing import Any, Dict, Optional


class HabitTrackerError(Exception):
    """
    Base exception for all habit tracker application errors.

    Attributes:
        message:  Error description, returned in the API response
        context:  Additional debug info, logged server-side only
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HabitTrackerError):
    """
    Raised when a request payload is malformed or incomplete.

    When:    Missing required field (userId, id, text), value that cannot be
             coerced to the field type, update without a userId.
    HTTP:    400 Bad Request

    Example response:
        {"error": "Habit validation failed: text: Field required"}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class StoreError(HabitTrackerError):
    """
    Raised when the record store fails.

    When:    Connection refused or lost, missing table, constraint or driver
             error on any find/insert/update/delete call.
    HTTP:    500 Internal Server Error

    The message is the driver's own text. No retry is attempted anywhere;
    the failure surfaces to the caller immediately.
    """

    def __init__(
        self,
        message: str = "The habit store failed to complete the operation",
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(message=message, context=ctx)
        self.operation = operation
