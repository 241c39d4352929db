"""
Domain errors raised by services and dependencies.

Each error carries the HTTP status it maps to; the handlers registered in
``newsdesk.main`` turn them into ``{"message": ...}`` JSON responses.
"""

from typing import Optional


class NewsdeskError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code: int = 500
    default_message: str = "An error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class Unauthorized(NewsdeskError):
    status_code = 401
    default_message = "Unauthorized Token"


class InvalidCredential(NewsdeskError):
    status_code = 401
    default_message = "Invalid or expired token"


class ValidationError(NewsdeskError):
    status_code = 400
    default_message = "Invalid request body"


class InvalidIdentifier(NewsdeskError):
    status_code = 400
    default_message = "Invalid ID"


class NotFound(NewsdeskError):
    status_code = 404
    default_message = "Not found"


class Forbidden(NewsdeskError):
    status_code = 403
    default_message = "Forbidden"


class SelfDeleteDenied(Forbidden):
    default_message = "You cannot delete your own account"


class Conflict(NewsdeskError):
    status_code = 409
    default_message = "Operation not allowed in the current state"


class Unavailable(NewsdeskError):
    status_code = 500
    default_message = "Database not initialized"


class Internal(NewsdeskError):
    status_code = 500
    default_message = "Internal server error"
