"""
Application error hierarchy.

Services raise these; the handler registered in main.py turns them into
JSON responses with the matching status code:

    ApplicationError
    ├── ValidationError          400
    ├── AuthenticationError      401
    ├── AuthorizationError       403
    ├── NotFoundError            404
    ├── ResourceConflictError    409
    ├── CooldownError            429
    └── DatabaseError            500
"""

from typing import Any, Dict, Optional


class ApplicationError(Exception):
    status_code: int = 500
    code: str = "APPLICATION_ERROR"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        # Logged server side, never returned to the client
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ApplicationError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input."


class AuthenticationError(ApplicationError):
    status_code = 401
    code = "AUTH_ERROR"
    default_message = "Authentication required."


class AuthorizationError(ApplicationError):
    status_code = 403
    code = "AUTHORIZATION_ERROR"
    default_message = "Invalid or expired token."


class NotFoundError(ApplicationError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found."


class ResourceConflictError(ApplicationError):
    status_code = 409
    code = "RESOURCE_CONFLICT_ERROR"
    default_message = "Resource already exists."


class CooldownError(ApplicationError):
    status_code = 429
    code = "VERIFICATION_COOLDOWN"
    default_message = "Please wait before requesting another verification code."


class DatabaseError(ApplicationError):
    status_code = 500
    code = "DB_ERROR"
    default_message = "A database error occurred."
