"""
Error taxonomy shared by services, the auth gate and the HTTP error handlers.

Every ApiError carries the status code and message that end up in the
response envelope. TokenSigningError is not an ApiError; it is raised
when the app is built with a missing or unusable signing secret.
"""
from __future__ import annotations

from typing import List, Optional


class ApiError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)


class ValidationError(ApiError):
    """Malformed or missing input, including badly formed ids."""
    status_code = 400
    default_message = "Invalid input"


class UnauthenticatedError(ApiError):
    status_code = 401
    default_message = "Unauthorized request"


class InvalidTokenError(UnauthenticatedError):
    """Bad signature, expired, malformed, or the wrong kind of token."""
    default_message = "Invalid token"


class StaleTokenError(UnauthenticatedError):
    """Refresh token was valid once but has since been rotated or logged out."""
    default_message = "Refresh token is expired or used"


class ForbiddenError(ApiError):
    status_code = 403
    default_message = "You are not allowed to perform this action"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Resource not found"


class DependencyError(ApiError):
    """Database or object-storage failure. The cause stays in the server log."""
    status_code = 500
    default_message = "An unexpected error occurred"


class TokenSigningError(Exception):
    pass
